"""
Cache implementation for resampling geometries using LRU cache.
"""
import hashlib

from cachetools import LRUCache
import numpy as np

from .constants import GEOMETRY_CACHE_BYTES


def _nbytes_geometry(geometry) -> int:
    """Calculate byte size of a cached PolarGridGeometry."""
    return getattr(geometry.gate_indices, "nbytes", 0)


def geometry_cache_key(azimuths: np.ndarray, ranges: np.ndarray, size: int) -> str:
    """
    Build a stable cache key for a sweep geometry.

    Two sweeps share a key when their azimuths and ranges are identical as
    float64, the precision the geometry is computed in, in the same order,
    and the same grid size is requested.
    """
    h = hashlib.sha1()
    h.update(np.ascontiguousarray(azimuths, dtype="float64").tobytes())
    h.update(b"|")
    h.update(np.ascontiguousarray(ranges, dtype="float64").tobytes())
    h.update(f"|{int(size)}".encode("utf-8"))
    return h.hexdigest()


# Geometry cache (256 MB limit)
GEOMETRY_CACHE = LRUCache(maxsize=GEOMETRY_CACHE_BYTES, getsizeof=_nbytes_geometry)
