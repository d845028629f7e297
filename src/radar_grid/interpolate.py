"""
Fast polar to Cartesian resampling using precomputed geometry.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Optional

from .cache import GEOMETRY_CACHE, geometry_cache_key
from .compute import compute_polar_geometry
from .constants import DEFAULT_IMAGE_SIZE, FILL_VALUE
from .geometry import PolarGridGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CartesianGrid:
    """
    Square grid of physical values produced from one sweep/moment.

    Attributes
    ----------
    data : np.ndarray
        Row-major float32 values, shape (size * size,). NaN marks pixels
        with no polar sample.
    size : int
        Side length of the grid in pixels
    min_range, max_range : float
        Range limits the grid was built with
    """

    data: np.ndarray = field(repr=False)
    size: int
    min_range: float
    max_range: float

    def as_2d(self) -> np.ndarray:
        """Return the values as a (size, size) view, row 0 at the top."""
        return self.data.reshape(self.size, self.size)

    def n_valid(self) -> int:
        """Return number of pixels holding a value."""
        return int(np.count_nonzero(~np.isnan(self.data)))


def apply_geometry(
    geometry: PolarGridGeometry,
    field_data: np.ndarray,
    fill_value: float = FILL_VALUE
) -> CartesianGrid:
    """
    Apply precomputed geometry to resample one moment onto the grid.

    Parameters
    ----------
    geometry : PolarGridGeometry
        Precomputed mapping from compute_polar_geometry
    field_data : np.ndarray
        Flat row-major (ray x gate) values, shape (n_rays * n_gates,).
        A 2-D (n_rays, n_gates) array or a masked array is accepted too;
        masked gates are treated as missing.
    fill_value : float, optional
        Value for pixels with no gate (default: NaN)

    Returns
    -------
    CartesianGrid
        The whole grid, fully computed
    """
    if np.ma.isMaskedArray(field_data):
        field_data = np.ma.filled(field_data.astype('float32'), np.nan)
    field_data = np.asarray(field_data, dtype='float32').ravel()

    expected = geometry.n_rays * geometry.n_gates
    if field_data.shape[0] != expected:
        raise ValueError(
            f"field_data has {field_data.shape[0]} values, geometry expects "
            f"{geometry.n_rays} rays x {geometry.n_gates} gates = {expected}"
        )

    result = np.full(geometry.n_pixels(), fill_value, dtype='float32')
    mapped = geometry.gate_indices >= 0
    result[mapped] = field_data[geometry.gate_indices[mapped]]

    return CartesianGrid(
        data=result,
        size=geometry.size,
        min_range=geometry.min_range,
        max_range=geometry.max_range,
    )


def get_geometry(
    azimuths: np.ndarray,
    ranges: np.ndarray,
    size: int = DEFAULT_IMAGE_SIZE,
    use_cache: bool = True,
    n_workers: Optional[int] = 1
) -> PolarGridGeometry:
    """
    Return the geometry for a sweep, computing it on a cache miss.

    Parameters
    ----------
    azimuths, ranges : np.ndarray
        Ray azimuths (degrees) and gate ranges of the sweep
    size : int, optional
        Side length of the output grid (default: DEFAULT_IMAGE_SIZE)
    use_cache : bool, optional
        Look up and store the geometry in GEOMETRY_CACHE (default: True)
    n_workers : int, optional
        Workers used on a cache miss (default: 1)
    """
    if not use_cache:
        return compute_polar_geometry(azimuths, ranges, size, n_workers=n_workers)

    cache_key = geometry_cache_key(azimuths, ranges, size)
    geometry = GEOMETRY_CACHE.get(cache_key)
    if geometry is not None:
        logger.debug(f"Geometry cache hit: {cache_key[:12]}")
        return geometry

    geometry = compute_polar_geometry(azimuths, ranges, size, n_workers=n_workers)
    if geometry.gate_indices.nbytes <= GEOMETRY_CACHE.maxsize:
        GEOMETRY_CACHE[cache_key] = geometry
    return geometry


def polar_to_cartesian(
    field_data: np.ndarray,
    azimuths: np.ndarray,
    ranges: np.ndarray,
    size: int = DEFAULT_IMAGE_SIZE,
    use_cache: bool = True,
    n_workers: Optional[int] = 1,
    fill_value: float = FILL_VALUE
) -> CartesianGrid:
    """
    Resample one sweep/moment onto a square grid by nearest neighbour.

    Parameters
    ----------
    field_data : np.ndarray
        Flat row-major (ray x gate) values, shape (len(azimuths) * len(ranges),)
    azimuths : np.ndarray
        Ray azimuths in degrees, in the same order as the rows of field_data
    ranges : np.ndarray
        Monotonic gate ranges. The grid spans [-ranges[-1], +ranges[-1]].
    size : int, optional
        Side length of the output grid (default: DEFAULT_IMAGE_SIZE)
    use_cache : bool, optional
        Reuse geometry across calls with the same azimuths/ranges/size
    n_workers : int, optional
        Workers used to compute the geometry (default: 1)
    fill_value : float, optional
        Value for unmapped pixels (default: NaN)

    Returns
    -------
    CartesianGrid
    """
    geometry = get_geometry(azimuths, ranges, size, use_cache=use_cache, n_workers=n_workers)
    return apply_geometry(geometry, field_data, fill_value=fill_value)


def resample_sweep(sweep_data, size: int = DEFAULT_IMAGE_SIZE, **kwargs) -> CartesianGrid:
    """
    Resample a ``SweepData`` extraction result onto a square grid.

    Keyword arguments are passed to ``polar_to_cartesian``.
    """
    return polar_to_cartesian(
        sweep_data.data, sweep_data.azimuths, sweep_data.ranges, size=size, **kwargs
    )


def resample_sweep_multi(
    volume,
    sweep_index: int,
    moments=None,
    size: int = DEFAULT_IMAGE_SIZE,
    **kwargs
) -> Dict[str, CartesianGrid]:
    """
    Resample several moments of one sweep at once.

    Parameters
    ----------
    volume : nexrad_level2.RadarVolume
        Decoded volume
    sweep_index : int
        Dense sweep index
    moments : list of str, optional
        Moments to resample. Default: every moment of the sweep.
    size : int, optional
        Side length of the output grids (default: DEFAULT_IMAGE_SIZE)

    Returns
    -------
    dict
        Dictionary of {moment: CartesianGrid}
    """
    if moments is None:
        moments = volume.get_moments_for_sweep(sweep_index)

    results = {}
    for name in moments:
        sweep_data = volume.get_data(sweep_index, name)
        results[name] = resample_sweep(sweep_data, size=size, **kwargs)

    return results
