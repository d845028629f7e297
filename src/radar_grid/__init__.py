"""
radar_grid - Fast polar to Cartesian resampling with precomputed geometry
"""

from .geometry import PolarGridGeometry, save_geometry, load_geometry
from .compute import compute_polar_geometry
from .interpolate import (
    CartesianGrid,
    apply_geometry,
    get_geometry,
    polar_to_cartesian,
    resample_sweep,
    resample_sweep_multi,
)
from .cache import GEOMETRY_CACHE, geometry_cache_key
from .constants import DEFAULT_IMAGE_SIZE
from .utils import get_gate_coordinates, get_field_data, get_available_fields, get_radar_info

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "PolarGridGeometry",
    "CartesianGrid",
    # Geometry I/O
    "save_geometry",
    "load_geometry",
    # Computation
    "compute_polar_geometry",
    # Resampling
    "apply_geometry",
    "get_geometry",
    "polar_to_cartesian",
    "resample_sweep",
    "resample_sweep_multi",
    # Cache
    "GEOMETRY_CACHE",
    "geometry_cache_key",
    "DEFAULT_IMAGE_SIZE",
    # Utilities
    "get_gate_coordinates",
    "get_field_data",
    "get_available_fields",
    "get_radar_info",
]
