"""
Geometry computation with optional parallel processing.
"""

import logging
import numpy as np
from typing import Tuple, Optional
from multiprocessing import Pool

from .geometry import PolarGridGeometry

logger = logging.getLogger(__name__)


def _process_row_band(args) -> Tuple[int, np.ndarray]:
    """
    Worker function to map one horizontal band of pixels.

    This function is designed to be called by multiprocessing.Pool.
    For every pixel in rows [row_start, row_end) it finds the nearest
    azimuth and range gate by binary search and returns the flat gate
    indices of the band.
    """
    (row_start, row_end, size, min_range, max_range,
     az_sorted, az_order, ranges) = args

    half = size / 2.0
    n_gates = ranges.shape[0]

    py = np.arange(row_start, row_end, dtype='float64')[:, np.newaxis]
    px = np.arange(size, dtype='float64')[np.newaxis, :]
    dx = px - half
    dy = half - py

    pixel_range = np.sqrt(dx * dx + dy * dy) * (max_range / half)
    pixel_az = np.degrees(np.arctan2(dx, dy))
    pixel_az = np.where(pixel_az < 0, pixel_az + 360.0, pixel_az)

    in_range = (pixel_range >= min_range) & (pixel_range <= max_range)

    # Last azimuth <= target; wrap to the last ray below the first azimuth
    az_pos = np.searchsorted(az_sorted, pixel_az, side='right') - 1
    az_pos[az_pos < 0] = az_sorted.shape[0] - 1
    ray_idx = az_order[az_pos]

    gate_idx = np.searchsorted(ranges, pixel_range, side='right') - 1
    gate_idx = np.clip(gate_idx, 0, n_gates - 1)

    band = np.where(in_range, ray_idx * n_gates + gate_idx, -1).astype('int32')
    return row_start, band.ravel()


def compute_polar_geometry(
    azimuths: np.ndarray,
    ranges: np.ndarray,
    size: int,
    n_workers: Optional[int] = 1,
    band_rows: int = 256
) -> PolarGridGeometry:
    """
    Compute the nearest-neighbour mapping from grid pixels to polar gates.

    The grid is centred on the radar and spans [-max_range, +max_range] on
    both axes, ``max_range`` and ``min_range`` being the last and first
    entries of ``ranges``. For pixel (px, py)::

        dx = px - size/2, dy = size/2 - py
        range = sqrt(dx² + dy²) * max_range / (size/2)
        azimuth = atan2(dx, dy) in degrees, wrapped to [0, 360)

    so 0° points to the top edge and azimuth grows clockwise. The chosen ray
    is the last one whose azimuth is <= the pixel azimuth (the last ray when
    the pixel azimuth is below every ray), the chosen gate the last one whose
    range is <= the pixel range, clamped into bounds.

    Parameters
    ----------
    azimuths : np.ndarray
        Azimuth of each ray in degrees, any order, shape (n_rays,)
    ranges : np.ndarray
        Monotonically increasing gate ranges, shape (n_gates,)
    size : int
        Side length of the square output grid in pixels
    n_workers : int, optional
        Number of parallel workers. Default: 1 (sequential).
        None uses one worker per CPU.
    band_rows : int, optional
        Rows handed to a worker at a time (default: 256)

    Returns
    -------
    PolarGridGeometry
        Precomputed mapping ready for fast resampling of any moment of the
        same sweep geometry
    """
    azimuths = np.asarray(azimuths, dtype='float64')
    ranges = np.asarray(ranges, dtype='float64')

    # Validate inputs
    if size < 1:
        raise ValueError(f"size must be positive, got {size}")
    if azimuths.ndim != 1 or azimuths.shape[0] == 0:
        raise ValueError("azimuths must be a non-empty 1-D array")
    if ranges.ndim != 1 or ranges.shape[0] == 0:
        raise ValueError("ranges must be a non-empty 1-D array")
    if band_rows < 1:
        raise ValueError(f"band_rows must be positive, got {band_rows}")

    min_range = float(ranges[0])
    max_range = float(ranges[-1])

    az_order = np.argsort(azimuths, kind='stable')
    az_sorted = azimuths[az_order]

    args_list = [
        (row_start, min(row_start + band_rows, size), size, min_range, max_range,
         az_sorted, az_order, ranges)
        for row_start in range(0, size, band_rows)
    ]

    logger.info(
        f"Computing {size}x{size} geometry for {azimuths.shape[0]} rays x "
        f"{ranges.shape[0]} gates ({len(args_list)} bands, {n_workers or 'all'} worker(s))"
    )

    gate_indices = np.empty(size * size, dtype='int32')

    if n_workers == 1 or len(args_list) == 1:
        # Sequential processing
        results = map(_process_row_band, args_list)
    else:
        # Parallel processing
        with Pool(n_workers) as pool:
            results = list(pool.imap_unordered(_process_row_band, args_list))

    for row_start, band in results:
        offset = row_start * size
        gate_indices[offset:offset + band.shape[0]] = band
        logger.debug(f"  Rows from {row_start}: {np.count_nonzero(band >= 0):,} mapped")

    return PolarGridGeometry(
        size=size,
        max_range=max_range,
        min_range=min_range,
        n_rays=int(azimuths.shape[0]),
        n_gates=int(ranges.shape[0]),
        gate_indices=gate_indices,
    )
