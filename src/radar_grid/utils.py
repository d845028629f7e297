"""
Utility functions for working with decoded radar volumes.
"""

import numpy as np
from typing import Optional, Tuple


def get_gate_coordinates(sweep_data) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute flattened Cartesian gate coordinates of a sweep.

    Parameters
    ----------
    sweep_data : nexrad_level2.SweepData
        Extraction result from ``RadarVolume.get_data``

    Returns
    -------
    gate_x : np.ndarray
        East offsets, shape (n_rays * n_gates,)
    gate_y : np.ndarray
        North offsets, shape (n_rays * n_gates,)

    Notes
    -----
    Coordinates are relative to the radar, in the units of the sweep
    ranges (kilometers), and follow the row-major (ray x gate) layout of
    ``sweep_data.data``. Beam elevation and Earth curvature are ignored.
    """
    az = np.deg2rad(sweep_data.azimuths.astype('float64'))[:, np.newaxis]
    rng = sweep_data.ranges.astype('float64')[np.newaxis, :]
    gate_x = (rng * np.sin(az)).ravel().astype('float32')
    gate_y = (rng * np.cos(az)).ravel().astype('float32')
    return gate_x, gate_y


def get_field_data(volume, sweep_index: int, moment: str) -> np.ndarray:
    """
    Extract one sweep/moment as a flattened masked array.

    Parameters
    ----------
    volume : nexrad_level2.RadarVolume
        Decoded volume
    sweep_index : int
        Dense sweep index
    moment : str
        Moment name (e.g., 'REF', 'VEL', 'ZDR')

    Returns
    -------
    field_data : np.ma.MaskedArray
        Flattened masked values, shape (n_rays * n_gates,)

    Notes
    -----
    Uses np.ma.masked_invalid() so below-threshold and range-folded gates
    (NaN) are masked.
    """
    sweep_data = volume.get_data(sweep_index, moment)
    return np.ma.masked_invalid(sweep_data.data).astype('float32')


def get_available_fields(volume, sweep_index: Optional[int] = None) -> list:
    """
    Get list of available moment names.

    Parameters
    ----------
    volume : nexrad_level2.RadarVolume
        Decoded volume
    sweep_index : int, optional
        Restrict to one sweep. Default: the whole volume.

    Returns
    -------
    list
        Sorted list of moment names
    """
    if sweep_index is None:
        return volume.moments
    return volume.get_moments_for_sweep(sweep_index)


def get_radar_info(volume) -> dict:
    """
    Get basic information about a decoded volume.

    Parameters
    ----------
    volume : nexrad_level2.RadarVolume
        Decoded volume

    Returns
    -------
    dict
        Dictionary with radar metadata
    """
    sweeps = volume.sweeps
    site = volume.site
    return {
        'radar_name': volume.station_id or 'UNKNOWN',
        'timestamp': volume.timestamp.isoformat() if volume.timestamp else None,
        'vcp': volume.vcp,
        'nsweeps': len(sweeps),
        'nrays': sum(s.ray_count for s in sweeps),
        'elevations': [s.elevation for s in sweeps],
        'fields': volume.moments,
        'latitude': site.latitude if site else None,
        'longitude': site.longitude if site else None,
        'altitude': site.height if site else None,
    }
