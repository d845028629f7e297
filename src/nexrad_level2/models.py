"""
Data classes produced by the Level 2 decoder.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class MomentRecord:
    """
    One radar moment sampled along a single ray.

    Attributes
    ----------
    name : str
        Canonical moment identifier (REF, VEL, SW, ZDR, PHI, RHO, CFP)
    gate_count : int
        Number of range gates, 1 to 2000
    first_gate : float
        Range to the first gate in kilometers
    gate_spacing : float
        Distance between gates in kilometers
    data : np.ndarray
        Physical values, float32, shape (gate_count,). NaN marks gates below
        threshold or range folded.
    """

    name: str
    gate_count: int
    first_gate: float
    gate_spacing: float
    data: np.ndarray = field(repr=False)

    def ranges(self) -> np.ndarray:
        """Return the range of each gate in kilometers."""
        return (
            np.arange(self.gate_count, dtype="float32") * np.float32(self.gate_spacing)
            + np.float32(self.first_gate)
        )


@dataclass(frozen=True)
class SiteLocation:
    """Radar position as reported by the volume data block."""

    latitude: float
    longitude: float
    height: float


@dataclass(frozen=True, eq=False)
class Ray:
    """One azimuthal sample within a sweep."""

    azimuth: float
    elevation: float
    sweep_number: int
    moments: Dict[str, MomentRecord] = field(repr=False)
    station_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    vcp: int = 0
    site: Optional[SiteLocation] = None


@dataclass(frozen=True)
class Sweep:
    """
    Metadata for one sweep of a volume.

    ``index`` is the dense position in the volume, ``number`` the raw
    elevation number the rays carried in the file.
    """

    index: int
    elevation: float
    ray_count: int
    number: int


@dataclass(frozen=True, eq=False)
class SweepData:
    """
    One moment of one sweep, flattened for rendering.

    Attributes
    ----------
    moment : str
        Moment identifier
    sweep_index : int
        Dense sweep index
    data : np.ndarray
        Row-major (ray x gate) physical values, float32, length n_rays * n_gates
    azimuths : np.ndarray
        Azimuth of each ray in file order, float32, shape (n_rays,)
    ranges : np.ndarray
        Gate ranges in kilometers, float32, shape (n_gates,)
    elevation : float
        Mean elevation angle of the sweep
    dims : tuple of int
        (n_rays, n_gates)
    """

    moment: str
    sweep_index: int
    data: np.ndarray = field(repr=False)
    azimuths: np.ndarray = field(repr=False)
    ranges: np.ndarray = field(repr=False)
    elevation: float
    dims: Tuple[int, int]

    def as_2d(self) -> np.ndarray:
        """Return the samples as an (n_rays, n_gates) view."""
        return self.data.reshape(self.dims)


@dataclass
class DecodeStats:
    """Counters collected while decoding one buffer."""

    records: int = 0
    compressed_records: int = 0
    failed_decompressions: int = 0
    messages: int = 0
    radial_messages: int = 0
    resyncs: int = 0
    rays_accepted: int = 0
    rays_rejected: int = 0
    truncated: bool = False
