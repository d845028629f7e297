"""
PolarGridGeometry class and serialization functions.
"""

import logging
import os
import numpy as np
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class PolarGridGeometry:
    """
    Stores the precomputed pixel-to-gate mapping of a square grid.

    Every pixel of an ``size x size`` grid centred on the radar is mapped to
    the single polar sample (ray, gate) nearest to it, so that any moment of a
    sweep with the same azimuths and ranges can be resampled with one fancy
    indexing operation.

    Attributes
    ----------
    size : int
        Side length of the square output grid in pixels
    max_range : float
        Range of the last gate; the grid spans [-max_range, +max_range]
        on both axes. Same units as the ranges it was computed from.
    min_range : float
        Range of the first gate; pixels closer than this are unmapped
    n_rays : int
        Number of rays of the polar data the mapping indexes into
    n_gates : int
        Number of gates per ray of the polar data
    gate_indices : np.ndarray
        Flat index ``ray * n_gates + gate`` for each pixel, row-major,
        shape (size * size,). -1 marks pixels outside [min_range, max_range].

    Notes
    -----
    Row 0 is the top (north) edge of the grid, column 0 the west edge.
    """

    size: int
    max_range: float
    min_range: float
    n_rays: int
    n_gates: int
    gate_indices: np.ndarray

    def memory_usage_mb(self) -> float:
        """Return memory usage in megabytes."""
        return self.gate_indices.nbytes / 1e6

    def n_pixels(self) -> int:
        """Return total number of pixels."""
        return self.size * self.size

    def n_mapped(self) -> int:
        """Return number of pixels mapped to a gate."""
        return int(np.count_nonzero(self.gate_indices >= 0))

    def pixel_spacing(self) -> float:
        """Return the width of one pixel in range units."""
        return 2.0 * self.max_range / self.size

    def __repr__(self) -> str:
        return (
            f"PolarGridGeometry(\n"
            f"  size={self.size},\n"
            f"  range=[{self.min_range}, {self.max_range}],\n"
            f"  polar_shape=({self.n_rays}, {self.n_gates}),\n"
            f"  n_mapped={self.n_mapped():,},\n"
            f"  memory={self.memory_usage_mb():.1f} MB\n"
            f")"
        )


def save_geometry(geometry: PolarGridGeometry, filepath: str) -> None:
    """
    Save geometry to disk using numpy's compressed format.

    Parameters
    ----------
    geometry : PolarGridGeometry
        The geometry object to save
    filepath : str
        Output file path (should end in .npz)
    """
    np.savez_compressed(
        filepath,
        size=np.array([geometry.size]),
        range_limits=np.array([geometry.min_range, geometry.max_range]),
        polar_shape=np.array([geometry.n_rays, geometry.n_gates]),
        gate_indices=geometry.gate_indices,
    )
    file_size_mb = os.path.getsize(filepath) / 1e6
    logger.info(f"Saved geometry to {filepath} ({file_size_mb:.1f} MB on disk)")


def load_geometry(filepath: str) -> PolarGridGeometry:
    """
    Load geometry from disk.

    Parameters
    ----------
    filepath : str
        Path to the .npz file

    Returns
    -------
    PolarGridGeometry
        The loaded geometry object
    """
    with np.load(filepath) as data:
        geometry = PolarGridGeometry(
            size=int(data['size'][0]),
            min_range=float(data['range_limits'][0]),
            max_range=float(data['range_limits'][1]),
            n_rays=int(data['polar_shape'][0]),
            n_gates=int(data['polar_shape'][1]),
            gate_indices=data['gate_indices'],
        )
    logger.info(f"Loaded geometry: {geometry.memory_usage_mb():.1f} MB in memory, size={geometry.size}")
    return geometry
