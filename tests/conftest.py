"""
Pytest configuration and fixtures.
"""
import pytest
import numpy as np

import synthetic


@pytest.fixture
def single_ray_archive():
    """One uncompressed record, one ray, one REF moment with raw gates 2, 3, 4."""
    return synthetic.archive(synthetic.record(synthetic.ray_message(values=(2, 3, 4))))


@pytest.fixture
def multi_sweep_archive():
    """Three sweeps stored in raw order 3, 1, 2, split over compressed records."""
    sweep3 = synthetic.sweep_messages(3, [0.0, 120.0, 240.0], elevation=2.4)
    sweep1 = synthetic.sweep_messages(1, [10.0, 100.0, 190.0, 280.0], elevation=0.5)
    sweep2 = synthetic.sweep_messages(2, [5.0, 185.0], elevation=1.5)
    return synthetic.archive(
        synthetic.record(sweep3, compress=True),
        synthetic.record(sweep1, compress=True),
        synthetic.record(sweep2),
    )


@pytest.fixture
def sample_polar_data():
    """Four rays at 0/90/180/270 degrees, five gates from 1 to 5 km."""
    azimuths = np.array([0.0, 90.0, 180.0, 270.0], dtype=np.float32)
    ranges = np.array([1.0, 2.0, 3.0, 4.0, 5.0], dtype=np.float32)
    data = (np.arange(4)[:, np.newaxis] * 10 + np.arange(5)[np.newaxis, :]).astype(np.float32)
    return data.ravel(), azimuths, ranges


@pytest.fixture(autouse=True)
def clear_caches():
    """Clear caches before and after each test."""
    from radar_grid.cache import GEOMETRY_CACHE
    GEOMETRY_CACHE.clear()
    yield
    GEOMETRY_CACHE.clear()
