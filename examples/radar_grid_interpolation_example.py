import time
import numpy as np

from nexrad_level2 import read_level2_file
from radar_grid import (
    get_radar_info,
    get_available_fields,
    load_geometry,
    apply_geometry,
    get_field_data,
    polar_to_cartesian,
    resample_sweep_multi,
)


def main():
    print("=" * 60)
    print("RADAR_GRID MODULE - RESAMPLING EXAMPLE")
    print("=" * 60)

    # Load radar
    file = 'data/level2/KTLX20250315_191648_V06'
    volume = read_level2_file(file)

    # 1. Radar info
    print("\n1. RADAR INFO")
    print("-" * 40)
    info = get_radar_info(volume)
    for k, v in info.items():
        print(f"   {k}: {v}")

    # 2. Single moment resampling, geometry computed on the fly
    print("\n2. SINGLE MOMENT RESAMPLING")
    print("-" * 40)
    sweep_data = volume.get_data(0, 'REF')
    start = time.time()
    grid = polar_to_cartesian(sweep_data.data, sweep_data.azimuths, sweep_data.ranges, size=1000)
    elapsed = time.time() - start
    image = grid.as_2d()
    print(f"   REF resampling (cold cache): {elapsed:.2f} seconds")
    print(f"   Shape: {image.shape}")
    print(f"   Range: [{np.nanmin(image):.2f}, {np.nanmax(image):.2f}] dBZ")
    print(f"   Valid pixels: {grid.n_valid():,} / {image.size:,}")

    # Same geometry again, served from the cache
    start = time.time()
    polar_to_cartesian(sweep_data.data, sweep_data.azimuths, sweep_data.ranges, size=1000)
    print(f"   REF resampling (warm cache): {time.time() - start:.3f} seconds")

    # 3. Every moment of the sweep
    print("\n3. MULTI-MOMENT RESAMPLING")
    print("-" * 40)
    start = time.time()
    grids = resample_sweep_multi(volume, 0, size=1000)
    elapsed = time.time() - start
    print(f"   {len(grids)} moments resampled in {elapsed:.2f} seconds")
    for name, moment_grid in grids.items():
        values = moment_grid.as_2d()
        print(f"   {name}: [{np.nanmin(values):.2f}, {np.nanmax(values):.2f}]")

    # 4. Precomputed geometry from radar_grid_building_example.py
    print("\n4. PRECOMPUTED GEOMETRY")
    print("-" * 40)
    geometry = load_geometry(f"output/geometry/{info['radar_name']}_S00_SIZE2000_geometry.npz")
    for name in get_available_fields(volume, 0):
        grid = apply_geometry(geometry, get_field_data(volume, 0, name))
        print(f"   {name}: {grid.n_valid():,} valid pixels")

    print("\n" + "=" * 60)
    print("FINISHED RADAR_GRID RESAMPLING EXAMPLE!")
    print("=" * 60)


if __name__ == "__main__":
    main()
