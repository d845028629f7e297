import numpy as np
import time
import os

from nexrad_level2 import read_level2_file
from radar_grid import (
    compute_polar_geometry,
    save_geometry,
    load_geometry,
    get_radar_info,
)


def main():
    print("=" * 60)
    print("RADAR_GRID MODULE - BUILDING GEOMETRY EXAMPLE")
    print("=" * 60)

    # Load radar
    file = 'data/level2/KTLX20250315_191648_V06'
    volume = read_level2_file(file)

    print("Radar info:")
    info = get_radar_info(volume)
    for k, v in info.items():
        print(f"  {k}: {v}")

    # Grid configuration
    image_size = 2000
    sweep_index = 0
    n_workers = os.cpu_count()
    print("Grid configuration:")
    print(f"  Image size: {image_size} px")
    print(f"  Sweep: {sweep_index}")
    print(f"  Workers: {n_workers}")

    geometry_dir = 'output/geometry'
    os.makedirs(geometry_dir, exist_ok=True)

    # Every moment of a sweep shares the same azimuths and ranges
    sweep_data = volume.get_data(sweep_index, 'REF')
    print(f"\nPolar shape: {sweep_data.dims[0]} rays x {sweep_data.dims[1]} gates")

    print("\n--- Computing geometry ---")
    start = time.time()
    geometry = compute_polar_geometry(
        sweep_data.azimuths,
        sweep_data.ranges,
        size=image_size,
        n_workers=n_workers,
    )
    print(f"Computed in {time.time() - start:.2f} seconds")
    print(geometry)
    print(f"Pixel spacing: {geometry.pixel_spacing():.3f} km")

    file_name = f"{info['radar_name']}_S{sweep_index:02d}_SIZE{image_size}_geometry.npz"
    filepath = os.path.join(geometry_dir, file_name)

    print("\n--- Saving and reloading ---")
    save_geometry(geometry, filepath)
    loaded = load_geometry(filepath)
    assert np.array_equal(loaded.gate_indices, geometry.gate_indices)
    print(f"Reloaded {filepath}")

    print("\n" + "=" * 60)
    print("FINISHED RADAR_GRID BUILDING EXAMPLE!")
    print("=" * 60)


if __name__ == "__main__":
    main()
