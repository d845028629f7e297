"""
Basic example: Decode a single Level 2 file.

This example demonstrates the simplest use case - reading a NEXRAD
Level 2 archive and listing its sweeps and moments.
"""
import logging

import numpy as np

from nexrad_level2 import read_level2_file, MOMENT_DESCRIPTIONS, MOMENT_UNITS


def main():
    logging.basicConfig(level=logging.INFO)

    # Path to your Level 2 archive
    radar_file = "data/level2/KTLX20250315_191648_V06"

    volume = read_level2_file(radar_file)

    # Print results
    print(f"Station: {volume.station_id}")
    print(f"Time: {volume.timestamp}")
    print(f"VCP: {volume.vcp}")
    if volume.site is not None:
        print(f"Site: {volume.site.latitude:.4f}, {volume.site.longitude:.4f}, {volume.site.height:.0f} m")

    print("\nSweeps:")
    for sweep in volume.sweeps:
        moments = ", ".join(volume.get_moments_for_sweep(sweep.index))
        print(f"  {sweep.index:2d}: {sweep.elevation:5.2f} deg, {sweep.ray_count} rays [{moments}]")

    # Extract reflectivity from the lowest sweep
    result = volume.get_data(0, "REF")
    n_rays, n_gates = result.dims
    print(f"\n{MOMENT_DESCRIPTIONS['REF']} ({MOMENT_UNITS['REF']}): {n_rays} rays x {n_gates} gates")
    print(f"Range: {result.ranges[0]:.2f} - {result.ranges[-1]:.2f} km")
    print(f"Values: [{np.nanmin(result.data):.1f}, {np.nanmax(result.data):.1f}]")

    stats = volume.stats
    print(f"\nRecords: {stats.records} ({stats.failed_decompressions} failed)")
    print(f"Rays: {stats.rays_accepted} accepted, {stats.rays_rejected} rejected")


if __name__ == "__main__":
    main()
