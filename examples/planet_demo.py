#!/usr/bin/env python3
"""
Demo script showing planet generation and incremental chunk rebuilds.
"""

import numpy as np
from py_hexplanet.config import CellGeometrySettings, ColorMode, ColorSettings, ElevationSettings
from py_hexplanet.core import PlanetMesh


def main():
    """Demonstrate planet generation."""
    print("Py-Hexplanet Planet Generation Demo")
    print("=" * 40)

    planet = PlanetMesh(
        geometry=CellGeometrySettings(terraces_per_slope=2),
        elevation=ElevationSettings(seed=7, roughness=1.5, max_elevation=5, water_level=1),
        color=ColorSettings(),
    )

    for subdivisions in [1, 3, 5]:
        print(f"\nSubdivision level {subdivisions}:")
        print("-" * 30)

        planet.update_settings(subdivisions=subdivisions)
        vertices, colors, triangles = planet.combined_buffers()
        elevations = np.array([cell.elevation for cell in planet.cells])

        print(f"  Cells: {len(planet.cells)}")
        print(f"  Vertices: {len(vertices)}")
        print(f"  Triangles: {len(triangles)}")
        print(f"  Elevation range: {elevations.min()}-{elevations.max()}")
        print(f"  Cached levels: {len(planet.cache)}")

    # Changing only the palette re-colors cached cells; chunks are rebuilt a few per "frame"
    print("\nSwitching to gradient colors...")
    planet.update_settings(color=ColorSettings(mode=ColorMode.GRADIENT, gradient_seed=3))

    frame = 0
    while planet.rebuild_dirty_chunks(max_chunks=4):
        frame += 1
        dirty = sum(chunk.dirty for chunk in planet.chunks)
        print(f"  Frame {frame}: {dirty} chunks still dirty")

    # Picking
    cell = planet.cells[len(planet.cells) // 2]
    picked = planet.select_at(cell.normal * planet.radius)
    planet.rebuild_dirty_chunks()
    print(f"\nSelected cell {picked} (elevation {planet.cells[picked].elevation})")

    print("\n" + "=" * 40)
    print("Demo complete!")


if __name__ == "__main__":
    main()
