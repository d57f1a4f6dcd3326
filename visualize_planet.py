#!/usr/bin/env python3
"""
Visualize a generated planet.
Renders the terraced terrain mesh in 3D and the cell elevations as a
latitude/longitude scatter.
"""

import numpy as np
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent))

from py_hexplanet.config import ColorSettings, ElevationSettings
from py_hexplanet.core import PlanetMesh
from py_hexplanet.utils import configure_logging


def visualize_planet(subdivisions=3, seed=1234, roughness=1.5, max_elevation=6, radius=1.0):
    """
    Generate and visualize a planet.

    Args:
        subdivisions: Icosphere subdivision level
        seed: Elevation noise seed
        roughness: Elevation noise frequency
        max_elevation: Highest elevation
        radius: Planet radius
    """
    configure_logging()

    print(f"Generating planet at subdivision level {subdivisions}...")
    planet = PlanetMesh(
        elevation=ElevationSettings(seed=seed, roughness=roughness, max_elevation=max_elevation, water_level=1),
        color=ColorSettings(),
        radius=radius,
    )
    planet.generate(subdivisions)

    vertices, colors, triangles = planet.combined_buffers()
    elevations = np.array([cell.elevation for cell in planet.cells])

    # Statistics
    print(f"\nPlanet statistics:")
    print(f"  Cells: {len(planet.cells)}")
    print(f"  Vertices: {len(vertices)}")
    print(f"  Triangles: {len(triangles)}")
    print(f"  Elevation range: {elevations.min()}-{elevations.max()}")
    for level in range(elevations.min(), elevations.max() + 1):
        count = np.sum(elevations == level)
        print(f"    {level}: {count} cells ({count / len(elevations) * 100:.1f}%)")

    print("\nCreating visualization...")

    fig = plt.figure(figsize=(16, 8))

    # Left plot: terrain mesh
    ax1 = fig.add_subplot(1, 2, 1, projection="3d")
    mesh = Poly3DCollection(vertices[triangles], facecolors=colors[triangles].mean(axis=1), edgecolor="none")
    ax1.add_collection3d(mesh)
    limit = radius * 1.3
    ax1.set_xlim(-limit, limit)
    ax1.set_ylim(-limit, limit)
    ax1.set_zlim(-limit, limit)
    ax1.set_box_aspect((1, 1, 1))
    ax1.set_axis_off()
    ax1.set_title(f"Terrain mesh\n{len(triangles)} triangles")

    # Right plot: cell elevations by latitude/longitude
    ax2 = fig.add_subplot(1, 2, 2)
    normals = np.array([cell.normal for cell in planet.cells])
    latitude = np.degrees(np.arcsin(np.clip(normals[:, 1], -1.0, 1.0)))
    longitude = np.degrees(np.arctan2(normals[:, 0], normals[:, 2]))
    scatter = ax2.scatter(longitude, latitude, c=elevations, cmap="terrain", s=12)
    plt.colorbar(scatter, ax=ax2, label="Elevation")
    ax2.set_xlim(-180, 180)
    ax2.set_ylim(-90, 90)
    ax2.set_title(f"Cell elevations\n{len(planet.cells)} cells, {sum(c.is_pentagon for c in planet.cells)} pentagons")
    ax2.set_xlabel("Longitude")
    ax2.set_ylabel("Latitude")

    fig.suptitle(f"Planet Visualization - Seed: {seed}", fontsize=16)

    plt.tight_layout()

    output_file = f"planet_{subdivisions}_{seed}.png"
    plt.savefig(output_file, dpi=200, bbox_inches="tight")
    print(f"\nVisualization saved to: {output_file}")

    plt.show()


if __name__ == "__main__":
    if len(sys.argv) > 1:
        visualize_planet(subdivisions=int(sys.argv[1]), seed=int(sys.argv[2]) if len(sys.argv) > 2 else 1234)
    else:
        visualize_planet()
