"""
Core planet generation functionality.
"""

from .errors import TopologyError
from .icosphere import Icosphere, IcosphereBuilder, generate_icosphere
from .cell import Cell
from .hexsphere import Hexsphere, HexsphereBuilder, generate_hexsphere
from .filters import ElevationFilter, ColorFilter, run_cell_filters
from .terrain_mesh import (
    CornerFill, MeshBuffers, Relation, TerrainMeshBuilder,
    build_terrain_mesh, classify_corner, terrace_lerp,
)
from .planet import HexsphereCache, PlanetChunk, PlanetMesh

__all__ = ['TopologyError', 'Icosphere', 'IcosphereBuilder', 'generate_icosphere',
           'Cell', 'Hexsphere', 'HexsphereBuilder', 'generate_hexsphere',
           'ElevationFilter', 'ColorFilter', 'run_cell_filters',
           'CornerFill', 'MeshBuffers', 'Relation', 'TerrainMeshBuilder',
           'build_terrain_mesh', 'classify_corner', 'terrace_lerp',
           'HexsphereCache', 'PlanetChunk', 'PlanetMesh']
