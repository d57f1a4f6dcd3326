"""
Hexsphere generation: the hexagonal/pentagonal dual of an icosphere.

Every icosphere vertex becomes a cell whose corners are the centroids of
the triangles around that vertex, ordered by walking the triangle fan.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog
from scipy.spatial import cKDTree

from ..config import settings
from . import icosahedron
from .cell import Cell, index_color
from .errors import TopologyError
from .icosphere import Icosphere, IcosphereBuilder, normalize_radius
from .point_arena import PointArena

logger = structlog.get_logger()


@dataclass
class Hexsphere:
    """Cells of a hexsphere, index-aligned with the icosphere points."""
    level: int
    radius: float
    icosphere: Icosphere
    cells: List[Cell]
    corner_points: np.ndarray  # corner_points[corner_id] = triangle centroid
    _tree: Optional[cKDTree] = field(default=None, repr=False)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __iter__(self):
        return iter(self.cells)

    def neighbor_for_segment(self, cell_index: int, side: int) -> Cell:
        return self.cells[cell_index].neighbor_for_segment(side, self.cells)

    def centers(self) -> np.ndarray:
        return np.array([cell.center for cell in self.cells])

    def nearest_cell(self, position: Sequence[float], radius: Optional[float] = None) -> Cell:
        """
        Find the cell whose center is closest to ``position``.

        Args:
            position: Query point, e.g. a picked point on the rendered planet
            radius: Radius the planet is rendered at (defaults to the hexsphere radius)

        Returns:
            The nearest cell
        """
        if self._tree is None:
            self._tree = cKDTree(self.centers())
        query = np.asarray(position, dtype=np.float64)
        if radius:
            query = query * (self.radius / radius)
        _, index = self._tree.query(query)
        return self.cells[int(index)]

    def cells_by_face(self) -> List[List[int]]:
        """Group cell indices by the base face they originate from."""
        groups: List[List[int]] = [[] for _ in range(icosahedron.NUM_FACES)]
        for cell in self.cells:
            groups[cell.face % icosahedron.NUM_FACES].append(cell.index)
        return groups


class HexsphereBuilder:
    """Derives hexsphere cells from an icosphere."""

    def __init__(self, point_tolerance: Optional[float] = None):
        self.point_tolerance = point_tolerance or settings.point_tolerance

    def build(self, level: int, radius: float = 1.0) -> Hexsphere:
        """
        Generate a hexsphere.

        Args:
            level: Icosphere subdivision level
            radius: Sphere radius

        Returns:
            Hexsphere whose cells are index-aligned with the icosphere points
        """
        radius = normalize_radius(radius)
        icosphere = IcosphereBuilder(self.point_tolerance).build(level, radius)
        return self.build_from_icosphere(icosphere)

    def build_from_icosphere(self, icosphere: Icosphere) -> Hexsphere:
        logger.info("Generating hexsphere", level=icosphere.level, points=len(icosphere.points))

        self._icosphere = icosphere
        self._corners = PointArena(self.point_tolerance * icosphere.radius)
        self._centroid_lookup: Dict[int, int] = {}

        n_points = len(icosphere.points)
        cells = [self._generate_cell(i, n_points) for i in range(n_points)]
        self._populate_neighbors(cells)

        pentagons = sum(1 for cell in cells if cell.is_pentagon)
        logger.info("Hexsphere generated",
                    level=icosphere.level,
                    cells=len(cells),
                    pentagons=pentagons,
                    corners=len(self._corners))

        return Hexsphere(
            level=icosphere.level,
            radius=icosphere.radius,
            icosphere=icosphere,
            cells=cells,
            corner_points=self._corners.to_array(),
        )

    def _generate_cell(self, index: int, n_points: int) -> Cell:
        """Build the dual cell of icosphere point ``index``."""
        tri_indices = list(self._icosphere.triangles_by_vertex[index])
        num_tris = len(tri_indices)
        expected = 5 if index < len(icosahedron.VERTICES) else 6
        if num_tris != expected:
            raise TopologyError(
                f"Vertex {index} has {num_tris} triangles, expected {expected}"
            )

        triangles = self._icosphere.triangles

        # Take a triangle, then the one sharing the edge toward the vertex
        # preceding ``index`` in it, and so on around the fan.
        last_tri = tri_indices.pop(0)
        corner_ids = [self._centroid_id(last_tri)]
        connection = _next_vertex(index, triangles[last_tri])
        for _ in range(1, num_tris):
            next_tri = None
            for candidate in tri_indices:
                if connection in triangles[candidate]:
                    next_tri = candidate
                    break
            if next_tri is None:
                raise TopologyError(f"Fan walk stalled at vertex {index}")
            tri_indices.remove(next_tri)
            corner_ids.append(self._centroid_id(next_tri))
            connection = _next_vertex(index, triangles[next_tri])

        corners = np.array([self._corners[i] for i in corner_ids])
        center = corners.mean(axis=0)

        return Cell(
            index=index,
            face=int(self._icosphere.face_by_vertex[index]),
            center=center,
            normal=center / np.linalg.norm(center),
            corners=corners,
            corner_ids=tuple(corner_ids),
            color=index_color(index, n_points),
        )

    def _centroid_id(self, tri_index: int) -> int:
        corner_id = self._centroid_lookup.get(tri_index)
        if corner_id is None:
            points = self._icosphere.points[self._icosphere.triangles[tri_index]]
            corner_id = self._corners.add(points.sum(axis=0) / 3.0)
            self._centroid_lookup[tri_index] = corner_id
        return corner_id

    def _populate_neighbors(self, cells: List[Cell]) -> None:
        for a, b in self._icosphere.edges:
            cells[a].neighbors.append(int(b))
            cells[b].neighbors.append(int(a))

        for cell in cells:
            if len(cell.neighbors) != cell.corner_count:
                raise TopologyError(
                    f"Cell {cell.index} has {len(cell.neighbors)} neighbors "
                    f"but {cell.corner_count} corners"
                )


def _next_vertex(index: int, triangle: np.ndarray) -> int:
    """Return the vertex preceding ``index`` in the triangle's winding."""
    a, b, c = (int(v) for v in triangle)
    if a == index:
        return c
    if b == index:
        return a
    if c == index:
        return b
    raise TopologyError(f"Vertex {index} not in triangle {(a, b, c)}")


def generate_hexsphere(level: int, radius: float = 1.0) -> Hexsphere:
    """Convenience wrapper around :class:`HexsphereBuilder`."""
    return HexsphereBuilder().build(level, radius)
