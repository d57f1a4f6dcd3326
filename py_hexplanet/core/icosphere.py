"""Geodesic sphere (icosphere) generation by subdividing the icosahedron."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
import structlog

from ..config import settings
from . import icosahedron
from .errors import TopologyError
from .point_arena import PointArena

logger = structlog.get_logger()


def normalize_radius(radius: float) -> float:
    """Replace a non-positive radius with the configured default."""
    if radius is None or radius <= 0:
        logger.warning("Invalid radius, using default", radius=radius, default=settings.default_radius)
        return settings.default_radius
    return float(radius)


@dataclass
class Icosphere:
    """Icosphere mesh data.

    Attributes:
        level: Subdivision level; each base edge is cut into ``level + 1`` segments
        radius: Radius the points are currently projected to
        points: (N, 3) point positions
        edges: (E, 2) unique edges, lower point index first
        triangles: (T, 3) point indices, counter-clockwise seen from outside
        triangles_by_vertex: triangles_by_vertex[i] = triangle indices touching point i
        face_by_vertex: face_by_vertex[i] = base face point i was first created on
    """
    level: int
    radius: float
    points: np.ndarray
    edges: np.ndarray
    triangles: np.ndarray
    triangles_by_vertex: List[List[int]]
    face_by_vertex: np.ndarray

    def set_radius(self, radius: float) -> None:
        """Re-project every point onto a sphere of ``radius``."""
        radius = normalize_radius(radius)
        if radius == self.radius:
            return
        self.points = spherify(self.points, radius)
        self.radius = radius

    def triangles_flat(self) -> List[int]:
        """Triangle indices as one flat list, three per triangle."""
        return self.triangles.reshape(-1).tolist()

    def vertex_normals(self) -> np.ndarray:
        """Smooth-sphere normals (the normalized point directions)."""
        return self.points / np.linalg.norm(self.points, axis=1)[:, None]


def spherify(points: np.ndarray, radius: float) -> np.ndarray:
    """Project points onto the sphere of ``radius`` centered at the origin."""
    return points / np.linalg.norm(points, axis=1)[:, None] * radius


class IcosphereBuilder:
    """
    Builds an icosphere by subdividing each of the 20 base triangles into a
    triangular sub-grid.

    Every edge of a base triangle is shared with an adjacent base triangle.
    Subdivided edges are cached by their unordered endpoint pair so the
    second triangle reuses the first one's points (reversed when walking the
    edge the other way) instead of creating duplicates; without this the
    faces would not be connected and neighbor detection would fail.
    """

    def __init__(self, point_tolerance: Optional[float] = None):
        self.point_tolerance = point_tolerance or settings.point_tolerance

    def build(self, level: int, radius: float = 1.0) -> Icosphere:
        """
        Generate an icosphere.

        Args:
            level: Subdivision level (0 returns the bare icosahedron)
            radius: Sphere radius

        Returns:
            Icosphere with points projected onto the sphere
        """
        if level < 0:
            logger.warning("Negative subdivision level, using 0", level=level)
            level = 0
        radius = normalize_radius(radius)

        logger.info("Generating icosphere", level=level, radius=radius)

        self._init_base_geometry()
        self._subdivide_geometry(level)

        points = spherify(self._points.to_array(), radius)
        face_by_vertex = np.array(
            [self._face_by_vertex[i] for i in range(len(points))], dtype=np.int64
        )
        triangles_by_vertex = [self._tris_by_vertex.get(i, []) for i in range(len(points))]

        logger.info("Icosphere generated",
                    level=level,
                    points=len(points),
                    edges=len(self._edges),
                    triangles=len(self._tris))

        return Icosphere(
            level=level,
            radius=radius,
            points=points,
            edges=np.array(self._edges, dtype=np.int64).reshape(-1, 2),
            triangles=np.array(self._tris, dtype=np.int64).reshape(-1, 3),
            triangles_by_vertex=triangles_by_vertex,
            face_by_vertex=face_by_vertex,
        )

    def _init_base_geometry(self) -> None:
        self._points = PointArena(self.point_tolerance)
        for vertex in icosahedron.VERTICES:
            self._points.append(vertex)
        self._edges: List[Tuple[int, int]] = []
        self._edge_lookup = set()
        self._tris: List[Tuple[int, int, int]] = []
        self._tris_by_vertex: Dict[int, List[int]] = {}
        self._face_by_vertex: Dict[int, int] = {}
        self._edge_cache: Dict[Tuple[int, int], List[int]] = {}

    def _subdivide_geometry(self, level: int) -> None:
        for face_index, triangle in enumerate(icosahedron.TRIANGLES):
            self._subdivide_triangle(tuple(int(v) for v in triangle), level, face_index)

        if level == 0:
            for i in range(len(self._points)):
                self._face_by_vertex[i] = i

        if len(self._face_by_vertex) != len(self._points):
            raise TopologyError(
                f"Face index count {len(self._face_by_vertex)}, point count {len(self._points)}"
            )

    def _subdivide_triangle(self, triangle: Tuple[int, int, int], level: int, face_index: int) -> None:
        a, b, c = triangle
        left_edge = self._subdivide_edge(a, b, level, face_index)
        right_edge = self._subdivide_edge(a, c, level, face_index)

        # The apex plus the first point on each side form the top triangle
        top_line = [left_edge[1], right_edge[1]]
        self._add_triangle(a, left_edge[1], right_edge[1])

        for row in range(1, level + 1):
            bottom_line = self._subdivide_edge(left_edge[row + 1], right_edge[row + 1], row, face_index)
            row_length = len(top_line)
            for k in range(row_length):
                # up-facing
                self._add_triangle(top_line[k], bottom_line[k], bottom_line[k + 1])
                if k < row_length - 1:
                    # down-facing, one fewer per row
                    self._add_triangle(top_line[k], bottom_line[k + 1], top_line[k + 1])
            top_line = bottom_line

    def _subdivide_edge(self, start: int, end: int, divisions: int, face_index: int) -> List[int]:
        """Return the point indices along ``start -> end`` cut into ``divisions + 1`` segments."""
        if divisions <= 0:
            return [start, end]

        key = (min(start, end), max(start, end))
        cached = self._edge_cache.get(key)
        if cached is not None:
            return list(cached) if cached[0] == start else cached[::-1]

        vec_a = self._points[start]
        vec_b = self._points[end]
        step = 1.0 / (divisions + 1)

        results = [start]
        for i in range(1, divisions + 1):
            results.append(self._points.add(vec_a + (vec_b - vec_a) * (step * i)))
        results.append(end)
        self._edge_cache[key] = results

        # First writer wins
        for index in results:
            if index not in self._face_by_vertex:
                self._face_by_vertex[index] = face_index

        return results

    def _add_triangle(self, a: int, b: int, c: int) -> None:
        self._add_edge(a, b)
        self._add_edge(a, c)
        self._add_edge(b, c)

        tri_index = len(self._tris)
        self._tris.append((a, b, c))
        for vertex in (a, b, c):
            tris = self._tris_by_vertex.setdefault(vertex, [])
            if tri_index not in tris:
                tris.append(tri_index)

    def _add_edge(self, a: int, b: int) -> None:
        if a == b:
            raise TopologyError(f"Degenerate edge ({a}, {b})")
        edge = (a, b) if a < b else (b, a)
        if edge not in self._edge_lookup:
            self._edge_lookup.add(edge)
            self._edges.append(edge)


def generate_icosphere(level: int, radius: float = 1.0) -> Icosphere:
    """Convenience wrapper around :class:`IcosphereBuilder`."""
    return IcosphereBuilder().build(level, radius)
