"""
Terraced terrain mesh synthesis for hexsphere cells.

Each cell segment is built from:

1. the inner triangle (center and two inner corners) on the cell's flat top,
2. the edge body between the inner corners and the bridge points on the
   boundary shared with the neighbor,
3. two corner fills, one at each end of the segment, covering the gap
   between the inner corner, the bridge point and the cell corner shared
   with two neighbors.

Elevation is applied by scaling unit-sphere positions radially by
``1 + elevation_step * elevation``. Every line shared by two primitives is
built the same way by both of them:

- inner corner to bridge point drops from the cell to ``min(cell, fwd)``,
- inner corner to outer corner drops from the cell to ``min(cell, fwd, other)``,
- bridge point to outer corner drops from ``min(cell, fwd)`` to ``min(cell, fwd, other)``,

and a line is terraced exactly when its drop is one elevation unit. The
outer corner therefore sits at the lowest of its three cells in all six
triangles touching it, and the result is crack free for any combination
of integer elevations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..config import settings
from ..config.terrain_settings import RGBA, CellGeometrySettings
from .cell import Cell
from .point_arena import PointArena

logger = structlog.get_logger()

SELECTED_COLOR: RGBA = (1.0, 0.0, 0.0, 1.0)
HOVERED_COLOR: RGBA = (1.0, 1.0, 0.0, 1.0)


class Relation(Enum):
    """Elevation of a neighbor relative to the cell being meshed."""

    LEVEL = "level"  # same height or higher
    SLOPE = "slope"  # exactly one unit lower
    CLIFF = "cliff"  # more than one unit lower


def relation(cell_elevation: int, neighbor_elevation: int) -> Relation:
    if neighbor_elevation >= cell_elevation:
        return Relation.LEVEL
    if neighbor_elevation == cell_elevation - 1:
        return Relation.SLOPE
    return Relation.CLIFF


class CornerFill(Enum):
    """Triangulation used for one corner of a cell segment."""

    FLAT = "flat"
    TERRACE_FROM_INNER = "terrace_from_inner"
    TERRACE_FROM_CORNER = "terrace_from_corner"
    TERRACE_AND_CLIFF = "terrace_and_cliff"
    CLIFF_BESIDE_TERRACE = "cliff_beside_terrace"


def classify_corner(cell: int, fwd: int, other: int) -> CornerFill:
    """
    Pick the corner fill from the cell's elevation and its two neighbors'.

    Args:
        cell: Elevation of the cell being meshed
        fwd: Elevation of the neighbor across the current segment
        other: Elevation of the neighbor across the adjacent segment

    Returns:
        CornerFill strategy
    """
    fwd_rel = relation(cell, fwd)
    other_rel = relation(cell, other)

    if fwd_rel == Relation.LEVEL and other_rel == Relation.LEVEL:
        return CornerFill.FLAT
    if fwd_rel == Relation.SLOPE:
        if other_rel == Relation.CLIFF:
            return CornerFill.TERRACE_AND_CLIFF
        return CornerFill.TERRACE_FROM_INNER
    if fwd_rel == Relation.LEVEL:
        if other_rel == Relation.SLOPE:
            return CornerFill.TERRACE_FROM_CORNER
        # Cliff on the other side: flat, snapped to the other neighbor's height
        return CornerFill.FLAT
    # fwd is a cliff; the bridge-to-corner line terraces when other sits
    # exactly one unit below fwd
    if other == fwd - 1:
        return CornerFill.CLIFF_BESIDE_TERRACE
    return CornerFill.FLAT


def terrace_lerp(a: np.ndarray, b: np.ndarray, up: np.ndarray, step: int, terraces_per_slope: int) -> np.ndarray:
    """
    Interpolate along a stair-shaped slope from ``a`` to ``b``.

    ``a`` and ``b`` are split into a component along ``up`` (height) and a
    component perpendicular to it (flat position). The flat part advances by
    one horizontal step per ``step``; the height rises every second step, so
    the profile alternates sloped and flat runs.

    Args:
        a: Start point
        b: End point
        up: Unit local vertical
        step: Step index, 0 (``a``) to ``terraces_per_slope * 2 + 1`` (``b``)
        terraces_per_slope: Number of flat terraces on the slope

    Returns:
        Interpolated point
    """
    terrace_steps = terraces_per_slope * 2 + 1
    h = step * (1.0 / terrace_steps)
    v = ((step + 1) // 2) * (1.0 / (terraces_per_slope + 1))

    a_height = np.dot(a, up) * up
    b_height = np.dot(b, up) * up
    flat_a = a - a_height
    flat_b = b - b_height

    return a + (flat_b - flat_a) * h + (b_height - a_height) * v


@dataclass
class MeshBuffers:
    """Welded triangle mesh: vertex positions, per-vertex colors, flat indices."""
    weld_tolerance: float = 1e-7
    colors: List[RGBA] = field(default_factory=list)
    triangles: List[int] = field(default_factory=list)

    def __post_init__(self):
        self._arena = PointArena(self.weld_tolerance)

    @property
    def vertices(self) -> np.ndarray:
        return self._arena.to_array()

    @property
    def vertex_count(self) -> int:
        return len(self._arena)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    def clear(self) -> None:
        self._arena = PointArena(self.weld_tolerance)
        self.colors.clear()
        self.triangles.clear()

    def add_vertex(self, position: np.ndarray, color: RGBA) -> int:
        index = self._arena.find(position)
        if index is None:
            index = self._arena.append(position)
            self.colors.append(color)
        return index

    def add_triangle(self, a: np.ndarray, b: np.ndarray, c: np.ndarray, color: RGBA) -> None:
        ia = self.add_vertex(a, color)
        ib = self.add_vertex(b, color)
        ic = self.add_vertex(c, color)
        if ia == ib or ib == ic or ia == ic:
            return
        self.triangles.extend((ia, ib, ic))

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (vertices (N, 3), colors (N, 4), triangles (M, 3))."""
        colors = np.array(self.colors, dtype=np.float64).reshape(-1, 4)
        triangles = np.array(self.triangles, dtype=np.int64).reshape(-1, 3)
        return self.vertices, colors, triangles

    def vertex_normals(self) -> np.ndarray:
        """Area-weighted smooth vertex normals."""
        vertices, _, triangles = self.as_arrays()
        normals = np.zeros_like(vertices)
        if len(triangles) == 0:
            return normals
        a, b, c = (vertices[triangles[:, i]] for i in range(3))
        face_normals = np.cross(b - a, c - a)
        for i in range(3):
            np.add.at(normals, triangles[:, i], face_normals)
        lengths = np.linalg.norm(normals, axis=1)
        lengths[lengths == 0] = 1.0
        return normals / lengths[:, None]


class TerrainMeshBuilder:
    """
    Converts elevation/color-tagged cells into welded terrace geometry.

    Triangles are emitted counter-clockwise seen from outside the planet.
    Geometry is worked out on the unit sphere and scaled by ``radius`` as
    it is written to the buffers.
    """

    def __init__(self, geometry: CellGeometrySettings, radius: float = 1.0,
                 buffers: Optional[MeshBuffers] = None):
        self.geometry = geometry
        self.radius = radius
        if buffers is None:
            buffers = MeshBuffers(weld_tolerance=settings.vertex_tolerance * radius)
        self.buffers = buffers

        # Per-cell state while meshing
        self._flip = False

    def build(self, cells: Iterable[Cell], all_cells: Sequence[Cell],
              hovered: Optional[int] = None, selected: Optional[int] = None) -> MeshBuffers:
        """
        Meshify ``cells`` into the builder's buffers.

        Args:
            cells: Cells to mesh (e.g. one chunk)
            all_cells: Full cell list, for neighbor lookups
            hovered: Index of the hovered cell, drawn in the hover color
            selected: Index of the selected cell, drawn in the selection color

        Returns:
            The filled buffers
        """
        for cell in cells:
            color = cell.color
            if cell.index == selected:
                color = SELECTED_COLOR
            elif cell.index == hovered:
                color = HOVERED_COLOR
            self.meshify_cell(cell, all_cells, color)
        return self.buffers

    def meshify_cell(self, cell: Cell, all_cells: Sequence[Cell], color: Optional[RGBA] = None) -> None:
        if color is None:
            color = cell.color
        self._flip = cell.winding_sign() < 0
        for side in range(cell.corner_count):
            self._meshify_segment(cell, side, all_cells, color)

    def elevation_factor(self, elevation: int) -> float:
        return self.geometry.elevation_factor(elevation)

    def _triangle(self, a: np.ndarray, b: np.ndarray, c: np.ndarray, color: RGBA) -> None:
        r = self.radius
        if self._flip:
            self.buffers.add_triangle(a * r, c * r, b * r, color)
        else:
            self.buffers.add_triangle(a * r, b * r, c * r, color)

    def _quad(self, a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray, color: RGBA) -> None:
        """Quad with corners in counter-clockwise order."""
        self._triangle(a, b, c, color)
        self._triangle(a, c, d, color)

    def _stairs(self, a: np.ndarray, b: np.ndarray, up: np.ndarray, terraced: bool) -> List[np.ndarray]:
        """Points from ``a`` to ``b``: terrace steps, or just the two ends."""
        if not terraced:
            return [a, b]
        terraces = self.geometry.terraces_per_slope
        steps = self.geometry.terrace_steps
        return [a] + [terrace_lerp(a, b, up, i, terraces) for i in range(1, steps)] + [b]

    def _meshify_segment(self, cell: Cell, side: int, cells: Sequence[Cell], color: RGBA) -> None:
        neighbor = cell.neighbor_for_segment(side, cells)
        prev_neighbor = cell.neighbor_for_segment(side - 1, cells)
        next_neighbor = cell.neighbor_for_segment(side + 1, cells)

        inner_size = self.geometry.inner_cell_size
        corner_a, corner_b = cell.corners_for_segment(side)
        center = cell.center

        inner_a = center + (corner_a - center) * inner_size
        inner_b = center + (corner_b - center) * inner_size

        inner_factor = self.elevation_factor(cell.elevation)
        self._triangle(center * inner_factor, inner_a * inner_factor, inner_b * inner_factor, color)

        bridge = cell.bridge(side, self.geometry.outer_cell_size)
        bridge_a = inner_a + bridge
        bridge_b = inner_b + bridge

        # The bridge sits on the shared boundary at the lower of the two heights
        outer_factor = self.elevation_factor(min(cell.elevation, neighbor.elevation))
        slope = relation(cell.elevation, neighbor.elevation) == Relation.SLOPE

        path_a = self._stairs(inner_a * inner_factor, bridge_a * outer_factor, cell.normal, slope)
        path_b = self._stairs(inner_b * inner_factor, bridge_b * outer_factor, cell.normal, slope)
        for j in range(len(path_a) - 1):
            self._quad(path_a[j], path_a[j + 1], path_b[j + 1], path_b[j], color)

        self._meshify_corner(cell, neighbor, prev_neighbor, corner_a, inner_a, bridge_a, True, color)
        self._meshify_corner(cell, neighbor, next_neighbor, corner_b, inner_b, bridge_b, False, color)

    def _meshify_corner(self, cell: Cell, fwd: Cell, other: Cell,
                        outer_corner: np.ndarray, inner_corner: np.ndarray, bridge_point: np.ndarray,
                        left: bool, color: RGBA) -> None:
        """
        Fill the corner between an inner corner, a bridge point and the
        outer corner shared by ``cell``, ``fwd`` and ``other``.

        ``left`` marks the first corner of the segment, where (inner, outer,
        bridge) runs counter-clockwise; the triangles of the other corner are
        mirrored.
        """
        x, f, o = cell.elevation, fwd.elevation, other.elevation
        bridge_level = min(x, f)
        corner_level = min(x, f, o)

        inner = inner_corner * self.elevation_factor(x)
        bridge = bridge_point * self.elevation_factor(bridge_level)
        corner = outer_corner * self.elevation_factor(corner_level)

        corner_up = outer_corner / np.linalg.norm(outer_corner)
        path_ib = self._stairs(inner, bridge, cell.normal, x - bridge_level == 1)
        path_ic = self._stairs(inner, corner, cell.normal, x - corner_level == 1)
        # Shared with ``fwd``, which builds it from the same end with the same up
        path_cb = self._stairs(corner, bridge, corner_up, bridge_level - corner_level == 1)

        fill = classify_corner(x, f, o)
        if fill == CornerFill.FLAT:
            triangles = [(inner, corner, bridge)]
        elif fill == CornerFill.TERRACE_FROM_INNER:
            triangles = _terrace_fan(path_ic, path_ib)
        elif fill == CornerFill.TERRACE_FROM_CORNER:
            triangles = _terrace_fan(path_cb, path_ic[::-1])
        elif fill == CornerFill.TERRACE_AND_CLIFF:
            # Stairs up to the slope neighbor fanned from the cliff foot,
            # then the bridge-to-corner stairs when that line terraces too
            triangles = _fan(corner, path_ib[::-1])
            if len(path_cb) > 2:
                triangles += _fan(bridge, path_cb[:-1])
        else:
            triangles = _fan(inner, path_cb)

        for a, b, c in triangles:
            if left:
                self._triangle(a, b, c, color)
            else:
                self._triangle(a, c, b, color)


Triangle = Tuple[np.ndarray, np.ndarray, np.ndarray]


def _fan(apex: np.ndarray, path: List[np.ndarray]) -> List[Triangle]:
    """Triangles joining ``apex`` to each consecutive pair along ``path``."""
    return [(apex, path[j], path[j + 1]) for j in range(len(path) - 1)]


def _terrace_fan(left: List[np.ndarray], right: List[np.ndarray]) -> List[Triangle]:
    """
    Terrace strip between two stair paths leaving a common apex.

    ``left[0] is right[0]`` is the apex; (apex, left[-1], right[-1]) must run
    counter-clockwise. Produces one triangle at the apex and a quad per
    following step.
    """
    apex = left[0]
    triangles = [(apex, left[1], right[1])]
    for j in range(1, len(left) - 1):
        triangles.append((left[j], left[j + 1], right[j + 1]))
        triangles.append((left[j], right[j + 1], right[j]))
    return triangles


def build_terrain_mesh(cells: Sequence[Cell], geometry: CellGeometrySettings, radius: float = 1.0,
                       hovered: Optional[int] = None, selected: Optional[int] = None) -> MeshBuffers:
    """Mesh every cell of a hexsphere into a single buffer set."""
    builder = TerrainMeshBuilder(geometry, radius)
    buffers = builder.build(cells, cells, hovered=hovered, selected=selected)
    logger.info("Terrain mesh built",
                cells=len(cells),
                vertices=buffers.vertex_count,
                triangles=buffers.triangle_count)
    return buffers
