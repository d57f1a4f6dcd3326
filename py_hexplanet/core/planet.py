"""
Planet facade: cached hexsphere topology, per-cell filters and chunked
terrain meshes.

Topology only depends on the subdivision level, so hexspheres are built
once per level at unit radius and kept in a :class:`HexsphereCache`.
Changing elevation, color or geometry settings re-runs the filters on the
cached cells and marks chunks dirty; the caller decides how many dirty
chunks to rebuild per frame through :meth:`PlanetMesh.rebuild_dirty_chunks`.
"""

import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..config import settings
from ..config.terrain_settings import CellGeometrySettings, ColorSettings, ElevationSettings
from .cell import Cell
from .filters import run_cell_filters
from .hexsphere import Hexsphere, HexsphereBuilder
from .icosphere import normalize_radius
from .point_arena import PointArena
from .terrain_mesh import MeshBuffers, TerrainMeshBuilder

logger = structlog.get_logger()

_UNCHANGED = object()


class HexsphereCache:
    """Unit-radius hexspheres keyed by subdivision level."""

    def __init__(self, builder: Optional[HexsphereBuilder] = None):
        self.builder = builder or HexsphereBuilder()
        self._entries: Dict[int, Hexsphere] = {}

    def __contains__(self, level: int) -> bool:
        return level in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, level: int) -> Hexsphere:
        """Return the hexsphere for ``level``, building it on first use."""
        hexsphere = self._entries.get(level)
        if hexsphere is not None:
            logger.debug("Hexsphere cache hit", level=level)
            return hexsphere

        logger.info("Hexsphere cache miss", level=level)
        hexsphere = self.builder.build(level, 1.0)
        self._entries[level] = hexsphere
        return hexsphere

    def clear(self) -> None:
        self._entries.clear()


@dataclass
class PlanetChunk:
    """Cells originating from one base face and the mesh built from them."""
    index: int
    cell_indices: List[int]
    buffers: MeshBuffers
    dirty: bool = True


class PlanetMesh:
    """
    Top-level planet object.

    Example:
        >>> planet = PlanetMesh(elevation=ElevationSettings(seed=7), color=ColorSettings())
        >>> planet.generate(3)
        >>> vertices, colors, triangles = planet.combined_buffers()
    """

    def __init__(
        self,
        geometry: Optional[CellGeometrySettings] = None,
        elevation: Optional[ElevationSettings] = None,
        color: Optional[ColorSettings] = None,
        radius: Optional[float] = None,
        cache: Optional[HexsphereCache] = None,
    ):
        self.geometry = geometry or CellGeometrySettings()
        self.elevation = elevation
        self.color = color
        self.radius = normalize_radius(radius if radius is not None else settings.default_radius)
        self.cache = cache or HexsphereCache()

        self.subdivisions: Optional[int] = None
        self.hexsphere: Optional[Hexsphere] = None
        self.chunks: List[PlanetChunk] = []
        self._chunk_by_cell: Dict[int, int] = {}

        self.hovered_cell: Optional[int] = None
        self.selected_cell: Optional[int] = None

    @property
    def cells(self) -> List[Cell]:
        return self.hexsphere.cells if self.hexsphere is not None else []

    def _clamp_level(self, level: int) -> int:
        clamped = min(max(int(level), 0), settings.max_subdivisions)
        if clamped != level:
            logger.warning("Subdivision level out of range, clamping", level=level, clamped=clamped)
        return clamped

    def generate(self, subdivisions: Optional[int] = None) -> None:
        """
        Build the planet at ``subdivisions`` and mesh every chunk.

        Args:
            subdivisions: Subdivision level (defaults to ``settings.default_subdivisions``)
        """
        if subdivisions is None:
            subdivisions = settings.default_subdivisions
        level = self._clamp_level(subdivisions)

        start = time.perf_counter()
        self.subdivisions = level
        self.hexsphere = self.cache.get(level)
        self.hovered_cell = None
        self.selected_cell = None

        self.chunks = []
        self._chunk_by_cell = {}
        for face, cell_indices in enumerate(self.hexsphere.cells_by_face()):
            self.chunks.append(PlanetChunk(index=face, cell_indices=cell_indices, buffers=self._new_buffers()))
            for cell_index in cell_indices:
                self._chunk_by_cell[cell_index] = face

        run_cell_filters(self.hexsphere.cells, self.elevation, self.color)
        for chunk in self.chunks:
            self.rebuild_chunk(chunk.index)

        logger.info("Planet generated",
                    subdivisions=level,
                    cells=len(self.hexsphere),
                    chunks=len(self.chunks),
                    triangles=sum(c.buffers.triangle_count for c in self.chunks),
                    elapsed_ms=round((time.perf_counter() - start) * 1000, 1))

    def update_settings(
        self,
        geometry=_UNCHANGED,
        elevation=_UNCHANGED,
        color=_UNCHANGED,
        radius=_UNCHANGED,
        subdivisions=_UNCHANGED,
    ) -> None:
        """
        Replace any of the settings objects and propagate the change.

        Passing ``None`` for ``elevation`` or ``color`` disables that filter.
        A changed subdivision level regenerates the planet; anything else
        re-runs the filters and marks every chunk dirty.
        """
        if geometry is not _UNCHANGED:
            self.geometry = geometry or CellGeometrySettings()
        if elevation is not _UNCHANGED:
            self.elevation = elevation
        if color is not _UNCHANGED:
            self.color = color
        if radius is not _UNCHANGED:
            self.radius = normalize_radius(radius)

        if subdivisions is not _UNCHANGED and subdivisions is not None:
            level = self._clamp_level(subdivisions)
            if level != self.subdivisions:
                self.generate(level)
                return

        self.on_settings_changed()

    def on_settings_changed(self) -> None:
        """Re-run filters on the current cells and mark all chunks dirty."""
        if self.hexsphere is None:
            return
        run_cell_filters(self.hexsphere.cells, self.elevation, self.color)
        for chunk in self.chunks:
            chunk.dirty = True
        logger.debug("Settings changed, chunks marked dirty", chunks=len(self.chunks))

    def _new_buffers(self) -> MeshBuffers:
        return MeshBuffers(weld_tolerance=settings.vertex_tolerance * self.radius)

    def rebuild_chunk(self, index: int) -> PlanetChunk:
        """Rebuild one chunk's buffers in place."""
        chunk = self.chunks[index]
        cells = self.hexsphere.cells

        chunk.buffers.weld_tolerance = settings.vertex_tolerance * self.radius
        chunk.buffers.clear()
        builder = TerrainMeshBuilder(self.geometry, self.radius, chunk.buffers)
        builder.build((cells[i] for i in chunk.cell_indices), cells,
                      hovered=self.hovered_cell, selected=self.selected_cell)
        chunk.dirty = False

        logger.debug("Chunk rebuilt",
                     chunk=index,
                     cells=len(chunk.cell_indices),
                     vertices=chunk.buffers.vertex_count,
                     triangles=chunk.buffers.triangle_count)
        return chunk

    def rebuild_dirty_chunks(self, max_chunks: Optional[int] = None, max_ms: Optional[float] = None) -> bool:
        """
        Rebuild dirty chunks until a chunk count or time budget runs out.

        At least one dirty chunk is rebuilt per call so progress is always
        made.

        Args:
            max_chunks: Stop after this many chunks (no limit when None)
            max_ms: Stop once this many milliseconds have elapsed
                (defaults to ``settings.max_rebuild_ms``)

        Returns:
            True if any dirty chunk was found
        """
        if max_ms is None:
            max_ms = settings.max_rebuild_ms

        dirty = [chunk.index for chunk in self.chunks if chunk.dirty]
        if not dirty:
            return False

        start = time.perf_counter()
        rebuilt = 0
        for index in dirty:
            if rebuilt > 0:
                if max_chunks is not None and rebuilt >= max_chunks:
                    break
                if (time.perf_counter() - start) * 1000 >= max_ms:
                    break
            self.rebuild_chunk(index)
            rebuilt += 1

        logger.debug("Dirty chunks rebuilt", rebuilt=rebuilt, remaining=len(dirty) - rebuilt)
        return True

    def _mark_cell_dirty(self, cell_index: Optional[int]) -> None:
        if cell_index is not None:
            self.chunks[self._chunk_by_cell[cell_index]].dirty = True

    def cell_at(self, position: Sequence[float]) -> Cell:
        """Return the cell closest to a point on the rendered planet."""
        if self.hexsphere is None:
            raise RuntimeError("Planet has not been generated")
        return self.hexsphere.nearest_cell(position, self.radius)

    def hover_at(self, position: Sequence[float]) -> int:
        cell = self.cell_at(position)
        if cell.index != self.hovered_cell:
            self._mark_cell_dirty(self.hovered_cell)
            self.hovered_cell = cell.index
            self._mark_cell_dirty(cell.index)
        return cell.index

    def select_at(self, position: Sequence[float]) -> int:
        cell = self.cell_at(position)
        if cell.index != self.selected_cell:
            self._mark_cell_dirty(self.selected_cell)
            self.selected_cell = cell.index
            self._mark_cell_dirty(cell.index)
        return cell.index

    def clear_selection(self) -> None:
        self._mark_cell_dirty(self.selected_cell)
        self._mark_cell_dirty(self.hovered_cell)
        self.selected_cell = None
        self.hovered_cell = None

    def combined_buffers(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Merge every chunk into (vertices, colors, triangles) arrays.

        Chunks are welded independently, so vertices on chunk seams are
        welded again here; a merged vertex keeps the first chunk's color.
        """
        arena = PointArena(settings.vertex_tolerance * self.radius)
        colors = []
        triangles = []
        for chunk in self.chunks:
            v, c, t = chunk.buffers.as_arrays()
            remap = np.empty(len(v), dtype=np.int64)
            for i, point in enumerate(v):
                index = arena.find(point)
                if index is None:
                    index = arena.append(point)
                    colors.append(c[i])
                remap[i] = index
            triangles.append(remap[t])

        if not triangles:
            return np.zeros((0, 3)), np.zeros((0, 4)), np.zeros((0, 3), dtype=np.int64)
        return (arena.to_array(),
                np.array(colors, dtype=np.float64).reshape(-1, 4),
                np.concatenate(triangles))
