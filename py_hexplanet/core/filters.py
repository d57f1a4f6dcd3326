"""
Per-cell elevation and color evaluators.

Filters are pure functions of a cell's center and their settings object:
running them again with the same settings reproduces the same values, and
nothing accumulates between passes. A filter built with ``None`` settings
leaves cells untouched.
"""

import math
from typing import Iterable, Optional

import numpy as np
import structlog
from opensimplex import OpenSimplex

from ..config.terrain_settings import RGBA, ColorMode, ColorSettings, ElevationSettings
from .cell import Cell, index_color

logger = structlog.get_logger()


class ElevationFilter:
    """Assigns integer elevations from 3D coherent noise sampled at cell centers."""

    def __init__(self, settings: Optional[ElevationSettings]):
        self.settings = settings
        self._noise = OpenSimplex(seed=settings.seed) if settings is not None else None

    def sample(self, position: np.ndarray) -> float:
        """Noise in [0, 1] at ``position`` (after roughness and center offset)."""
        p = np.asarray(position, dtype=np.float64) * self.settings.roughness
        p = p + np.asarray(self.settings.center, dtype=np.float64)
        value = self._noise.noise3(float(p[0]), float(p[1]), float(p[2]))
        return min(max((value + 1.0) * 0.5, 0.0), 1.0)

    def elevation_at(self, position: np.ndarray) -> int:
        s = self.settings
        t = self.sample(position)
        # Spread over [min, max + 1) so the top elevation gets a fair share
        result = math.floor(s.min_elevation + (s.max_elevation + 1 - s.min_elevation) * t)
        result = min(max(result, s.min_elevation), s.max_elevation)
        if s.water_level is not None and result < s.water_level:
            result = s.water_level
        return result

    def evaluate(self, cell: Cell) -> None:
        if self.settings is None:
            return
        cell.elevation = self.elevation_at(cell.center)


class ColorFilter:
    """Colors cells from an elevation-banded palette or a noise-driven gradient."""

    def __init__(self, settings: Optional[ColorSettings]):
        self.settings = settings
        self._noise = None
        if settings is not None and settings.mode == ColorMode.GRADIENT:
            self._noise = OpenSimplex(seed=settings.gradient_seed)
            self._positions = np.array([key.position for key in settings.gradient])
            self._colors = np.array([key.color for key in settings.gradient], dtype=np.float64)

    def banded_color(self, elevation: int) -> RGBA:
        for band in self.settings.bands():
            if elevation <= band.threshold:
                return band.color
        return self.settings.mountain

    def gradient_color(self, position: np.ndarray) -> RGBA:
        p = np.asarray(position, dtype=np.float64) * self.settings.gradient_roughness
        value = self._noise.noise3(float(p[0]), float(p[1]), float(p[2]))
        t = min(max((value + 1.0) * 0.5, 0.0), 1.0)
        return tuple(
            float(np.interp(t, self._positions, self._colors[:, channel])) for channel in range(4)
        )

    def evaluate(self, cell: Cell) -> None:
        if self.settings is None:
            return
        if self.settings.mode == ColorMode.GRADIENT and len(self.settings.gradient) > 0:
            cell.color = self.gradient_color(cell.center)
        else:
            cell.color = tuple(self.banded_color(cell.elevation))


def run_cell_filters(
    cells: Iterable[Cell],
    elevation_settings: Optional[ElevationSettings],
    color_settings: Optional[ColorSettings],
) -> None:
    """
    Recompute elevation, then color, for every cell.

    Each cell starts from elevation 0 and its index color, so a pass with
    ``None`` settings clears values left behind by an earlier pass.
    """
    cells = list(cells)
    elevation_filter = ElevationFilter(elevation_settings)
    color_filter = ColorFilter(color_settings)
    for cell in cells:
        cell.elevation = 0
        cell.color = index_color(cell.index, len(cells))
        elevation_filter.evaluate(cell)
        color_filter.evaluate(cell)
    logger.debug("Cell filters applied",
                 cells=len(cells),
                 elevation=elevation_settings is not None,
                 color=color_settings is not None)
