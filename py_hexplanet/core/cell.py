"""Hexsphere cell: a pentagonal or hexagonal dual polygon of an icosphere vertex."""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from ..config.terrain_settings import RGBA
from .errors import TopologyError


def index_color(index: int, count: int) -> RGBA:
    """Default color encoding the cell index as a red-to-blue gradient."""
    return (index / count, 0.0, (count - index) / count, 1.0)


@dataclass
class Cell:
    """A cell of the hexsphere.

    Corners are cyclic: segment ``i`` is bounded by ``corners[i]`` and
    ``corners[(i + 1) % n]``. ``corner_ids`` holds the deduplicated point id
    of each corner, so two cells touching the same corner position share the
    same id. Neighbors are indices into the owning cell list.
    """
    index: int
    face: int
    center: np.ndarray
    normal: np.ndarray
    corners: np.ndarray
    corner_ids: Tuple[int, ...]
    neighbors: List[int] = field(default_factory=list)
    elevation: int = 0
    color: RGBA = (1.0, 1.0, 1.0, 1.0)

    @property
    def corner_count(self) -> int:
        return len(self.corner_ids)

    @property
    def is_pentagon(self) -> bool:
        return self.corner_count == 5

    def vertex_count(self) -> int:
        """Center plus corners."""
        return self.corner_count + 1

    def _wrap(self, side: int) -> int:
        return side % self.corner_count

    def corner_ids_for_segment(self, side: int) -> Tuple[int, int]:
        side = self._wrap(side)
        return self.corner_ids[side], self.corner_ids[(side + 1) % self.corner_count]

    def corners_for_segment(self, side: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return the two corner points bounding segment ``side`` (wrapped)."""
        side = self._wrap(side)
        return self.corners[side], self.corners[(side + 1) % self.corner_count]

    def bridge(self, side: int, outer_size: float) -> np.ndarray:
        """Vector from an inner corner toward the outer boundary of ``side``.

        The midpoint of the segment's corners relative to the center, scaled
        by ``outer_size``. Added to an inner corner it lands on the edge
        shared with the neighbor across that segment.
        """
        a, b = self.corners_for_segment(side)
        midpoint = ((a - self.center) + (b - self.center)) * 0.5
        return midpoint * outer_size

    def neighbor_for_segment(self, side: int, cells: Sequence["Cell"]) -> "Cell":
        """Return the neighbor whose corners include both corners of ``side``.

        Raises:
            TopologyError: if no neighbor, or more than one, matches
        """
        corner_a, corner_b = self.corner_ids_for_segment(side)
        matches = [
            cells[n] for n in self.neighbors
            if corner_a in cells[n].corner_ids and corner_b in cells[n].corner_ids
        ]
        if len(matches) != 1:
            raise TopologyError(
                f"Cell {self.index} segment {side} matched {len(matches)} neighbors"
            )
        return matches[0]

    def winding_sign(self) -> float:
        """Positive when corners run counter-clockwise seen from outside."""
        a = self.corners[0] - self.center
        b = self.corners[1] - self.center
        return float(np.dot(np.cross(a, b), self.normal))
