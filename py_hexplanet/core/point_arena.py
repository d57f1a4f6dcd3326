"""
Position-deduplicating point storage.

Points are stored once in an append-only arena and addressed by integer
index. Lookups go through a tolerance grid rather than exact float keys, so
two positions computed along different arithmetic paths (e.g. the same
seam vertex emitted by two neighboring cells) resolve to the same index.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

BucketKey = Tuple[int, int, int]


class PointArena:
    """Append-only list of 3D points with tolerance-bucketed lookup.

    Two points are considered the same when every coordinate differs by at
    most ``tolerance / 2``. Each stored point lives in the grid bucket
    containing it; a lookup probes its own bucket plus the neighboring
    bucket on the nearer side of each axis, which covers every point within
    half a tolerance.
    """

    def __init__(self, tolerance: float = 1e-9):
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = float(tolerance)
        self._half = self.tolerance * 0.5
        self._points: List[Tuple[float, float, float]] = []
        self._buckets: Dict[BucketKey, List[int]] = {}

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> np.ndarray:
        return np.array(self._points[index])

    def _scaled(self, point: Sequence[float]) -> Tuple[float, float, float]:
        t = self.tolerance
        return (float(point[0]) / t, float(point[1]) / t, float(point[2]) / t)

    def find(self, point: Sequence[float]) -> Optional[int]:
        """Return the index of a stored point matching ``point``, or None."""
        sx, sy, sz = self._scaled(point)
        bx, by, bz = math.floor(sx), math.floor(sy), math.floor(sz)
        ox = -1 if sx - bx < 0.5 else 1
        oy = -1 if sy - by < 0.5 else 1
        oz = -1 if sz - bz < 0.5 else 1
        x, y, z = float(point[0]), float(point[1]), float(point[2])
        half = self._half

        for dx in (0, ox):
            for dy in (0, oy):
                for dz in (0, oz):
                    for idx in self._buckets.get((bx + dx, by + dy, bz + dz), ()):
                        px, py, pz = self._points[idx]
                        if abs(px - x) <= half and abs(py - y) <= half and abs(pz - z) <= half:
                            return idx
        return None

    def add(self, point: Sequence[float]) -> int:
        """Store ``point`` unless an equal one exists; return its index."""
        existing = self.find(point)
        if existing is not None:
            return existing
        return self.append(point)

    def append(self, point: Sequence[float]) -> int:
        """Store ``point`` unconditionally and return its new index."""
        sx, sy, sz = self._scaled(point)
        key = (math.floor(sx), math.floor(sy), math.floor(sz))
        index = len(self._points)
        self._points.append((float(point[0]), float(point[1]), float(point[2])))
        self._buckets.setdefault(key, []).append(index)
        return index

    def to_array(self) -> np.ndarray:
        """All stored points as an (N, 3) float64 array."""
        if not self._points:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array(self._points, dtype=np.float64)
