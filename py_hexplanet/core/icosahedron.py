"""Static base solid for icosphere generation: 12 vertices, 30 edges, 20 faces."""

import math
from typing import List

import numpy as np

PHI = (1.0 + math.sqrt(5.0)) / 2.0

_RAW_VERTICES = np.array(
    [
        [-1.0, PHI, 0.0],
        [1.0, PHI, 0.0],
        [-1.0, -PHI, 0.0],
        [1.0, -PHI, 0.0],
        [0.0, -1.0, PHI],
        [0.0, 1.0, PHI],
        [0.0, -1.0, -PHI],
        [0.0, 1.0, -PHI],
        [PHI, 0.0, -1.0],
        [PHI, 0.0, 1.0],
        [-PHI, 0.0, -1.0],
        [-PHI, 0.0, 1.0],
    ],
    dtype=np.float64,
)

# Unit-length base vertices
VERTICES = _RAW_VERTICES / np.linalg.norm(_RAW_VERTICES, axis=1)[:, None]

# Canonical (low, high) vertex pairs
EDGES = np.array(
    [
        [0, 1], [0, 5], [0, 7], [0, 10], [0, 11],
        [1, 5], [1, 7], [1, 8], [1, 9],
        [2, 3], [2, 4], [2, 6], [2, 10], [2, 11],
        [3, 4], [3, 6], [3, 8], [3, 9],
        [4, 5], [4, 9], [4, 11],
        [5, 9], [5, 11],
        [6, 7], [6, 8], [6, 10],
        [7, 8], [7, 10],
        [8, 9],
        [10, 11],
    ],
    dtype=np.int64,
)

# Counter-clockwise seen from outside
TRIANGLES = np.array(
    [
        [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
        [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
        [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
        [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
    ],
    dtype=np.int64,
)

NUM_FACES = len(TRIANGLES)


def get_neighbors(vertex: int) -> List[int]:
    """Return the 5 base vertices joined to ``vertex`` by an edge."""
    neighbors = []
    for a, b in EDGES:
        if a == vertex:
            neighbors.append(int(b))
        if b == vertex:
            neighbors.append(int(a))
    return neighbors
