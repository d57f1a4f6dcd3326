"""Tests for the base icosahedron tables."""

import numpy as np
import pytest

from py_hexplanet.core import icosahedron


class TestIcosahedronTables:
    """Test the static vertex, edge and triangle tables."""

    def test_table_sizes(self):
        """Test table shapes."""
        assert icosahedron.VERTICES.shape == (12, 3)
        assert icosahedron.EDGES.shape == (30, 2)
        assert icosahedron.TRIANGLES.shape == (20, 3)
        assert icosahedron.NUM_FACES == 20

    def test_vertices_are_unit_length(self):
        """Test that base vertices lie on the unit sphere."""
        np.testing.assert_allclose(np.linalg.norm(icosahedron.VERTICES, axis=1), 1.0)

    def test_edges_are_unique_and_ordered(self):
        """Test that edges are unique low/high pairs."""
        pairs = {tuple(edge) for edge in icosahedron.EDGES.tolist()}
        assert len(pairs) == 30
        assert all(a < b for a, b in pairs)

    def test_triangle_edges_match_edge_table(self):
        """Every triangle side is a listed edge and every edge borders two triangles."""
        counts = {tuple(edge): 0 for edge in icosahedron.EDGES.tolist()}
        for a, b, c in icosahedron.TRIANGLES.tolist():
            for u, v in ((a, b), (b, c), (c, a)):
                counts[(min(u, v), max(u, v))] += 1
        assert all(count == 2 for count in counts.values())

    def test_triangles_face_outward(self):
        """Triangles wind counter-clockwise seen from outside."""
        v = icosahedron.VERTICES
        for a, b, c in icosahedron.TRIANGLES:
            normal = np.cross(v[b] - v[a], v[c] - v[a])
            centroid = (v[a] + v[b] + v[c]) / 3.0
            assert np.dot(normal, centroid) > 0

    @pytest.mark.parametrize("vertex", range(12))
    def test_every_vertex_has_five_neighbors(self, vertex):
        """Test base vertex neighbors."""
        neighbors = icosahedron.get_neighbors(vertex)
        assert len(neighbors) == 5
        assert vertex not in neighbors
