"""Tests for hexsphere (icosphere dual) generation."""

import numpy as np
import pytest

from py_hexplanet.core.errors import TopologyError
from py_hexplanet.core.hexsphere import HexsphereBuilder, generate_hexsphere
from py_hexplanet.core.icosphere import generate_icosphere


class TestHexsphereTopology:
    """Test cell counts, corners and neighbors."""

    @pytest.mark.parametrize("level", [0, 1, 3])
    def test_twelve_pentagons(self, level):
        """Test that exactly the 12 base vertices become pentagons."""
        hexsphere = generate_hexsphere(level)
        assert len(hexsphere) == 10 * (level + 1) ** 2 + 2

        pentagons = [cell.index for cell in hexsphere if cell.is_pentagon]
        assert pentagons == list(range(12))
        assert all(cell.corner_count == 6 for cell in hexsphere.cells[12:])

    def test_level_zero_is_dodecahedron(self):
        """Test the level 0 hexsphere."""
        hexsphere = generate_hexsphere(0)
        assert len(hexsphere.corner_points) == 20
        assert all(cell.corner_count == 5 for cell in hexsphere)

    def test_corners_are_shared(self):
        """Every corner is a triangle centroid touched by exactly three cells."""
        hexsphere = generate_hexsphere(2)
        counts = np.zeros(len(hexsphere.corner_points), dtype=int)
        for cell in hexsphere:
            for corner_id in cell.corner_ids:
                counts[corner_id] += 1
        assert len(hexsphere.corner_points) == len(hexsphere.icosphere.triangles)
        assert np.all(counts == 3)

    def test_neighbor_per_segment_is_symmetric(self):
        """Test that segment neighbors are mutual and share both corners."""
        hexsphere = generate_hexsphere(2)
        for cell in hexsphere:
            assert len(cell.neighbors) == cell.corner_count
            for side in range(cell.corner_count):
                neighbor = hexsphere.neighbor_for_segment(cell.index, side)
                assert neighbor.index in cell.neighbors
                assert cell.index in neighbor.neighbors
                assert set(cell.corner_ids_for_segment(side)) <= set(neighbor.corner_ids)

    def test_centers_and_normals(self):
        """Test cell centers and unit normals."""
        hexsphere = generate_hexsphere(1, 2.0)
        for cell in hexsphere:
            np.testing.assert_allclose(cell.center, cell.corners.mean(axis=0))
            np.testing.assert_allclose(np.linalg.norm(cell.normal), 1.0)
            assert np.dot(cell.normal, hexsphere.icosphere.points[cell.index]) > 0

    def test_cells_by_face_partition(self):
        """Test that face groups partition the cells."""
        hexsphere = generate_hexsphere(3)
        groups = hexsphere.cells_by_face()
        assert len(groups) == 20
        flattened = sorted(i for group in groups for i in group)
        assert flattened == list(range(len(hexsphere)))

    def test_malformed_icosphere_raises(self):
        """Test that a vertex with missing triangles raises."""
        icosphere = generate_icosphere(1)
        icosphere.triangles_by_vertex[20] = icosphere.triangles_by_vertex[20][:4]
        with pytest.raises(TopologyError):
            HexsphereBuilder().build_from_icosphere(icosphere)


class TestNearestCell:
    """Test center lookups used for picking."""

    def test_cell_center_finds_itself(self):
        """Test nearest cell lookup at cell centers."""
        hexsphere = generate_hexsphere(2)
        for index in (0, 17, 60):
            assert hexsphere.nearest_cell(hexsphere[index].center).index == index

    def test_scaled_query(self):
        """Test nearest cell lookup on a scaled planet."""
        hexsphere = generate_hexsphere(2)
        target = hexsphere[40]
        assert hexsphere.nearest_cell(target.normal * 5.0, radius=5.0).index == 40
