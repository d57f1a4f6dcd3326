"""Tests for hexsphere cells."""

import numpy as np
import pytest

from py_hexplanet.core.cell import Cell, index_color
from py_hexplanet.core.errors import TopologyError
from py_hexplanet.core.hexsphere import generate_hexsphere


@pytest.fixture(scope="module")
def hexsphere():
    return generate_hexsphere(2)


class TestCell:
    """Test per-cell helpers."""

    def test_pentagon_and_hexagon(self, hexsphere):
        """Test pentagon and hexagon flags and vertex counts."""
        pentagon = hexsphere[0]
        hexagon = hexsphere[20]
        assert pentagon.is_pentagon
        assert pentagon.vertex_count() == 6
        assert not hexagon.is_pentagon
        assert hexagon.vertex_count() == 7

    def test_segment_wraps(self, hexsphere):
        """Test that segment indices wrap around the corner list."""
        cell = hexsphere[30]
        n = cell.corner_count
        a, b = cell.corners_for_segment(n - 1)
        np.testing.assert_array_equal(a, cell.corners[n - 1])
        np.testing.assert_array_equal(b, cell.corners[0])
        assert cell.corner_ids_for_segment(n) == cell.corner_ids_for_segment(0)
        assert cell.corner_ids_for_segment(-1) == cell.corner_ids_for_segment(n - 1)

    def test_bridge_lands_on_shared_boundary(self, hexsphere):
        """inner corner + bridge is the same point from both sides of a segment."""
        inner = 0.75
        cell = hexsphere[25]
        for side in range(cell.corner_count):
            neighbor = cell.neighbor_for_segment(side, hexsphere.cells)
            a, _ = cell.corners_for_segment(side)
            point = cell.center + (a - cell.center) * inner + cell.bridge(side, 1 - inner)

            back = neighbor.corner_ids.index(cell.corner_ids_for_segment(side)[1])
            _, na = neighbor.corners_for_segment(back)
            other = neighbor.center + (na - neighbor.center) * inner + neighbor.bridge(back, 1 - inner)
            np.testing.assert_allclose(point, other, atol=1e-12)

    def test_winding_is_counter_clockwise(self, hexsphere):
        """Test that cell corners run counter-clockwise seen from outside."""
        assert all(cell.winding_sign() > 0 for cell in hexsphere)

    def test_missing_neighbor_raises(self, hexsphere):
        """Test that a segment without a matching neighbor raises."""
        cell = hexsphere[15]
        orphan = Cell(
            index=cell.index, face=cell.face, center=cell.center, normal=cell.normal,
            corners=cell.corners, corner_ids=cell.corner_ids, neighbors=[],
        )
        with pytest.raises(TopologyError):
            orphan.neighbor_for_segment(0, hexsphere.cells)

    def test_index_color(self):
        """Test the default index color gradient."""
        assert index_color(0, 4) == (0.0, 0.0, 1.0, 1.0)
        assert index_color(2, 4) == (0.5, 0.0, 0.5, 1.0)
