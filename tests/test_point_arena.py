"""Tests for tolerance-based point deduplication."""

import numpy as np
import pytest

from py_hexplanet.core.point_arena import PointArena


class TestPointArena:
    """Test PointArena lookups."""

    def test_add_deduplicates_exact_points(self):
        """Test deduplication of identical points."""
        arena = PointArena(1e-6)
        a = arena.add((1.0, 2.0, 3.0))
        b = arena.add((1.0, 2.0, 3.0))
        assert a == b
        assert len(arena) == 1

    def test_add_merges_within_half_tolerance(self):
        """Test merging of nearby points."""
        arena = PointArena(1e-6)
        a = arena.add((0.5, 0.5, 0.5))
        b = arena.add((0.5 + 4e-7, 0.5 - 4e-7, 0.5))
        assert a == b

    def test_points_apart_stay_distinct(self):
        """Test that distant points stay separate."""
        arena = PointArena(1e-6)
        a = arena.add((0.0, 0.0, 0.0))
        b = arena.add((2e-6, 0.0, 0.0))
        assert a != b
        assert len(arena) == 2

    def test_merge_across_bucket_boundary(self):
        """Points straddling a grid line still resolve to the same index."""
        arena = PointArena(1.0)
        a = arena.add((0.99, 0.0, 0.0))
        b = arena.add((1.01, 0.0, 0.0))
        assert a == b

    def test_append_skips_lookup(self):
        """Test unconditional append."""
        arena = PointArena()
        arena.append((1.0, 1.0, 1.0))
        arena.append((1.0, 1.0, 1.0))
        assert len(arena) == 2
        assert arena.find((1.0, 1.0, 1.0)) == 0

    def test_to_array(self):
        """Test array export and indexing."""
        arena = PointArena()
        assert arena.to_array().shape == (0, 3)
        arena.add((1.0, 0.0, 0.0))
        arena.add((0.0, 1.0, 0.0))
        np.testing.assert_array_equal(arena.to_array(), [[1, 0, 0], [0, 1, 0]])
        np.testing.assert_array_equal(arena[1], [0, 1, 0])

    def test_rejects_non_positive_tolerance(self):
        """Test tolerance validation."""
        with pytest.raises(ValueError):
            PointArena(0.0)
