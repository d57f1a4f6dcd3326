"""Tests for settings normalization."""

import pytest

from py_hexplanet.config import Settings
from py_hexplanet.config.terrain_settings import (
    MAX_INNER_CELL_SIZE, MIN_INNER_CELL_SIZE, CellGeometrySettings, ColorSettings, ElevationSettings,
)


class TestCellGeometrySettings:
    """Test clamping of geometry values."""

    @pytest.mark.parametrize("value,expected", [
        (-1.0, MIN_INNER_CELL_SIZE),
        (0.0, MIN_INNER_CELL_SIZE),
        (0.5, 0.5),
        (1.0, MAX_INNER_CELL_SIZE),
        (3.0, MAX_INNER_CELL_SIZE),
    ])
    def test_inner_cell_size_clamped(self, value, expected):
        """Test that the inner cell size is clamped into its range."""
        geometry = CellGeometrySettings(inner_cell_size=value)
        assert geometry.inner_cell_size == expected
        assert geometry.outer_cell_size == pytest.approx(1.0 - expected)

    def test_terraces_at_least_one(self):
        """Test that at least one terrace is kept."""
        geometry = CellGeometrySettings(terraces_per_slope=0)
        assert geometry.terraces_per_slope == 1
        assert geometry.terrace_steps == 3

    def test_negative_step_clamped(self):
        """Test that a negative elevation step becomes zero."""
        geometry = CellGeometrySettings(elevation_step=-0.3)
        assert geometry.elevation_step == 0.0
        assert geometry.elevation_factor(10) == 1.0

    def test_elevation_factor(self):
        """Test the radial elevation factor."""
        geometry = CellGeometrySettings(elevation_step=0.05)
        assert geometry.elevation_factor(4) == pytest.approx(1.2)


class TestElevationSettings:
    def test_bounds_swapped(self):
        """Test that inverted elevation bounds are swapped."""
        settings = ElevationSettings(min_elevation=5, max_elevation=-1)
        assert settings.min_elevation == -1
        assert settings.max_elevation == 5


class TestColorSettings:
    def test_bands_ordered(self):
        """Test that color bands come back sorted by threshold."""
        colors = ColorSettings(water_height=5, beach_height=1)
        thresholds = [band.threshold for band in colors.bands()]
        assert thresholds == sorted(thresholds)


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default process settings."""
        monkeypatch.delenv("HEXPLANET_DEFAULT_SUBDIVISIONS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_subdivisions == 4
        assert settings.max_subdivisions == 30
        assert settings.default_radius == 1.0

    def test_env_override(self, monkeypatch):
        """Test overriding settings from the environment."""
        monkeypatch.setenv("HEXPLANET_DEFAULT_SUBDIVISIONS", "6")
        monkeypatch.setenv("HEXPLANET_LOG_FORMAT", "json")
        settings = Settings(_env_file=None)
        assert settings.default_subdivisions == 6
        assert settings.log_format == "json"
