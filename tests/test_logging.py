"""Tests for logging configuration."""

import pytest
import structlog

from py_hexplanet.utils import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test structlog setup."""

    def test_json_renderer(self):
        """Test JSON output format."""
        configure_logging("DEBUG", "json")
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self):
        """Test console output format."""
        configure_logging("INFO", "console")
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_logger_usable_after_configure(self):
        """Test logging after configuration."""
        configure_logging("WARNING", "json")
        structlog.get_logger("py_hexplanet").info("ignored", value=1)
