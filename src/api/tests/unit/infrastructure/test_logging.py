"""Unit tests for structlog configuration."""

import logging
from unittest.mock import patch

import pytest
import structlog

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output_without_tty(self, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        with patch("infrastructure.logging.sys") as mock_sys:
            mock_sys.stdout.isatty.return_value = False
            configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_force_color_uses_console_renderer(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_level_filters_lower_events(self, monkeypatch):
        """Debug events should be dropped at the default INFO level."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        configure_logging()

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.INFO)

    def test_explicit_level(self):
        configure_logging("debug")

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.DEBUG)
