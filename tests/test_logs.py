"""Tests for logging setup."""

import json

import structlog

from tpv_core.logs import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_renders_json(self, capsys):
        """Events are rendered as JSON with level and timestamp."""
        configure_logging("INFO")
        structlog.get_logger().info("sale_recorded", sale_id="s-1")

        line = json.loads(capsys.readouterr().out.strip())

        assert line["event"] == "sale_recorded"
        assert line["sale_id"] == "s-1"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_filters_below_level(self, capsys):
        """Events below the configured level are dropped."""
        configure_logging("warning")
        structlog.get_logger().info("debt_opened")
        assert capsys.readouterr().out == ""

    def test_unknown_level_means_info(self, capsys):
        """An unknown level name falls back to INFO."""
        configure_logging("chatty")
        structlog.get_logger().debug("hidden")
        structlog.get_logger().info("shown")
        assert "shown" in capsys.readouterr().out
