"""
Module: test_logger.py
Description: Unit tests for structured logging configuration.
"""

import json

import pytest

from queue_consumer.utils.logger import configure_logging, get_logger


class TestLogger:
    """Test cases for logger configuration."""

    @pytest.fixture(autouse=True)
    def restore_default_level(self):
        yield
        configure_logging("INFO")

    def test_json_output(self, capsys):
        """Test records render as JSON with timestamp and level."""
        configure_logging("INFO")

        get_logger("test_logger").error("Delete failed", receipt_handle="r-1")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "Delete failed"
        assert record["receipt_handle"] == "r-1"
        assert record["level"] == "ERROR"
        assert "timestamp" in record

    def test_level_filtering(self, capsys):
        configure_logging("WARNING")

        get_logger("test_logger").info("Fetched message batch", count=0)

        assert capsys.readouterr().out == ""

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("VERBOSE")

    def test_reconfigure_applies_to_used_logger(self, capsys):
        """Test a logger that already logged picks up a later level change."""
        configure_logging("INFO")
        logger = get_logger("test_logger.reconfigure")
        logger.info("Queue worker started")
        assert "Queue worker started" in capsys.readouterr().out

        configure_logging("ERROR")
        logger.info("Fetched message batch", count=3)
        logger.error("Acknowledge failed", pending=3)

        lines = capsys.readouterr().out.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["Acknowledge failed"]
