"""
Tests for Mantissa Tenet observability.

Tests cover:
- Structured JSON and human-readable formatters
- TenetLogger context and scan events
- Logging configuration
"""

from __future__ import annotations

import json
import logging

import pytest

from tenet.observability import (
    HumanReadableFormatter,
    StructuredFormatter,
    TenetLogger,
    configure_logging,
    configure_logging_from_env,
    get_logger,
)


def _record(message: str = "Scan started", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="tenet.engine.scanner",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# =============================================================================
# Formatter Tests
# =============================================================================


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_basic_fields(self):
        """Test the core JSON fields."""
        data = json.loads(StructuredFormatter().format(_record()))

        assert data["level"] == "info"
        assert data["logger"] == "tenet.engine.scanner"
        assert data["message"] == "Scan started"
        assert "timestamp" in data

    def test_extra_fields_from_record(self):
        """Test event fields are emitted at the top level."""
        data = json.loads(StructuredFormatter().format(_record(event_type="scan.started", scan_id="s-1")))

        assert data["event_type"] == "scan.started"
        assert data["scan_id"] == "s-1"

    def test_static_extra_fields(self):
        """Test configured fields are added to every line."""
        formatter = StructuredFormatter(include_timestamp=False, extra_fields={"service": "ci"})
        data = json.loads(formatter.format(_record()))

        assert data["service"] == "ci"
        assert "timestamp" not in data

    def test_location(self):
        """Test location information."""
        data = json.loads(StructuredFormatter(include_location=True).format(_record()))
        assert data["location"]["line"] == 1


class TestHumanReadableFormatter:
    """Tests for HumanReadableFormatter."""

    def test_format(self):
        """Test the plain text layout."""
        output = HumanReadableFormatter(use_colors=False, include_timestamp=False).format(_record())

        assert "INFO" in output
        assert "tenet.engine.scanner:" in output
        assert output.endswith("Scan started")


# =============================================================================
# Logger Tests
# =============================================================================


class TestTenetLogger:
    """Tests for TenetLogger."""

    def test_get_logger_prefix(self):
        """Test loggers are placed under the tenet hierarchy."""
        assert get_logger("custom").logger.name == "tenet.custom"
        assert get_logger("tenet.engine").logger.name == "tenet.engine"
        assert get_logger("tenet").logger.name == "tenet"

    def test_context_fields(self, caplog):
        """Test persistent context fields are attached to records."""
        logger = TenetLogger("tenet.test")
        logger.set_context(scan_id="s-1")

        with caplog.at_level(logging.INFO, logger="tenet"):
            logger.info("hello", package="readline")

        record = caplog.records[-1]
        assert record.scan_id == "s-1"
        assert record.package == "readline"

        logger.clear_context()
        with caplog.at_level(logging.INFO, logger="tenet"):
            logger.info("again")
        assert not hasattr(caplog.records[-1], "scan_id")

    def test_conflict_event_is_debug(self, caplog):
        """Test conflict events are logged at debug level."""
        logger = get_logger("tenet.test")

        with caplog.at_level(logging.INFO, logger="tenet"):
            logger.conflict_detected("conflict-1", "critical", "RULE", "readline")
        assert caplog.records == []

        with caplog.at_level(logging.DEBUG, logger="tenet"):
            logger.conflict_detected("conflict-1", "critical", "RULE", "readline")
        assert caplog.records[-1].event_type == "conflict.detected"
        assert caplog.records[-1].severity == "critical"


# =============================================================================
# Configuration Tests
# =============================================================================


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_format(self, restore_tenet_logger):
        """Test configuring JSON output."""
        configure_logging(level="debug", format="json")

        assert restore_tenet_logger.level == logging.DEBUG
        assert len(restore_tenet_logger.handlers) == 1
        assert isinstance(restore_tenet_logger.handlers[0].formatter, StructuredFormatter)

    def test_human_format(self, restore_tenet_logger):
        """Test configuring human-readable output."""
        configure_logging(level="WARNING")

        assert restore_tenet_logger.level == logging.WARNING
        assert isinstance(restore_tenet_logger.handlers[0].formatter, HumanReadableFormatter)

    def test_invalid_level(self, restore_tenet_logger):
        """Test an unknown level is rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="chatty")

    def test_from_env(self, restore_tenet_logger, monkeypatch):
        """Test configuration from environment variables."""
        monkeypatch.setenv("TENET_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("TENET_LOG_FORMAT", "json")
        configure_logging_from_env()

        assert restore_tenet_logger.level == logging.ERROR
        assert isinstance(restore_tenet_logger.handlers[0].formatter, StructuredFormatter)
