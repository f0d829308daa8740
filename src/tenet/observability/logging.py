"""
Structured logging configuration for Mantissa Tenet.

Provides consistent logging across the engine with a JSON formatter for
CI log collection and a human-readable formatter for terminals. Nothing
is configured on import; hosts call configure_logging() or
configure_logging_from_env().
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "tenet"

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per log line.

    Event fields passed through `extra` are emitted as top-level keys.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_location: bool = False,
        extra_fields: dict[str, Any] | None = None,
    ):
        """
        Initialize structured formatter.

        Args:
            include_timestamp: Include the record time in output
            include_location: Include file/line location
            extra_fields: Additional fields to include in every log
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()

        log_data["level"] = record.levelname.lower()
        log_data["logger"] = record.name
        log_data["message"] = record.getMessage()

        if self.include_location:
            log_data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        log_data.update(self.extra_fields)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Formatter for terminals, with optional ANSI level colors."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as human-readable text."""
        parts = []

        if self.include_timestamp:
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            parts.append(f"[{created.strftime('%Y-%m-%d %H:%M:%S')}]")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level}{self.RESET}"
        parts.append(f"{level:>8}")

        parts.append(f"{record.name}:")
        parts.append(record.getMessage())

        output = " ".join(parts)

        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)

        return output


class TenetLogger:
    """
    Wrapper around a standard logger with persistent context fields.

    Event helpers emit records tagged with an `event_type` so structured
    output can be filtered per event.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self._context: dict[str, Any] = {}

    def set_context(self, **kwargs: Any) -> None:
        """Set persistent context fields for all logs."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        self._context.clear()

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        extra = {**self._context, **kwargs}
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def scan_started(self, scan_id: str, project_license: str, strict_mode: bool = False) -> None:
        """Log scan start event."""
        self.info(
            "Scan started",
            event_type="scan.started",
            scan_id=scan_id,
            project_license=project_license,
            strict_mode=strict_mode,
        )

    def scan_completed(
        self,
        scan_id: str,
        dependency_count: int,
        conflict_count: int,
        risk_score: int,
        duration_seconds: float,
    ) -> None:
        """Log scan completion event."""
        self.info(
            "Scan completed",
            event_type="scan.completed",
            scan_id=scan_id,
            dependency_count=dependency_count,
            conflict_count=conflict_count,
            risk_score=risk_score,
            duration_seconds=duration_seconds,
        )

    def conflict_detected(
        self,
        conflict_id: str,
        severity: str,
        rule_id: str,
        package: str,
    ) -> None:
        """Log a detected license conflict."""
        self.debug(
            "Conflict detected",
            event_type="conflict.detected",
            conflict_id=conflict_id,
            severity=severity,
            rule_id=rule_id,
            package=package,
        )


def configure_logging(
    level: str = "INFO",
    format: str = "human",
    output: str = "stderr",
    extra_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure the "tenet" logger hierarchy.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (human, json)
        output: Output destination (stderr, stdout)
        extra_fields: Extra fields to include in structured logs

    Raises:
        ValueError: If level is not a known log level name
    """
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level_value)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout if output == "stdout" else sys.stderr)
    if format == "json":
        handler.setFormatter(StructuredFormatter(extra_fields=extra_fields))
    else:
        handler.setFormatter(HumanReadableFormatter())
    root_logger.addHandler(handler)


def configure_logging_from_env() -> None:
    """Configure logging from TENET_LOG_LEVEL and TENET_LOG_FORMAT."""
    configure_logging(
        level=os.getenv("TENET_LOG_LEVEL", "INFO"),
        format=os.getenv("TENET_LOG_FORMAT", "human"),
    )


def get_logger(name: str) -> TenetLogger:
    """
    Get a Tenet logger instance.

    Args:
        name: Logger name, typically __name__

    Returns:
        TenetLogger under the "tenet" hierarchy
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return TenetLogger(name)
    return TenetLogger(f"{ROOT_LOGGER_NAME}.{name}")
