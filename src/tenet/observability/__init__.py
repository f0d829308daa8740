"""
Observability for Mantissa Tenet.

Provides structured logging for scans and conflict detection.
"""

from tenet.observability.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    TenetLogger,
    configure_logging,
    configure_logging_from_env,
    get_logger,
)

__all__ = [
    "HumanReadableFormatter",
    "StructuredFormatter",
    "TenetLogger",
    "configure_logging",
    "configure_logging_from_env",
    "get_logger",
]
