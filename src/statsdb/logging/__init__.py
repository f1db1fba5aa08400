"""Logging infrastructure for statsdb.

This module provides structured logging with JSON output, context tracking,
and OpenTelemetry trace correlation.
"""

from statsdb.logging.filters import (
    ContextFilter,
    clear_request_context,
    set_logging_context,
    set_request_context,
)
from statsdb.logging.logger import QUERY_LOGGER_NAME, CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "QUERY_LOGGER_NAME",
    "set_logging_context",
    "set_request_context",
    "clear_request_context",
]
