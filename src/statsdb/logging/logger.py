"""Structured logging for statsdb.

Records are rendered as one JSON object per line. Anything passed through
``extra=`` becomes a top-level key, and records emitted inside a span carry
its ``trace_id``/``span_id``. Executed statements go to the dedicated
``statsdb.query`` logger so they can be switched on independently
(``LOG_QUERY``).
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from opentelemetry import trace

QUERY_LOGGER_NAME = "statsdb.query"

# Attributes every LogRecord has; everything else came in through ``extra=``
_STANDARD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("statsdb", logging.INFO, __file__, 0, "", (), None))
) | {"asctime", "message"}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _trace_fields() -> Dict[str, str]:
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return {}
    return {
        "trace_id": format(context.trace_id, "032x"),
        "span_id": format(context.span_id, "016x"),
    }


class CustomJsonFormatter(logging.Formatter):
    """Render log records as JSON lines with extras and trace correlation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            key: value for key, value in vars(record).items() if key not in _STANDARD_ATTRIBUTES
        }
        payload.update(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        payload.update(_trace_fields())

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO", log_query: Optional[bool] = None) -> None:
    """Configure JSON console logging.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_query: Force the ``statsdb.query`` logger to DEBUG (True) or
            silence it below WARNING (False). None leaves it at ``level``.
    """
    level = level.upper()
    loggers: Dict[str, Any] = {}
    if log_query is not None:
        loggers[QUERY_LOGGER_NAME] = {"level": "DEBUG" if log_query else "WARNING"}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "statsdb.logging.logger.CustomJsonFormatter"},
            },
            "filters": {
                "context": {"()": "statsdb.logging.filters.ContextFilter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "filters": ["context"],
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": loggers,
            "root": {"level": level, "handlers": ["console"]},
        }
    )
