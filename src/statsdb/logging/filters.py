"""Context injection for log records.

Two kinds of context are stamped onto every record passing through the
statsdb handler: static attributes set once at startup (environment,
deployment tags) and per-request values kept in a ``ContextVar`` so they
follow the current asyncio task.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional

from statsdb.__version__ import __version__

_static_context: Dict[str, Any] = {}
_request_context: ContextVar[Dict[str, Any]] = ContextVar("statsdb_request_context", default={})


class ContextFilter(logging.Filter):
    """Add static, request and package attributes to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        request = _request_context.get()
        context = {
            **_static_context,
            "request_id": request.get("request_id"),
            "user_id": request.get("user_id"),
            **{k: v for k, v in request.items() if k not in ("request_id", "user_id")},
            "sdk_name": "statsdb",
            "statsdb_version": __version__,
        }
        record.__dict__.update(context)
        return True


def set_logging_context(
    environment: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Replace the static attributes stamped on every record."""
    _static_context.clear()
    if environment is not None:
        _static_context["environment"] = environment
    _static_context.update(extra or {})


def set_request_context(
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
    **extra: Any,
) -> None:
    """Merge request-scoped values (e.g. ``website_id``) into the current context."""
    values = {"request_id": request_id, "user_id": user_id, **extra}
    _request_context.set(
        {**_request_context.get(), **{k: v for k, v in values.items() if v is not None}}
    )


def clear_request_context() -> None:
    """Drop every request-scoped value."""
    _request_context.set({})
