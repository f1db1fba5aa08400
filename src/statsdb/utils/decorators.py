"""Tracing decorator shared by the client and executor."""

import asyncio
import functools
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar

from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from statsdb.logging import get_logger
from statsdb.telemetry import get_tracer

F = TypeVar('F', bound=Callable[..., Any])

logger = get_logger(__name__)


def traced(
    span_name: Optional[str] = None,
    *,
    kind: SpanKind = SpanKind.CLIENT,
    attribute_getter: Optional[Callable[..., Optional[Dict[str, Any]]]] = None,
) -> Callable[[F], F]:
    """Run the decorated function inside an OpenTelemetry span.

    Works for plain and ``async`` functions. ``attribute_getter`` receives the
    call's arguments and returns span attributes; None values are dropped.
    Exceptions are recorded on the span and re-raised unchanged.

    Example:
        >>> @traced("statsdb.query.raw_query",
        ...         attribute_getter=lambda self, sql, params=(): {"db.statement": sql})
        ... async def raw_query(self, sql, params=()):
        ...     ...
    """

    def decorator(func: F) -> F:
        name = span_name or f"{func.__module__}.{func.__qualname__}"
        tracer = get_tracer(func.__module__)

        @contextmanager
        def span_for(args: tuple, kwargs: dict) -> Iterator[Span]:
            with tracer.start_as_current_span(name, kind=kind) as span:
                if attribute_getter is not None:
                    try:
                        attrs = attribute_getter(*args, **kwargs) or {}
                    except Exception as exc:  # pragma: no cover - attributes are best effort
                        logger.warning("Span attribute getter failed for %s: %s", name, exc)
                        attrs = {}
                    span.set_attributes({k: v for k, v in attrs.items() if v is not None})

                try:
                    yield span
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with span_for(args, kwargs):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return func(*args, **kwargs)

        return sync_wrapper  # type: ignore[return-value]

    return decorator
