"""OpenTelemetry helpers for statsdb spans.

Spans follow the OpenTelemetry database semantic conventions
(``db.system``, ``db.operation``, ``db.statement``).
"""

from typing import Any, Dict, Optional

from opentelemetry import trace

from statsdb.__version__ import __version__

__all__ = [
    "get_tracer",
    "db_span_attributes",
    "MAX_STATEMENT_LENGTH",
]

MAX_STATEMENT_LENGTH = 4096


def get_tracer(name: str = "statsdb", version: Optional[str] = None) -> trace.Tracer:
    """Return a tracer from the active provider, tagged with the package version."""
    return trace.get_tracer(name, version or __version__)


def db_span_attributes(
    operation: str,
    system: Optional[Any] = None,
    statement: Optional[str] = None,
    batch_count: Optional[int] = None,
) -> Dict[str, Any]:
    """Build span attributes for a database call.

    ``system`` accepts a ``DatabaseType`` or plain string; long statements are
    truncated to ``MAX_STATEMENT_LENGTH`` characters.
    """
    attributes: Dict[str, Any] = {"db.operation": operation}

    if system is not None:
        attributes["db.system"] = str(getattr(system, "value", system))

    statement = (statement or "").strip()
    if len(statement) > MAX_STATEMENT_LENGTH:
        statement = f"{statement[:MAX_STATEMENT_LENGTH - 3]}..."
    if statement:
        attributes["db.statement"] = statement

    if batch_count is not None:
        attributes["db.batch.count"] = batch_count

    return attributes
