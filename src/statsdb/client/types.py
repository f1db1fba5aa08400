"""Data structures exchanged with the database client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Tuple

__all__ = ["PreparedQuery", "QueryEvent", "QueryListener"]


@dataclass(frozen=True)
class PreparedQuery:
    """A SQL statement with its positional parameters, ready to run.

    Used for transactions: a list of prepared queries is handed to the
    client verbatim and executed in order inside one transaction.
    """

    sql: str
    params: Tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))


@dataclass(frozen=True)
class QueryEvent:
    """Emitted after every statement the client sends to the database."""

    query: str
    params: Any
    duration_ms: float


QueryListener = Callable[[QueryEvent], None]
