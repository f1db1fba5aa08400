"""Ordered positional parameters for placeholder SQL."""

from typing import Any, Iterator, List, Optional, Sequence


class QueryParams:
    """Append-only list of positional query parameters.

    Fragments never inline user supplied values; they call :meth:`add` and
    embed the returned ``$N`` marker instead. ``N`` is the 1-based position
    of the value, i.e. the length of the list right after the append.

    Example:
        >>> params = QueryParams()
        >>> params.add("example.com")
        '$1'
        >>> params.add(42)
        '$2'
        >>> list(params)
        ['example.com', 42]
    """

    def __init__(self, values: Optional[Sequence[Any]] = None):
        self._values: List[Any] = list(values or [])

    def add(self, value: Any) -> str:
        """Append ``value`` and return its placeholder."""
        self._values.append(value)
        return self.placeholder(len(self._values))

    @staticmethod
    def placeholder(position: int) -> str:
        return f"${position}"

    @property
    def values(self) -> List[Any]:
        """A copy of the collected values, in placeholder order."""
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({self._values!r})"
