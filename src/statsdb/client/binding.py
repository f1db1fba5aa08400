"""Bind positional placeholders to SQLAlchemy named parameters.

Fragments are written with ``$N`` markers (``?`` once rewritten for MySQL).
SQLAlchemy ``text()`` clauses take ``:name`` binds and translate them to
whatever paramstyle the driver uses, so positional markers are renamed to
``:p1``, ``:p2``... before execution. Quoted literals and identifiers are
left untouched, which keeps ``'$.key'`` JSON paths and ``'%?%'`` patterns
intact.
"""

import itertools
import re
from typing import Any, Dict, Sequence, Tuple

from statsdb.common.exceptions import validation_error

_TOKEN_PATTERN = re.compile(
    r"'(?:[^']|'')*'"    # string literal
    r'|"(?:[^"]|"")*"'   # quoted identifier
    r"|\$(\d+)"          # $N
    r"|\?"               # ?
)
_DOLLAR_PATTERN = re.compile(r"\$\d+")


def bind_positional(sql: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """Rewrite ``$N`` / ``?`` markers in ``sql`` into named binds.

    A statement uses one marker style: ``$N`` if any is present, otherwise
    ``?`` markers are numbered from left to right.

    Args:
        sql: Statement with positional markers
        params: Values, in marker order

    Returns:
        Tuple of (statement with ``:pN`` binds, mapping of bind name to value)

    Raises:
        StatsDBError: VALIDATION_ERROR if a marker has no matching value

    Example:
        >>> bind_positional("select * from t where a = $1 and b = $2", ["x", 1])
        ('select * from t where a = :p1 and b = :p2', {'p1': 'x', 'p2': 1})
    """
    uses_dollar = _DOLLAR_PATTERN.search(sql) is not None
    sequence = itertools.count(1)
    bound: Dict[str, Any] = {}

    def _replace(match: "re.Match[str]") -> str:
        token = match.group(0)
        if token[0] in "'\"":
            return token

        if match.group(1) is not None:
            position = int(match.group(1))
        elif uses_dollar:
            return token
        else:
            position = next(sequence)

        if not 1 <= position <= len(params):
            raise validation_error(
                f"Placeholder {token} has no matching parameter ({len(params)} given)",
                field="params",
                value=position,
            )

        name = f"p{position}"
        bound[name] = params[position - 1]

        # ":p1::uuid" would not parse as a bind; parenthesize before casts
        if sql.startswith(":", match.end()):
            return f"(:{name})"
        return f":{name}"

    return _TOKEN_PATTERN.sub(_replace, sql), bound
