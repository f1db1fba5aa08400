"""Protocol definitions for statsdb.

Protocols provide type-safe interfaces without requiring inheritance,
following Python's structural subtyping (duck typing with type hints).
"""

from .client import DatabaseClient

__all__ = [
    "DatabaseClient",
]
