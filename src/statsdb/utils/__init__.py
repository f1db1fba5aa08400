"""Utility functions and helpers for statsdb."""

from statsdb.utils.datetime import get_timezone, get_utc_offset
from statsdb.utils.decorators import traced

__all__ = [
    # DateTime utilities
    "get_timezone",
    "get_utc_offset",
    # Decorators
    "traced",
]
