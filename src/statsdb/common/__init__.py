"""Common exceptions for statsdb.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    StatsDBError and include structured error information.
"""

from statsdb.common.exceptions import (
    ErrorCode,
    StatsDBError,
    # Helper functions
    configuration_error,
    connection_error,
    resource_not_found_error,
    unsupported_dialect_error,
    validation_error,
)

__all__ = [
    # Base Exception and Error Codes
    "StatsDBError",
    "ErrorCode",
    # Helper functions
    "configuration_error",
    "validation_error",
    "connection_error",
    "unsupported_dialect_error",
    "resource_not_found_error",
]
