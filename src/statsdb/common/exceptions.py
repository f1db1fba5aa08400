from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for statsdb operations.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.
    Each category has a specific prefix for easy identification.

    Attributes:
        CONFIG_*: Configuration-related errors
        VALIDATION_*: Input validation errors
        CONNECTION_*: Engine creation and connection errors
        EXECUTION_*: Runtime execution errors
        RESOURCE_*: Missing files and directories
        DIALECT_*: Unsupported or unresolvable SQL dialects
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_MISSING = "CONFIG_002"
    CONFIG_INVALID = "CONFIG_003"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"

    # Connection errors
    CONNECTION_ERROR = "CONNECTION_001"

    # Execution errors
    EXECUTION_ERROR = "EXECUTION_001"

    # Resource errors
    RESOURCE_NOT_FOUND = "RESOURCE_001"
    FILE_NOT_FOUND = "RESOURCE_002"

    # Dialect errors
    DIALECT_NOT_SUPPORTED = "DIALECT_001"


class StatsDBError(Exception):
    """Base exception for all statsdb errors.

    Errors are categorized with error codes instead of numerous specific
    exception classes.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
        is_retryable: Whether the error is transient and can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXECUTION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

        # Lazy import to avoid circular dependency
        from statsdb.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
                "is_retryable": is_retryable,
            },
            exc_info=cause,
        )

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable
        }

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "StatsDBError":
        """Create exception from error code.

        Args:
            error_code: Error code
            message: Error message
            **kwargs: Additional arguments for StatsDBError

        Returns:
            StatsDBError instance
        """
        return cls(message=message, error_code=error_code, **kwargs)


# Helper functions for common error scenarios
def _error(
    error_code: ErrorCode,
    message: str,
    context: Dict[str, Any],
    kwargs: Dict[str, Any],
) -> StatsDBError:
    """Merge ``context`` (None values dropped) into ``kwargs['details']``."""
    details = dict(kwargs.pop("details", None) or {})
    details.update({key: value for key, value in context.items() if value is not None})
    return StatsDBError(message=message, error_code=error_code, details=details, **kwargs)


def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
    **kwargs
) -> StatsDBError:
    """Create a configuration error (CONFIG_* code) for ``config_key``."""
    return _error(error_code, message, {"config_key": config_key}, kwargs)


def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    **kwargs
) -> StatsDBError:
    """Create a VALIDATION_ERROR; ``value`` is recorded as a string."""
    return _error(
        ErrorCode.VALIDATION_ERROR,
        message,
        {"field": field, "value": None if value is None else str(value)},
        kwargs,
    )


def connection_error(
    message: str,
    service: Optional[str] = None,
    **kwargs
) -> StatsDBError:
    """Create a CONNECTION_ERROR for the database ``service`` (URL scheme)."""
    return _error(ErrorCode.CONNECTION_ERROR, message, {"service": service}, kwargs)


def unsupported_dialect_error(
    database_type: Any,
    message: Optional[str] = None,
    **kwargs
) -> StatsDBError:
    """Create a DIALECT_NOT_SUPPORTED error.

    Raised whenever a connection string or override does not resolve to one
    of the supported dialects. Never retryable.

    Args:
        database_type: The unresolved type tag (may be None)
        message: Optional message, defaults to a description of the tag
        **kwargs: Additional StatsDBError arguments
    """
    kwargs["details"] = {
        **(kwargs.get("details") or {}),
        "database_type": None if database_type is None else str(database_type),
    }
    return _error(
        ErrorCode.DIALECT_NOT_SUPPORTED,
        message or f"Database type '{database_type}' is not supported",
        {},
        kwargs,
    )


def resource_not_found_error(
    message: str,
    resource_type: Optional[str] = None,
    resource_name: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
    **kwargs
) -> StatsDBError:
    """Create a RESOURCE_NOT_FOUND / FILE_NOT_FOUND error."""
    return _error(
        error_code,
        message,
        {"resource_type": resource_type, "resource_name": resource_name},
        kwargs,
    )
