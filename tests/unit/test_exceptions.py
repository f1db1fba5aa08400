"""Unit tests for error-code exceptions."""

import logging

from statsdb.common.exceptions import (
    ErrorCode,
    StatsDBError,
    configuration_error,
    resource_not_found_error,
    unsupported_dialect_error,
    validation_error,
)


class TestStatsDBError:
    """Test the base exception."""

    def test_str_includes_code_and_cause(self):
        cause = ValueError("bad port")
        error = StatsDBError("Engine failed", ErrorCode.CONNECTION_ERROR, cause=cause)

        assert str(error) == "[CONNECTION_001] Engine failed (caused by: ValueError: bad port)"

    def test_to_dict(self):
        error = configuration_error("DATABASE_URL is not set", config_key="DATABASE_URL")

        assert error.to_dict() == {
            "type": "StatsDBError",
            "message": "DATABASE_URL is not set",
            "error_code": "CONFIG_001",
            "error_name": "CONFIG_ERROR",
            "details": {"config_key": "DATABASE_URL"},
            "is_retryable": False,
        }

    def test_from_error_code(self):
        error = StatsDBError.from_error_code(ErrorCode.EXECUTION_ERROR, "failed", is_retryable=True)

        assert error.error_code == ErrorCode.EXECUTION_ERROR
        assert error.is_retryable

    def test_logged_on_creation(self, caplog):
        caplog.set_level(logging.ERROR, logger="statsdb.common.exceptions")

        validation_error("Unsupported date unit: week", field="unit", value="week")

        record = caplog.records[-1]
        assert record.getMessage() == "Unsupported date unit: week"
        assert record.error_code == "VALIDATION_001"
        assert record.details == {"field": "unit", "value": "week"}


class TestHelpers:
    """Test helper constructors."""

    def test_unsupported_dialect_error(self):
        error = unsupported_dialect_error(None)

        assert error.error_code == ErrorCode.DIALECT_NOT_SUPPORTED
        assert error.details == {"database_type": None}
        assert error.message == "Database type 'None' is not supported"

    def test_resource_not_found_error(self):
        error = resource_not_found_error(
            "Schema directory not found",
            resource_type="directory",
            resource_name="db/mysql",
            error_code=ErrorCode.FILE_NOT_FOUND,
        )

        assert error.error_code == ErrorCode.FILE_NOT_FOUND
        assert error.details == {"resource_type": "directory", "resource_name": "db/mysql"}
