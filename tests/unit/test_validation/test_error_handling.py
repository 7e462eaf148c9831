"""
Unit tests for the error taxonomy and the error handling helpers.
"""

import logging

import pytest

from nodemx.validation import (
    AccessDeniedError,
    ErrorKind,
    ErrorSeverity,
    IOFailureError,
    MalformedDataError,
    NodemxError,
    SchemaMismatchError,
    UnsupportedModeError,
    VirtualFileNotFoundError,
    handle_cli_error,
    handle_error,
)


@pytest.mark.unit
class TestErrorTaxonomy:
    """Test cases for the NodemxError subclasses."""

    @pytest.mark.parametrize(
        "error_class, kind",
        [
            (AccessDeniedError, ErrorKind.ACCESS_DENIED),
            (VirtualFileNotFoundError, ErrorKind.NOT_FOUND),
            (IOFailureError, ErrorKind.IO_FAILURE),
            (MalformedDataError, ErrorKind.MALFORMED_DATA),
            (SchemaMismatchError, ErrorKind.SCHEMA_MISMATCH),
            (UnsupportedModeError, ErrorKind.UNSUPPORTED_MODE),
        ],
    )
    def test_kinds(self, error_class, kind):
        error = error_class("boom", path="/x")
        assert isinstance(error, NodemxError)
        assert error.kind == kind
        assert error.path == "/x"

    def test_malformed_data_details(self):
        error = MalformedDataError("bad", path="/x", line_number=3, expected=2, actual=4)
        assert (error.line_number, error.expected, error.actual) == (3, 2, 4)


@pytest.mark.unit
class TestHandleError:
    """Test cases for handle_error() and its wrappers."""

    def test_reraise_by_default(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("x"), "testing")

    def test_logs_at_severity(self, caplog):
        logger = logging.getLogger("nodemx.test")
        with caplog.at_level(logging.WARNING, logger="nodemx.test"):
            handle_error(
                ValueError("x"), "testing", severity=ErrorSeverity.WARNING,
                reraise=False, logger=logger,
            )
        assert "Error in testing: x" in caplog.text

    def test_cli_error_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("x"), "testing", exit_code=3)
        assert exc_info.value.code == 3
