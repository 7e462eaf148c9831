"""
Exception taxonomy and error management.

Every failure a query can hit is one of a small set of kinds (access denied,
missing file, unreadable file, malformed data, schema mismatch, unsupported
cgroup mode). Each kind has its own exception class so callers can catch
narrowly, and each carries an ``ErrorKind`` tag so the tagged-result boundary
in ``nodemx.queries`` can report it without re-raising.
"""

import logging
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(Enum):
    """Tag set for query failures."""
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"
    MALFORMED_DATA = "malformed_data"
    SCHEMA_MISMATCH = "schema_mismatch"
    UNSUPPORTED_MODE = "unsupported_mode"


class NodemxError(Exception):
    """
    Base class for all query failures.

    Attributes:
        kind: ErrorKind tag of the failure
        path: Virtual file involved, if any
        line_number: 1-based line number within ``path``, if any
    """

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(self, message: str, path: Optional[str] = None,
                 line_number: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.line_number = line_number


class AccessDeniedError(NodemxError):
    """Filename violates the allow-list (absolute path or parent reference)."""
    kind = ErrorKind.ACCESS_DENIED


class VirtualFileNotFoundError(NodemxError):
    """Virtual file, controller or environment entry does not exist."""
    kind = ErrorKind.NOT_FOUND


class IOFailureError(NodemxError):
    """Virtual file exists but could not be read."""
    kind = ErrorKind.IO_FAILURE


class MalformedDataError(NodemxError):
    """File content does not match the grammar of its format."""
    kind = ErrorKind.MALFORMED_DATA

    def __init__(self, message: str, path: Optional[str] = None,
                 line_number: Optional[int] = None,
                 expected: Any = None, actual: Any = None):
        super().__init__(message, path=path, line_number=line_number)
        self.expected = expected
        self.actual = actual


class SchemaMismatchError(NodemxError):
    """Caller-declared output schema differs from what the parser produced."""
    kind = ErrorKind.SCHEMA_MISMATCH


class UnsupportedModeError(NodemxError):
    """Cgroup hierarchy layout that is deliberately not handled (hybrid)."""
    kind = ErrorKind.UNSUPPORTED_MODE


class ValidationError(Exception):
    """
    Exception raised when configuration validation fails.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors and exit."""
    exit_code = kwargs.pop('exit_code', 1)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    import sys
    sys.exit(exit_code)
