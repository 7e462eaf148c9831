"""
Validation and error handling for the nodemx package.

This module provides the query error taxonomy, configuration validation
and the filename allow-list checks applied before any file I/O.
"""

from .exceptions import (
    AccessDeniedError,
    ErrorKind,
    ErrorSeverity,
    IOFailureError,
    MalformedDataError,
    NodemxError,
    SchemaMismatchError,
    UnsupportedModeError,
    ValidationError,
    VirtualFileNotFoundError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)

from .validators import (
    canonicalize_filename,
    join_under_root,
    validate_absolute_path,
    validate_bool,
    validate_enum_choice,
    validate_positive_integer,
    validate_relative_filename,
)

__all__ = [
    # Error taxonomy
    "AccessDeniedError",
    "ErrorKind",
    "ErrorSeverity",
    "IOFailureError",
    "MalformedDataError",
    "NodemxError",
    "SchemaMismatchError",
    "UnsupportedModeError",
    "ValidationError",
    "VirtualFileNotFoundError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    # Validators
    "canonicalize_filename",
    "join_under_root",
    "validate_absolute_path",
    "validate_bool",
    "validate_enum_choice",
    "validate_positive_integer",
    "validate_relative_filename",
]
