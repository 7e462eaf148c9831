"""
Validation functions for configuration values and caller-supplied filenames.
"""

import os
import posixpath
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import AccessDeniedError, ValidationError


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_bool(value: Any, field_name: str = "value") -> bool:
    """
    Validate that a value is a real boolean (TOML true/false).

    Raises:
        ValidationError: If value is not a bool
    """
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be true or false, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_absolute_path(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a configured root is a non-empty absolute path.

    The path is not required to exist: a missing root disables the
    subsystem at context construction instead of failing configuration.

    Returns:
        Normalized path string without trailing separator

    Raises:
        ValidationError: If path is empty or relative
    """
    if not path or not isinstance(path, (str, Path)):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=path
        )
    path_str = str(path)
    if not os.path.isabs(path_str):
        raise ValidationError(
            f"{field_name} must be an absolute path, got {path_str}",
            field_name=field_name,
            value=path_str
        )
    return posixpath.normpath(path_str)


def canonicalize_filename(filename: str) -> str:
    """
    Collapse duplicate separators, "." components and trailing slashes.

    ".." components are left in place so that the caller can reject them.

    Examples:
        >>> canonicalize_filename("memory//./memory.stat/")
        'memory/memory.stat'
    """
    absolute = filename.startswith("/")
    parts = [p for p in filename.split("/") if p not in ("", ".")]
    canonical = "/".join(parts)
    return "/" + canonical if absolute else canonical


def validate_relative_filename(filename: Any, field_name: str = "filename") -> str:
    """
    Check a caller-supplied virtual filename against the allow-list rules.

    Args:
        filename: Filename relative to a subsystem root
        field_name: Name used in error messages

    Returns:
        Canonicalized filename

    Raises:
        AccessDeniedError: If the name is empty or absolute, holds a null byte,
            or references a parent directory
    """
    if not isinstance(filename, str) or not filename:
        raise AccessDeniedError(f"{field_name} must be a non-empty relative path")
    if "\0" in filename:
        raise AccessDeniedError(f"{field_name} contains a null byte: {filename!r}", path=filename)

    canonical = canonicalize_filename(filename)
    if canonical.startswith("/"):
        raise AccessDeniedError(
            f"reference to absolute path not allowed: {filename}", path=filename
        )
    if ".." in canonical.split("/"):
        raise AccessDeniedError(
            f'reference to parent directory ("..") not allowed: {filename}', path=filename
        )
    if not canonical:
        raise AccessDeniedError(f"{field_name} must name a file: {filename!r}", path=filename)
    return canonical


def join_under_root(root: str, filename: str) -> str:
    """
    Join a validated relative filename under an allow-listed root.

    Raises:
        AccessDeniedError: If the lexically normalized result leaves ``root``
    """
    relative = validate_relative_filename(filename)
    normalized_root = posixpath.normpath(root)
    full_path = posixpath.normpath(posixpath.join(normalized_root, relative))
    if full_path != normalized_root and not full_path.startswith(normalized_root.rstrip("/") + "/"):
        raise AccessDeniedError(
            f"path {filename} resolves outside of {normalized_root}", path=filename
        )
    return full_path


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Returns:
        The matching choice, in the case used by ``choices``

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]
