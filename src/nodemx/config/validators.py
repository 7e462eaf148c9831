"""
Configuration validation utilities.

Turns the raw ``[nodemx]`` table into a validated NodemxConfig.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    DEFAULT_CGROUP_ROOT,
    DEFAULT_KDAPI_PATH,
    DEFAULT_PROCFS_ROOT,
    NodemxConfig,
)
from ..validation import ValidationError, validate_absolute_path, validate_bool

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset({
    "cgroupfs_enabled",
    "cgroup_root",
    "containerized",
    "kdapi_enabled",
    "kdapi_path",
    "procfs_enabled",
    "procfs_root",
})


def validate_nodemx_config(config_data: Dict[str, Any]) -> NodemxConfig:
    """
    Validate and create a NodemxConfig from raw configuration data.

    Args:
        config_data: Raw ``[nodemx]`` table from TOML

    Returns:
        Validated NodemxConfig instance

    Raises:
        ValidationError: If a key is unknown or a value has the wrong type
    """
    unknown = sorted(set(config_data) - _KNOWN_KEYS)
    if unknown:
        raise ValidationError(
            f"unknown configuration keys in [nodemx]: {', '.join(unknown)}",
            field_name="nodemx",
            value=unknown,
        )

    containerized = config_data.get("containerized")
    if containerized is not None:
        containerized = validate_bool(containerized, field_name="nodemx.containerized")

    config = NodemxConfig(
        cgroupfs_enabled=validate_bool(
            config_data.get("cgroupfs_enabled", True), field_name="nodemx.cgroupfs_enabled"
        ),
        cgroup_root=validate_absolute_path(
            config_data.get("cgroup_root", DEFAULT_CGROUP_ROOT), field_name="nodemx.cgroup_root"
        ),
        containerized=containerized,
        kdapi_enabled=validate_bool(
            config_data.get("kdapi_enabled", True), field_name="nodemx.kdapi_enabled"
        ),
        kdapi_path=validate_absolute_path(
            config_data.get("kdapi_path", DEFAULT_KDAPI_PATH), field_name="nodemx.kdapi_path"
        ),
        procfs_enabled=validate_bool(
            config_data.get("procfs_enabled", True), field_name="nodemx.procfs_enabled"
        ),
        procfs_root=validate_absolute_path(
            config_data.get("procfs_root", DEFAULT_PROCFS_ROOT), field_name="nodemx.procfs_root"
        ),
    )
    logger.debug(f"Validated configuration: {config}")
    return config
