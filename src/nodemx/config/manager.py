"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import NodemxConfig
from ..validation import ErrorSeverity, handle_config_error
from .loader import load_main_config
from .validators import validate_nodemx_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

# This global variable will hold the single instance of the loaded NodemxConfig.
_CONFIG: Optional[NodemxConfig] = None

# Defines the default path to the main configuration file, relative to this script's location.
# This can be programmatically overridden (e.g., in tests or by the CLI main.py)
# to load a different configuration.
_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Args:
        config_path: Path to the main config.toml file

    Note:
        Clears the cached configuration; the next get_config() call loads
        from the new path.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def get_config_path() -> Path:
    return _CONFIG_FILE_PATH


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> NodemxConfig:
    """
    Load and validate the configuration file.

    A missing file is not an error: every setting has a default, so the
    library works out of the box on a standard Linux host.

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using defaults")
        return NodemxConfig()

    try:
        config = validate_nodemx_config(load_main_config(config_path))
        logger.info(f"Successfully loaded configuration from {config_path}")
        return config
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> NodemxConfig:
    """
    Get the global configuration, loading it if necessary.

    Returns:
        The singleton NodemxConfig instance

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None
