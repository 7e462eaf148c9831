"""
Configuration management for the nodemx package.

This module provides a clean interface for loading, validating, and accessing
the ``[nodemx]`` settings from a TOML file with singleton pattern management.
"""

# Main configuration interface
from .manager import (
    clear_config_cache,
    get_config,
    get_config_path,
    is_config_loaded,
    set_config_path,
)

# For advanced usage - direct access to loaders and validators
from .loader import load_main_config, load_toml_file
from .validators import validate_nodemx_config

__all__ = [
    # Main interface
    "get_config",
    "get_config_path",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_nodemx_config",
]
