"""
Command-line interface for the nodemx package.

This module provides the ``nodemx`` entry point.
"""

from .main import main

__all__ = [
    "main",
]
