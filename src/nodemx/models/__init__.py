"""
Data models for the nodemx package.

- config: settings consumed by the context builder
- cgroup: resolver states and the controller path table
- table: typed columns, signatures and the TypedTable result
- signatures: fixed output signatures of every query
"""

from .cgroup import DEFAULT_CONTROLLER, UNIFIED_CONTROLLER, CgroupMode, CgroupPathTable
from .config import NodemxConfig
from .table import Column, ColumnType, Signature, TypedTable

__all__ = [
    "CgroupMode",
    "CgroupPathTable",
    "Column",
    "ColumnType",
    "DEFAULT_CONTROLLER",
    "NodemxConfig",
    "Signature",
    "TypedTable",
    "UNIFIED_CONTROLLER",
]
