"""
nodemx: Typed access to node metrics exposed through kernel virtual files.

This package reads cgroup v1/v2 interface files, procfs files and the
Kubernetes Downward API volume, and returns their contents as typed tables
or scalars.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Typed tables, output signatures and cgroup topology types
- validation: Error taxonomy, filename allow-list and error handling
- parsing: Tokenizers, line-format parsers, coercion and table assembly
- system: Virtual file reads, cgroup topology resolution and procfs access
- context: The immutable node context every query receives
- queries: The query functions
- cli: Command-line interface

Usage:
    From command line:
        nodemx mode
        nodemx query cgroup_setof_kv memory.stat

    Programmatically:
        from nodemx import get_context, cgroup_setof_kv
        ctx = get_context()
        table = cgroup_setof_kv(ctx, "memory.stat")
"""

__version__ = "0.1.0"

# Main interfaces
from .config import clear_config_cache, get_config, set_config_path
from .context import NodeContext, build_context, get_context, reload_context

# Model classes for external use
from .models import (
    CgroupMode,
    CgroupPathTable,
    Column,
    ColumnType,
    NodemxConfig,
    Signature,
    TypedTable,
)

# Error taxonomy
from .validation import (
    AccessDeniedError,
    ErrorKind,
    IOFailureError,
    MalformedDataError,
    NodemxError,
    SchemaMismatchError,
    UnsupportedModeError,
    ValidationError,
    VirtualFileNotFoundError,
)

# Queries
from .queries import (
    QueryResult,
    cgroup_mode,
    cgroup_path,
    cgroup_process_count,
    cgroup_scalar_bigint,
    cgroup_setof_kv,
    cgroup_setof_nkv,
    execute,
    proc_meminfo,
)

__all__ = [
    "__version__",
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "NodeContext",
    "build_context",
    "get_context",
    "reload_context",
    # Models
    "CgroupMode",
    "CgroupPathTable",
    "Column",
    "ColumnType",
    "NodemxConfig",
    "Signature",
    "TypedTable",
    # Errors
    "AccessDeniedError",
    "ErrorKind",
    "IOFailureError",
    "MalformedDataError",
    "NodemxError",
    "SchemaMismatchError",
    "UnsupportedModeError",
    "ValidationError",
    "VirtualFileNotFoundError",
    # Queries
    "QueryResult",
    "execute",
    "cgroup_mode",
    "cgroup_path",
    "cgroup_process_count",
    "cgroup_scalar_bigint",
    "cgroup_setof_kv",
    "cgroup_setof_nkv",
    "proc_meminfo",
]
