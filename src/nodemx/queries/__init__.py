"""
Query functions for the nodemx package.

Each query reads its virtual files fresh and returns a typed result: a
TypedTable for set-returning queries, a plain value (or None) for scalar
ones. Queries take the NodeContext explicitly; subsystems the context marks
disabled yield empty tables or None.

Queries raise NodemxError subclasses on failure. ``execute`` wraps a call
into a QueryResult for callers that prefer tagged results.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .cgroup import (
    cgroup_array_bigint,
    cgroup_array_text,
    cgroup_mode,
    cgroup_path,
    cgroup_process_count,
    cgroup_scalar_bigint,
    cgroup_scalar_float8,
    cgroup_scalar_text,
    cgroup_setof_bigint,
    cgroup_setof_ksv,
    cgroup_setof_kv,
    cgroup_setof_nkv,
    cgroup_setof_text,
)
from .compat import pg_cputime, pg_diskusage, pg_loadavg, pg_memusage, pg_proctab
from .env import envvar_bigint, envvar_text
from .kdapi import kdapi_scalar_bigint, kdapi_setof_kv
from .procfs import (
    fips_mode,
    fsinfo,
    kpages_to_bytes,
    nodemx_version,
    openssl_version,
    proc_cputime,
    proc_diskstats,
    proc_loadavg,
    proc_meminfo,
    proc_mountinfo,
    proc_network_stats,
    proc_pid_cmdline,
    proc_pid_io,
    proc_pid_stat,
)
from .results import QueryResult, execute


@dataclass(frozen=True)
class QuerySpec:
    """
    Registry entry describing how to call a query by name.

    Attributes:
        function: The query function
        uses_context: Whether the first argument is the NodeContext
        argument: Name of the single user argument, if any
            ("filename", "name", "pathname", "pages" or "pids")
    """

    function: Callable
    uses_context: bool = True
    argument: Optional[str] = None


QUERIES: Dict[str, QuerySpec] = {
    "cgroup_mode": QuerySpec(cgroup_mode),
    "cgroup_path": QuerySpec(cgroup_path),
    "cgroup_process_count": QuerySpec(cgroup_process_count),
    "cgroup_scalar_bigint": QuerySpec(cgroup_scalar_bigint, argument="filename"),
    "cgroup_scalar_float8": QuerySpec(cgroup_scalar_float8, argument="filename"),
    "cgroup_scalar_text": QuerySpec(cgroup_scalar_text, argument="filename"),
    "cgroup_setof_bigint": QuerySpec(cgroup_setof_bigint, argument="filename"),
    "cgroup_setof_text": QuerySpec(cgroup_setof_text, argument="filename"),
    "cgroup_array_text": QuerySpec(cgroup_array_text, argument="filename"),
    "cgroup_array_bigint": QuerySpec(cgroup_array_bigint, argument="filename"),
    "cgroup_setof_kv": QuerySpec(cgroup_setof_kv, argument="filename"),
    "cgroup_setof_ksv": QuerySpec(cgroup_setof_ksv, argument="filename"),
    "cgroup_setof_nkv": QuerySpec(cgroup_setof_nkv, argument="filename"),
    "envvar_text": QuerySpec(envvar_text, uses_context=False, argument="name"),
    "envvar_bigint": QuerySpec(envvar_bigint, uses_context=False, argument="name"),
    "kdapi_setof_kv": QuerySpec(kdapi_setof_kv, argument="filename"),
    "kdapi_scalar_bigint": QuerySpec(kdapi_scalar_bigint, argument="filename"),
    "proc_diskstats": QuerySpec(proc_diskstats),
    "proc_mountinfo": QuerySpec(proc_mountinfo),
    "proc_meminfo": QuerySpec(proc_meminfo),
    "proc_network_stats": QuerySpec(proc_network_stats),
    "proc_cputime": QuerySpec(proc_cputime),
    "proc_loadavg": QuerySpec(proc_loadavg),
    "proc_pid_stat": QuerySpec(proc_pid_stat, argument="pids"),
    "proc_pid_io": QuerySpec(proc_pid_io, argument="pids"),
    "proc_pid_cmdline": QuerySpec(proc_pid_cmdline, argument="pids"),
    "fsinfo": QuerySpec(fsinfo, argument="pathname"),
    "kpages_to_bytes": QuerySpec(kpages_to_bytes, uses_context=False, argument="pages"),
    "fips_mode": QuerySpec(fips_mode),
    "openssl_version": QuerySpec(openssl_version, uses_context=False),
    "nodemx_version": QuerySpec(nodemx_version, uses_context=False),
    "pg_cputime": QuerySpec(pg_cputime),
    "pg_loadavg": QuerySpec(pg_loadavg),
    "pg_memusage": QuerySpec(pg_memusage),
    "pg_proctab": QuerySpec(pg_proctab, argument="pids"),
    "pg_diskusage": QuerySpec(pg_diskusage),
}

__all__ = [
    "QUERIES",
    "QueryResult",
    "QuerySpec",
    "cgroup_array_bigint",
    "cgroup_array_text",
    "cgroup_mode",
    "cgroup_path",
    "cgroup_process_count",
    "cgroup_scalar_bigint",
    "cgroup_scalar_float8",
    "cgroup_scalar_text",
    "cgroup_setof_bigint",
    "cgroup_setof_ksv",
    "cgroup_setof_kv",
    "cgroup_setof_nkv",
    "cgroup_setof_text",
    "envvar_bigint",
    "envvar_text",
    "execute",
    "fips_mode",
    "fsinfo",
    "kdapi_scalar_bigint",
    "kdapi_setof_kv",
    "kpages_to_bytes",
    "nodemx_version",
    "openssl_version",
    "pg_cputime",
    "pg_diskusage",
    "pg_loadavg",
    "pg_memusage",
    "pg_proctab",
    "proc_cputime",
    "proc_diskstats",
    "proc_loadavg",
    "proc_meminfo",
    "proc_mountinfo",
    "proc_network_stats",
    "proc_pid_cmdline",
    "proc_pid_io",
    "proc_pid_stat",
]
