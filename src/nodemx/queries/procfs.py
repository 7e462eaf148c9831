"""
procfs queries.

System-wide files are read below the configured procfs root. Per-process
queries default to the children of this process's parent, i.e. this
process and its siblings, and accept an explicit pid list instead. Every
query returns an empty table or None while procfs access is disabled.
"""

import logging
import posixpath
import ssl
from typing import List, Optional, Sequence

from ..context import NodeContext
from ..models import signatures
from ..models.table import Signature, TypedTable
from ..parsing.assembly import assemble
from ..parsing.base import LineParser
from ..parsing.coercion import to_bool, to_uint64
from ..parsing.proc_formats import (
    CputimeParser,
    DiskstatsParser,
    LoadavgParser,
    MeminfoParser,
    MountinfoParser,
    NetDevParser,
    PidIoParser,
    PidStatParser,
)
from ..system.procfs import child_pids, filesystem_stats, page_size, process_owner, read_cmdline
from ..system.vfs import read_nlsv, read_one_nlsv
from ..validation import MalformedDataError, VirtualFileNotFoundError
from .results import checked

logger = logging.getLogger(__name__)

DISKSTATS_FILE = "diskstats"
MOUNTINFO_FILE = "self/mountinfo"
MEMINFO_FILE = "meminfo"
NET_DEV_FILE = "self/net/dev"
STAT_FILE = "stat"
LOADAVG_FILE = "loadavg"
FIPS_FILE = "sys/crypto/fips_enabled"


def _proc_path(ctx: NodeContext, name: str) -> str:
    return posixpath.join(ctx.config.procfs_root, name)


def _parse_file(ctx: NodeContext, name: str, parser: LineParser,
                expected: Optional[Signature]) -> TypedTable:
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(parser.signature), expected)
    path = _proc_path(ctx, name)
    return checked(parser.parse(read_nlsv(path), path), expected)


def proc_diskstats(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """/proc/diskstats, 20 columns; counters missing on older kernels are null."""
    return _parse_file(ctx, DISKSTATS_FILE, DiskstatsParser(), expected)


def proc_mountinfo(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """/proc/self/mountinfo, 4 bigint and 6 text columns."""
    return _parse_file(ctx, MOUNTINFO_FILE, MountinfoParser(), expected)


def proc_meminfo(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """/proc/meminfo as (key, val) with values in bytes."""
    return _parse_file(ctx, MEMINFO_FILE, MeminfoParser(), expected)


def proc_network_stats(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """/proc/self/net/dev, one row per interface."""
    return _parse_file(ctx, NET_DEV_FILE, NetDevParser(), expected)


def proc_cputime(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """Aggregate cpu times from the first line of /proc/stat."""
    return _parse_file(ctx, STAT_FILE, CputimeParser(), expected)


def proc_loadavg(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    return _parse_file(ctx, LOADAVG_FILE, LoadavgParser(), expected)


def _target_pids(ctx: NodeContext, pids: Optional[Sequence[int]]) -> List[int]:
    if pids is not None:
        return [int(pid) for pid in pids]
    return child_pids(ctx.config.procfs_root)


def _no_processes(ctx: NodeContext) -> MalformedDataError:
    return MalformedDataError(
        f"no processes found to report on below {ctx.config.procfs_root}",
        path=ctx.config.procfs_root,
    )


def proc_pid_stat(ctx: NodeContext, pids: Optional[Sequence[int]] = None,
                  expected: Optional[Signature] = None) -> TypedTable:
    """/proc/<pid>/stat for each pid, 52 columns."""
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(signatures.PROC_PID_STAT_SIG), expected)
    targets = _target_pids(ctx, pids)
    if not targets:
        raise _no_processes(ctx)

    parser = PidStatParser()
    tables = []
    for pid in targets:
        path = _proc_path(ctx, f"{pid}/stat")
        tables.append(parser.parse([read_one_nlsv(path)], path))
    return checked(TypedTable.concat(parser.signature, tables), expected)


def proc_pid_io(ctx: NodeContext, pids: Optional[Sequence[int]] = None,
                expected: Optional[Signature] = None) -> TypedTable:
    """/proc/<pid>/io for each pid, the pid followed by 7 counters."""
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(signatures.PROC_PID_IO_SIG), expected)
    targets = _target_pids(ctx, pids)
    if not targets:
        raise _no_processes(ctx)

    tables = []
    for pid in targets:
        path = _proc_path(ctx, f"{pid}/io")
        tables.append(PidIoParser(pid).parse(read_nlsv(path), path))
    return checked(TypedTable.concat(signatures.PROC_PID_IO_SIG, tables), expected)


def proc_pid_cmdline(ctx: NodeContext, pids: Optional[Sequence[int]] = None,
                     expected: Optional[Signature] = None) -> TypedTable:
    """(pid, full command line, owner uid, owner name) for each pid."""
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(signatures.PROC_PID_CMDLINE_SIG), expected)
    targets = _target_pids(ctx, pids)
    if not targets:
        raise _no_processes(ctx)

    rows = []
    for pid in targets:
        uid, username = process_owner(ctx.config.procfs_root, pid)
        rows.append([str(pid), read_cmdline(ctx.config.procfs_root, pid), str(uid), username])
    return checked(assemble(rows, signatures.PROC_PID_CMDLINE_SIG,
                            source=ctx.config.procfs_root), expected)


def fsinfo(ctx: NodeContext, pathname: str, expected: Optional[Signature] = None) -> TypedTable:
    """Statistics of the filesystem that holds ``pathname``."""
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(signatures.FSINFO_SIG), expected)
    return checked(assemble([filesystem_stats(pathname)], signatures.FSINFO_SIG,
                            source=pathname), expected)


def kpages_to_bytes(pages) -> int:
    """
    Convert a count of kernel pages (e.g. the rss column of proc_pid_stat)
    to bytes.
    """
    return to_uint64(str(pages)) * page_size()


def fips_mode(ctx: NodeContext) -> Optional[bool]:
    """
    True when the kernel runs in FIPS mode.

    Kernels built without FIPS support lack the flag file; that reads as False.
    """
    if not ctx.procfs_enabled:
        return None
    try:
        return to_bool(read_one_nlsv(_proc_path(ctx, FIPS_FILE)))
    except VirtualFileNotFoundError:
        return False


def openssl_version() -> str:
    """Version string of the OpenSSL library Python is linked against."""
    return ssl.OPENSSL_VERSION


def nodemx_version() -> str:
    from .. import __version__
    return __version__
