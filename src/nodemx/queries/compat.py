"""
pg_proctab compatible views.

Monitoring tools written against the pg_proctab extension (pg_top in
remote mode, for instance) expect these column layouts. They are derived
from the procfs queries with polars; no extra files are read.
"""

import logging
from typing import Dict, Optional, Sequence

import polars as pl

from ..context import NodeContext
from ..models import signatures
from ..models.table import Signature, TypedTable
from ..system.procfs import page_size
from .procfs import proc_cputime, proc_diskstats, proc_loadavg, proc_meminfo
from .procfs import proc_pid_cmdline, proc_pid_io, proc_pid_stat
from .results import checked

logger = logging.getLogger(__name__)

KB = 1024

_DISKUSAGE_SOURCES: Dict[str, str] = {
    "major": "major_number",
    "minor": "minor_number",
    "devname": "device_name",
    "reads_completed": "reads_completed_successfully",
    "reads_merged": "reads_merged",
    "sectors_read": "sectors_read",
    "readtime": "time_spent_reading_ms",
    "writes_completed": "writes_completed",
    "writes_merged": "writes_merged",
    "sectors_written": "sectors_written",
    "writetime": "time_spent_writing_ms",
    "current_io": "ios_currently_in_progress",
    "iotime": "time_spent_doing_ios_ms",
    "totaliotime": "weighted_time_spent_doing_ios_ms",
    "discards_completed": "discards_completed_successfully",
    "discards_merged": "discards_merged",
    "sectors_discarded": "sectors_discarded",
    "discardtime": "time_spent_discarding",
    "flushes_completed": "flush_requests_completed_successfully",
    "flushtime": "time_spent_flushing",
}
# counters added in later kernels, reported as 0 where the kernel lacks them
_DISKUSAGE_OPTIONAL = frozenset({
    "discards_completed", "discards_merged", "sectors_discarded",
    "discardtime", "flushes_completed", "flushtime",
})


def _project(frame: pl.DataFrame, signature: Signature,
             exprs: Dict[str, pl.Expr]) -> TypedTable:
    """Select ``signature``'s columns from ``frame``, cast to their declared types."""
    columns = [
        exprs.get(column.name, pl.col(column.name))
        .cast(column.type.polars_dtype, strict=False)
        .alias(column.name)
        for column in signature
    ]
    return TypedTable(signature, frame.select(columns))


def pg_cputime(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    return proc_cputime(ctx, expected)


def pg_loadavg(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    return proc_loadavg(ctx, expected)


def pg_memusage(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """
    Memory usage in kB. ``memshared`` is the kernel's Shmem value; keys the
    kernel does not report come back as null.
    """
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(signatures.MEMUSAGE_SIG), expected)

    meminfo = dict(proc_meminfo(ctx).rows())

    def kb(key: str) -> Optional[int]:
        value = meminfo.get(key)
        return None if value is None else value // KB

    def used(total: str, free: str) -> Optional[int]:
        if meminfo.get(total) is None or meminfo.get(free) is None:
            return None
        return (meminfo[total] - meminfo[free]) // KB

    row = [
        used("MemTotal", "MemFree"),
        kb("MemFree"),
        kb("Shmem"),
        kb("Buffers"),
        kb("Cached"),
        used("SwapTotal", "SwapFree"),
        kb("SwapFree"),
        kb("SwapCached"),
    ]
    return checked(TypedTable.from_values(signatures.MEMUSAGE_SIG, [row]), expected)


def pg_proctab(ctx: NodeContext, pids: Optional[Sequence[int]] = None,
               expected: Optional[Signature] = None) -> TypedTable:
    """
    One row per process joining stat, cmdline and io, ordered by pid;
    ``rss`` is in kB.
    """
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(signatures.PG_PROCTAB_SIG), expected)

    stat = proc_pid_stat(ctx, pids).frame
    cmdline = proc_pid_cmdline(ctx, pids).frame
    io = proc_pid_io(ctx, pids).frame
    joined = (
        stat.join(cmdline, on="pid", how="inner")
        .join(io, on="pid", how="inner")
        .sort("pid")
    )

    exprs = {"rss": pl.col("rss") * page_size() // KB}
    return checked(_project(joined, signatures.PG_PROCTAB_SIG, exprs), expected)


def pg_diskusage(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """proc_diskstats under pg_proctab's names, missing counters as 0."""
    if not ctx.procfs_enabled:
        return checked(TypedTable.empty(signatures.PG_DISKUSAGE_SIG), expected)

    frame = proc_diskstats(ctx).frame
    exprs = {}
    for name, source in _DISKUSAGE_SOURCES.items():
        expr = pl.col(source)
        if name in _DISKUSAGE_OPTIONAL:
            expr = expr.fill_null(0)
        exprs[name] = expr
    return checked(_project(frame, signatures.PG_DISKUSAGE_SIG, exprs), expected)
