"""
Cgroup queries.

Filenames are cgroup interface file names such as ``memory.stat``; the
part before the first ``.`` selects the controller whose directory the
file is read from. Every query except ``cgroup_mode`` returns an empty
table or None while cgroup access is disabled.
"""

import logging
from typing import List, Optional, Tuple

from ..context import NodeContext
from ..models import signatures
from ..models.table import Signature, TypedTable
from ..parsing.cgroup_formats import (
    ArrayParser,
    FlatKeyedParser,
    KeySubkeyValueParser,
    NestedKeyedParser,
    ScalarParser,
    SetofParser,
)
from ..parsing.assembly import assemble
from ..system.cgroup import cgroup_members, fq_cgroup_path
from ..system.vfs import read_nlsv
from ..validation import MalformedDataError
from .results import checked

logger = logging.getLogger(__name__)


def _read(ctx: NodeContext, filename: str) -> Tuple[str, List[str]]:
    path = fq_cgroup_path(ctx.path_table, filename)
    return path, read_nlsv(path)


def cgroup_mode(ctx: NodeContext) -> str:
    """``legacy``, ``unified``, ``hybrid`` or ``disabled``. Always succeeds."""
    return ctx.cgroup_mode.value


def cgroup_path(ctx: NodeContext, expected: Optional[Signature] = None) -> TypedTable:
    """(controller, path) for every controller active for this process."""
    if not ctx.cgroupfs_enabled:
        return checked(TypedTable.empty(signatures.CGROUP_PATH_SIG), expected)
    if not len(ctx.path_table):
        raise MalformedDataError("no lines in cgpath")
    return checked(assemble(list(ctx.path_table), signatures.CGROUP_PATH_SIG), expected)


def cgroup_process_count(ctx: NodeContext) -> Optional[int]:
    """Number of distinct processes in this process's cgroup."""
    if not ctx.cgroupfs_enabled:
        return None
    return len(cgroup_members(ctx.path_table))


def _scalar(ctx: NodeContext, filename: str, signature: Signature):
    if not ctx.cgroupfs_enabled:
        return None
    path, lines = _read(ctx, filename)
    return ScalarParser(signature).parse(lines, path).scalar()


def cgroup_scalar_bigint(ctx: NodeContext, filename: str) -> Optional[int]:
    """Single-value file as int64; ``max`` maps to the int64 maximum."""
    return _scalar(ctx, filename, signatures.BIGINT_SIG)


def cgroup_scalar_float8(ctx: NodeContext, filename: str) -> Optional[float]:
    return _scalar(ctx, filename, signatures.FLOAT8_SIG)


def cgroup_scalar_text(ctx: NodeContext, filename: str) -> Optional[str]:
    return _scalar(ctx, filename, signatures.TEXT_SIG)


def _setof(ctx: NodeContext, filename: str, signature: Signature,
           expected: Optional[Signature]) -> TypedTable:
    if not ctx.cgroupfs_enabled:
        return checked(TypedTable.empty(signature), expected)
    path, lines = _read(ctx, filename)
    return checked(SetofParser(signature).parse(lines, path), expected)


def cgroup_setof_bigint(ctx: NodeContext, filename: str,
                        expected: Optional[Signature] = None) -> TypedTable:
    """One int64 per line, e.g. cgroup.procs."""
    return _setof(ctx, filename, signatures.BIGINT_SIG, expected)


def cgroup_setof_text(ctx: NodeContext, filename: str,
                      expected: Optional[Signature] = None) -> TypedTable:
    return _setof(ctx, filename, signatures.TEXT_SIG, expected)


def _array(ctx: NodeContext, filename: str, signature: Signature):
    if not ctx.cgroupfs_enabled:
        return None
    path, lines = _read(ctx, filename)
    return ArrayParser(signature).parse(lines, path).scalar()


def cgroup_array_text(ctx: NodeContext, filename: str) -> Optional[List[str]]:
    """Space separated single-line file, e.g. cgroup.controllers."""
    return _array(ctx, filename, signatures.TEXT_ARRAY_SIG)


def cgroup_array_bigint(ctx: NodeContext, filename: str) -> Optional[List[int]]:
    """Space separated single-line file of integers, e.g. cpu.max."""
    return _array(ctx, filename, signatures.BIGINT_ARRAY_SIG)


def cgroup_setof_kv(ctx: NodeContext, filename: str,
                    expected: Optional[Signature] = None) -> TypedTable:
    """Flat keyed file as (key, val bigint), e.g. memory.stat."""
    if not ctx.cgroupfs_enabled:
        return checked(TypedTable.empty(signatures.TEXT_BIGINT_SIG), expected)
    path, lines = _read(ctx, filename)
    return checked(FlatKeyedParser().parse(lines, path), expected)


def cgroup_setof_ksv(ctx: NodeContext, filename: str,
                     expected: Optional[Signature] = None) -> TypedTable:
    """Key/subkey/value file as (key, subkey, val bigint), e.g. blkio.throttle.io_serviced."""
    if not ctx.cgroupfs_enabled:
        return checked(TypedTable.empty(signatures.TEXT_TEXT_BIGINT_SIG), expected)
    path, lines = _read(ctx, filename)
    return checked(KeySubkeyValueParser().parse(lines, path), expected)


def cgroup_setof_nkv(ctx: NodeContext, filename: str,
                     expected: Optional[Signature] = None) -> TypedTable:
    """Nested keyed file as (key, subkey, val float8), e.g. io.stat."""
    if not ctx.cgroupfs_enabled:
        return checked(TypedTable.empty(signatures.TEXT_TEXT_FLOAT8_SIG), expected)
    path, lines = _read(ctx, filename)
    # a file of bare group keys carries no pairs and yields no rows
    return checked(NestedKeyedParser().parse(lines, path, allow_empty=True), expected)
