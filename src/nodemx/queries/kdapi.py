"""
Kubernetes Downward API queries.

Pod metadata projected by a downwardAPI volume (labels, annotations,
resource limits) is read from files below the configured Downward API
path. Label and annotation files hold ``key="value"`` lines; resource
files hold a single integer.
"""

import logging
from typing import Optional

from ..context import NodeContext
from ..models import signatures
from ..models.table import Signature, TypedTable
from ..parsing.cgroup_formats import KeqvParser, ScalarParser
from ..system.vfs import read_nlsv
from ..validation import join_under_root
from .results import checked

logger = logging.getLogger(__name__)


def fq_kdapi_path(ctx: NodeContext, filename: str) -> str:
    """
    Absolute path of a Downward API file.

    Raises:
        AccessDeniedError: If the filename is absolute or references ".."
    """
    return join_under_root(ctx.config.kdapi_path, filename)


def kdapi_setof_kv(ctx: NodeContext, filename: str,
                   expected: Optional[Signature] = None) -> TypedTable:
    """``key="value"`` file as (key, val) text rows, e.g. ``labels``."""
    if not ctx.kdapi_enabled:
        return checked(TypedTable.empty(signatures.TEXT_TEXT_SIG), expected)
    path = fq_kdapi_path(ctx, filename)
    return checked(KeqvParser().parse(read_nlsv(path), path), expected)


def kdapi_scalar_bigint(ctx: NodeContext, filename: str) -> Optional[int]:
    """Single integer file, e.g. ``mem_limit``."""
    if not ctx.kdapi_enabled:
        return None
    path = fq_kdapi_path(ctx, filename)
    return ScalarParser(signatures.BIGINT_SIG).parse(read_nlsv(path), path).scalar()
