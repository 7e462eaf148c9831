"""
Factory for creating parser instances.
"""

import logging
import posixpath
from typing import Dict, Type, Union

from .base import FormatKind, LineParser
from .cgroup_formats import (
    ArrayParser,
    FlatKeyedParser,
    KeqvParser,
    KeySubkeyValueParser,
    NestedKeyedParser,
    ScalarParser,
    SetofParser,
)
from .proc_formats import (
    CputimeParser,
    DiskstatsParser,
    LoadavgParser,
    MeminfoParser,
    MountinfoParser,
    NetDevParser,
    PidIoParser,
    PidStatParser,
)

logger = logging.getLogger(__name__)

_REGISTRY: Dict[FormatKind, Type[LineParser]] = {}

# Well-known cgroup v1/v2 interface files whose format is not a single value
_KNOWN_FILES: Dict[str, FormatKind] = {
    "cgroup.procs": FormatKind.SETOF,
    "cgroup.threads": FormatKind.SETOF,
    "tasks": FormatKind.SETOF,
    "cgroup.controllers": FormatKind.ARRAY,
    "cgroup.subtree_control": FormatKind.ARRAY,
    "cpu.max": FormatKind.ARRAY,
    "cgroup.events": FormatKind.FLAT_KEYED,
    "cgroup.stat": FormatKind.FLAT_KEYED,
    "cpu.stat": FormatKind.FLAT_KEYED,
    "cpuacct.stat": FormatKind.FLAT_KEYED,
    "memory.events": FormatKind.FLAT_KEYED,
    "memory.events.local": FormatKind.FLAT_KEYED,
    "memory.stat": FormatKind.FLAT_KEYED,
    "memory.swap.events": FormatKind.FLAT_KEYED,
    "pids.events": FormatKind.FLAT_KEYED,
    "io.stat": FormatKind.NESTED_KEYED,
    "io.max": FormatKind.NESTED_KEYED,
    "cpu.pressure": FormatKind.NESTED_KEYED,
    "io.pressure": FormatKind.NESTED_KEYED,
    "memory.pressure": FormatKind.NESTED_KEYED,
    "memory.numa_stat": FormatKind.NESTED_KEYED,
    "blkio.throttle.io_serviced": FormatKind.KEY_SUBKEY_VALUE,
    "blkio.throttle.io_service_bytes": FormatKind.KEY_SUBKEY_VALUE,
    "blkio.io_serviced": FormatKind.KEY_SUBKEY_VALUE,
    "blkio.io_service_bytes": FormatKind.KEY_SUBKEY_VALUE,
    "blkio.io_service_time": FormatKind.KEY_SUBKEY_VALUE,
    "blkio.io_wait_time": FormatKind.KEY_SUBKEY_VALUE,
    "blkio.io_merged": FormatKind.KEY_SUBKEY_VALUE,
    "blkio.io_queued": FormatKind.KEY_SUBKEY_VALUE,
    "diskstats": FormatKind.DISKSTATS,
    "mountinfo": FormatKind.MOUNTINFO,
    "meminfo": FormatKind.MEMINFO,
    "dev": FormatKind.NET_DEV,
    "loadavg": FormatKind.LOADAVG,
    "stat": FormatKind.CPUTIME,
}


def register_parser(parser_class: Type[LineParser]) -> Type[LineParser]:
    """Register ``parser_class`` under its ``kind``. Usable as a decorator."""
    _REGISTRY[parser_class.kind] = parser_class
    return parser_class


for _parser_class in (
    ScalarParser,
    SetofParser,
    ArrayParser,
    FlatKeyedParser,
    KeySubkeyValueParser,
    NestedKeyedParser,
    KeqvParser,
    DiskstatsParser,
    MountinfoParser,
    MeminfoParser,
    NetDevParser,
    LoadavgParser,
    CputimeParser,
    PidStatParser,
    PidIoParser,
):
    register_parser(_parser_class)


def create_parser(kind: Union[FormatKind, str], **kwargs) -> LineParser:
    """
    Create a parser instance for the specified format kind.

    Args:
        kind: FormatKind or its string value ('kv', 'nkv', 'diskstats', ...)
        **kwargs: Constructor arguments (``signature``, ``pid`` for pid_io)

    Returns:
        LineParser instance

    Raises:
        ValueError: If the format kind is unknown
    """
    if isinstance(kind, str):
        try:
            kind = FormatKind(kind)
        except ValueError:
            raise ValueError(f"Unsupported format kind: {kind}")

    parser_class = _REGISTRY.get(kind)
    if parser_class is None:
        raise ValueError(f"Unsupported format kind: {kind.value}")

    logger.debug(f"Creating {parser_class.__name__} for format {kind.value}")
    return parser_class(**kwargs)


def detect_format(filename: str) -> FormatKind:
    """
    Guess the format of a virtual file from its name.

    Unknown names are assumed to hold a single value.

    Examples:
        >>> detect_format("memory.stat")
        <FormatKind.FLAT_KEYED: 'kv'>
        >>> detect_format("memory.max")
        <FormatKind.SCALAR: 'scalar'>
    """
    return _KNOWN_FILES.get(posixpath.basename(filename), FormatKind.SCALAR)
