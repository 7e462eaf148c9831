"""
Virtual file parsing for the nodemx package.

This module turns the text the kernel synthesizes under cgroupfs and procfs
into typed tables:
- Tokenizers split content into lines and space separated tokens and decode
  Downward API quoted values
- Line-format parsers, one per encoding, turn lines into token rows
- Coercion converts tokens to typed values, honouring the ``max`` sentinel
- Assembly validates rows against a signature and builds the TypedTable

Parsers are selected through a registry keyed by FormatKind, so callers can
handle every format through the same ``parse(lines)`` interface.
"""

from .assembly import NO_DATA_MESSAGE, assemble
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
from .coercion import (
    FLOAT64_MAX,
    INT64_MAX,
    coerce_value,
    human_size_to_bytes,
    to_float64,
    to_int64,
)
from .factory import create_parser, detect_format, register_parser
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
from .tokenizers import parse_keqv_line, parse_quoted_string, split_lines, split_tokens

__all__ = [
    "ArrayParser",
    "CputimeParser",
    "DiskstatsParser",
    "FLOAT64_MAX",
    "FlatKeyedParser",
    "FormatKind",
    "INT64_MAX",
    "KeqvParser",
    "KeySubkeyValueParser",
    "LineParser",
    "LoadavgParser",
    "MeminfoParser",
    "MountinfoParser",
    "NO_DATA_MESSAGE",
    "NestedKeyedParser",
    "NetDevParser",
    "PidIoParser",
    "PidStatParser",
    "ScalarParser",
    "SetofParser",
    "assemble",
    "coerce_value",
    "create_parser",
    "detect_format",
    "human_size_to_bytes",
    "parse_keqv_line",
    "parse_quoted_string",
    "register_parser",
    "split_lines",
    "split_tokens",
    "to_float64",
    "to_int64",
]
