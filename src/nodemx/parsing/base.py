"""
Abstract base class for virtual file line-format parsers.

Every format the kernel uses for cgroup and procfs files gets one parser
class. A parser turns the non-empty lines of one file into token rows that
already have the signature's column count; ``parse`` then hands those rows
to the assembler, which coerces them into a TypedTable.

By keeping every format behind this one interface, query functions can
select a parser from the registry by FormatKind and treat all formats the
same way.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from ..models.table import Signature, TypedTable
from .assembly import assemble

logger = logging.getLogger(__name__)

Row = List[Optional[str]]


class FormatKind(Enum):
    """Virtual file encodings understood by the parser registry."""
    SCALAR = "scalar"
    SETOF = "setof"
    ARRAY = "array"
    FLAT_KEYED = "kv"
    KEY_SUBKEY_VALUE = "ksv"
    NESTED_KEYED = "nkv"
    KEY_EQUALS_QUOTED_VALUE = "keqv"
    DISKSTATS = "diskstats"
    MOUNTINFO = "mountinfo"
    MEMINFO = "meminfo"
    NET_DEV = "net_dev"
    LOADAVG = "loadavg"
    CPUTIME = "cputime"
    PID_STAT = "pid_stat"
    PID_IO = "pid_io"


class LineParser(ABC):
    """
    Base class for all line-format parsers.

    Subclasses set ``kind`` and ``default_signature`` and implement
    ``iter_rows``. Formats whose column types are chosen by the caller
    (scalar, setof, array) accept a ``signature`` argument.

    Attributes:
        signature: Output columns of the produced table
        header_lines: Number of leading lines that carry no data
    """

    kind: FormatKind
    default_signature: Signature
    header_lines: int = 0

    def __init__(self, signature: Optional[Signature] = None):
        self.signature = signature if signature is not None else self.default_signature
        self._check_signature(self.signature)

    def _check_signature(self, signature: Signature) -> None:
        """Reject signatures whose width the format cannot produce."""
        if len(signature) != len(self.default_signature):
            raise ValueError(
                f"{self.kind.value} parser produces {len(self.default_signature)} columns, "
                f"signature has {len(signature)}"
            )

    @abstractmethod
    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        """
        Convert the lines of one file into token rows.

        Args:
            lines: Non-empty lines of the file, header lines included
            source: File path, for error messages

        Yields:
            (1-based source line number, row) pairs. Each row holds exactly
            ``len(self.signature)`` string tokens; None marks a column the
            file did not provide

        Raises:
            MalformedDataError: If a line does not match the format's grammar
        """

    def parse(self, lines: Sequence[str], source: Optional[str] = None,
              allow_empty: bool = False) -> TypedTable:
        """
        Parse the lines of one file into a TypedTable.

        Args:
            lines: Non-empty lines of the file
            source: File path, for error messages
            allow_empty: Accept a file that yields no rows

        Raises:
            MalformedDataError: On a grammar violation or a bad token
        """
        numbered = list(self.iter_rows(lines, source))
        return assemble(
            [row for _, row in numbered],
            self.signature,
            source=source,
            allow_empty=allow_empty,
            line_numbers=[number for number, _ in numbered],
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}{self.signature.describe()}"
