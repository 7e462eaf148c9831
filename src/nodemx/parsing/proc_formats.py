"""
Parsers for fixed-column procfs files.

Column layouts follow Documentation/admin-guide/iostats.rst (diskstats)
and Documentation/filesystems/proc.rst (mountinfo, meminfo, net/dev, stat,
loadavg, <pid>/stat and <pid>/io). Newer kernels append columns, so some
formats accept more than one token count and pad missing trailing columns
with nulls.
"""

import logging
from typing import Iterator, Optional, Sequence, Tuple

from ..models import signatures
from ..validation import MalformedDataError
from .base import FormatKind, LineParser, Row
from .coercion import human_size_to_bytes
from .tokenizers import split_tokens

logger = logging.getLogger(__name__)

DISKSTATS_TOKEN_COUNTS = (14, 18, 20)
MOUNTINFO_MIN_TOKENS = 10
MOUNTINFO_SEPARATOR = "-"
NET_DEV_HEADER_LINES = 2


def _token_count_error(ntok: int, source: Optional[str], number: int,
                       expected: Optional[object] = None) -> MalformedDataError:
    return MalformedDataError(
        f"unexpected number of tokens, {ntok}, in file {source}, line {number}",
        path=source, line_number=number, expected=expected, actual=ntok,
    )


class DiskstatsParser(LineParser):
    """
    /proc/diskstats.

    Lines carry 14 fields (before 4.18), 18 (discard counters, 4.18+) or 20
    (flush counters, 5.5+). Shorter lines are padded with nulls to 20 columns.
    """

    kind = FormatKind.DISKSTATS
    default_signature = signatures.PROC_DISKSTATS_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        ncol = len(self.signature)
        for number, line in enumerate(lines, start=1):
            tokens = split_tokens(line)
            if len(tokens) not in DISKSTATS_TOKEN_COUNTS:
                raise _token_count_error(len(tokens), source, number, DISKSTATS_TOKEN_COUNTS)
            row: Row = list(tokens)
            row.extend([None] * (ncol - len(tokens)))
            yield number, row


class MountinfoParser(LineParser):
    """
    /proc/self/mountinfo.

    Keeps the first six fields, with ``major:minor`` split in two, skips the
    optional tagged fields up to the ``-`` separator and keeps the three
    fields after it. Example::

        36 35 98:0 /mnt1 /mnt2 rw,noatime master:1 - ext3 /dev/root rw,errors=continue
    """

    kind = FormatKind.MOUNTINFO
    default_signature = signatures.PROC_MOUNTINFO_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        ncol = len(self.signature)
        for number, line in enumerate(lines, start=1):
            tokens = split_tokens(line)
            if len(tokens) < MOUNTINFO_MIN_TOKENS:
                raise _token_count_error(len(tokens), source, number, MOUNTINFO_MIN_TOKENS)

            row: Row = []
            for token in tokens[:6]:
                if len(row) == 2:
                    major, sep, minor = token.partition(":")
                    if not sep:
                        raise MalformedDataError(
                            f'missing ":" in file {source}, line {number}',
                            path=source, line_number=number,
                        )
                    row.extend([major, minor])
                else:
                    row.append(token)

            if MOUNTINFO_SEPARATOR in tokens[6:]:
                start = tokens.index(MOUNTINFO_SEPARATOR, 6) + 1
                row.extend(tokens[start:])

            if len(row) != ncol:
                raise MalformedDataError(
                    f"malformed line in file {source}, line {number}",
                    path=source, line_number=number, expected=ncol, actual=len(row),
                )
            yield number, row


class MeminfoParser(LineParser):
    """
    /proc/meminfo.

    ``<key>: <value> [<unit>]``; the colon is stripped from the key and a
    value with a unit is converted to bytes (``MemTotal: 16 kB`` -> 16384).
    """

    kind = FormatKind.MEMINFO
    default_signature = signatures.TEXT_BIGINT_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        for number, line in enumerate(lines, start=1):
            tokens = split_tokens(line)
            if len(tokens) not in (2, 3):
                raise _token_count_error(len(tokens), source, number, (2, 3))

            key = tokens[0][:-1] if tokens[0].endswith(":") else tokens[0]
            if len(tokens) == 3:
                try:
                    value = str(human_size_to_bytes(tokens[1], tokens[2]))
                except MalformedDataError as e:
                    raise MalformedDataError(
                        f"{e} in file {source}, line {number}",
                        path=source, line_number=number,
                    )
            else:
                value = tokens[1]
            yield number, [key, value]


class NetDevParser(LineParser):
    """
    /proc/self/net/dev.

    Two header lines, then one line per interface: the interface name with a
    trailing colon followed by 8 receive and 8 transmit counters. Counters
    above 9 digits can touch the colon (``eth0:1234``); those are split.
    """

    kind = FormatKind.NET_DEV
    default_signature = signatures.PROC_NETWORK_STATS_SIG
    header_lines = NET_DEV_HEADER_LINES

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        ncol = len(self.signature)
        for number, line in enumerate(lines[self.header_lines:], start=self.header_lines + 1):
            name, sep, counters = line.partition(":")
            if sep:
                tokens = [name.strip()] + split_tokens(counters)
            else:
                tokens = split_tokens(line)
            if len(tokens) != ncol:
                raise _token_count_error(len(tokens), source, number, ncol)
            yield number, tokens


class LoadavgParser(LineParser):
    """
    /proc/loadavg: ``0.20 0.18 0.12 1/80 11206``.

    The runnable/total field is dropped; the last pid is kept.
    """

    kind = FormatKind.LOADAVG
    default_signature = signatures.PROC_LOADAVG_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        if len(lines) != 1:
            raise MalformedDataError(
                f"expected 1, got {len(lines)}, lines from file {source}",
                path=source, expected=1, actual=len(lines),
            )
        tokens = split_tokens(lines[0])
        if len(tokens) < 5:
            raise MalformedDataError(
                f"got too few values in file {source}",
                path=source, line_number=1, expected=5, actual=len(tokens),
            )
        yield 1, [tokens[0], tokens[1], tokens[2], tokens[4]]


class CputimeParser(LineParser):
    """
    Aggregate ``cpu`` line of /proc/stat: user, nice, system, idle, iowait.

    Only the first line is read; the rest of the file is ignored.
    """

    kind = FormatKind.CPUTIME
    default_signature = signatures.PROC_CPUTIME_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        if not lines:
            raise MalformedDataError(f"got too few lines in file {source}", path=source)
        ncol = len(self.signature)
        tokens = split_tokens(lines[0])
        if len(tokens) < ncol + 1:
            raise MalformedDataError(
                f"got too few values in file {source}",
                path=source, line_number=1, expected=ncol + 1, actual=len(tokens),
            )
        yield 1, tokens[1:ncol + 1]


class PidStatParser(LineParser):
    """
    /proc/<pid>/stat.

    The command name sits between the first ``(`` and the last ``)`` and
    may itself contain spaces and parentheses, so it is cut out before the
    remaining 50 fields are split.
    """

    kind = FormatKind.PID_STAT
    default_signature = signatures.PROC_PID_STAT_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        ncol = len(self.signature)
        for number, line in enumerate(lines, start=1):
            open_paren = line.find("(")
            close_paren = line.rfind(")")
            if open_paren < 0 or close_paren < open_paren:
                raise MalformedDataError(
                    f"missing command name in file {source}, line {number}",
                    path=source, line_number=number,
                )
            pid = line[:open_paren].strip()
            comm = line[open_paren + 1:close_paren]
            rest = split_tokens(line[close_paren + 1:])
            if len(rest) + 2 != ncol:
                raise MalformedDataError(
                    f"expected {ncol} tokens, got {len(rest) + 2} in space separated file "
                    f"{source}, line {number}",
                    path=source, line_number=number, expected=ncol, actual=len(rest) + 2,
                )
            yield number, [pid, comm] + rest


class PidIoParser(LineParser):
    """
    /proc/<pid>/io.

    Seven ``<key>: <value>`` lines folded into a single row, with the pid
    the file belongs to as the first column.
    """

    kind = FormatKind.PID_IO
    default_signature = signatures.PROC_PID_IO_SIG

    def __init__(self, pid: int, signature=None):
        super().__init__(signature)
        self.pid = pid

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        nvalues = len(self.signature) - 1
        if len(lines) != nvalues:
            raise MalformedDataError(
                f"expected {nvalues} tokens, got {len(lines)} in keyed file {source}",
                path=source, expected=nvalues, actual=len(lines),
            )
        row: Row = [str(self.pid)]
        for number, line in enumerate(lines, start=1):
            tokens = split_tokens(line)
            if len(tokens) != 2:
                raise MalformedDataError(
                    f"expected 2 tokens, got {len(tokens)} in keyed file {source}, line {number}",
                    path=source, line_number=number, expected=2, actual=len(tokens),
                )
            row.append(tokens[1])
        yield 1, row

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(pid={self.pid})"
