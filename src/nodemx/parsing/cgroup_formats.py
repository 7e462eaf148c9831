"""
Parsers for the generic cgroup interface file formats.

These formats are described in Documentation/admin-guide/cgroup-v2.rst
("Interface Files"): single values, newline separated values, space
separated values, flat keyed and nested keyed files. Key/subkey/value and
the Downward API ``key="value"`` format share the same machinery.
"""

import logging
from typing import Iterator, Optional, Sequence, Tuple

from ..models import signatures
from ..validation import MalformedDataError
from .base import FormatKind, LineParser, Row
from .tokenizers import parse_keqv_line, parse_nested_keyed_line, split_tokens

logger = logging.getLogger(__name__)

AGGREGATE_KEY = "all"


class ScalarParser(LineParser):
    """One value on exactly one line."""

    kind = FormatKind.SCALAR
    default_signature = signatures.BIGINT_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        if len(lines) != 1:
            raise MalformedDataError(
                f"expected 1, got {len(lines)}, lines from file {source}",
                path=source, expected=1, actual=len(lines),
            )
        yield 1, [lines[0]]


class SetofParser(LineParser):
    """One value per line."""

    kind = FormatKind.SETOF
    default_signature = signatures.BIGINT_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        for number, line in enumerate(lines, start=1):
            yield number, [line]


class ArrayParser(LineParser):
    """
    Space separated values on a single line, returned as one array value.

    The file must hold exactly one line; a line of blanks yields a null.
    """

    kind = FormatKind.ARRAY
    default_signature = signatures.BIGINT_ARRAY_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        if len(lines) != 1:
            raise MalformedDataError(
                f"expected 1, got {len(lines)}, lines from file {source}",
                path=source, expected=1, actual=len(lines),
            )
        tokens = split_tokens(lines[0])
        yield 1, [tokens if tokens else None]


class FlatKeyedParser(LineParser):
    """``<key> <value>`` on every line."""

    kind = FormatKind.FLAT_KEYED
    default_signature = signatures.TEXT_BIGINT_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        if not lines:
            raise MalformedDataError(f"no lines in flat keyed file: {source}", path=source)
        for number, line in enumerate(lines, start=1):
            tokens = split_tokens(line)
            if len(tokens) != 2:
                raise MalformedDataError(
                    f"expected 2 tokens, got {len(tokens)} in flat keyed file {source}, "
                    f"line {number}",
                    path=source, line_number=number, expected=2, actual=len(tokens),
                )
            yield number, tokens


class KeySubkeyValueParser(LineParser):
    """
    ``<key> <subkey> <value>`` lines, as in the v1 blkio throttle files.

    Two-token lines are totals; they are widened to three columns with the
    key ``all``.

    Examples:
        ``8:0 Read 4096`` -> (8:0, Read, 4096)
        ``Total 4096`` -> (all, Total, 4096)
    """

    kind = FormatKind.KEY_SUBKEY_VALUE
    default_signature = signatures.TEXT_TEXT_BIGINT_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        if not lines:
            raise MalformedDataError(f"no lines in key/subkey/value file: {source}", path=source)
        for number, line in enumerate(lines, start=1):
            tokens = split_tokens(line)
            if len(tokens) == 2:
                yield number, [AGGREGATE_KEY] + tokens
            elif len(tokens) == 3:
                yield number, tokens
            else:
                raise MalformedDataError(
                    f"expected 2 or 3 tokens, got {len(tokens)} in key/subkey/value file "
                    f"{source}, line {number}",
                    path=source, line_number=number, actual=len(tokens),
                )


class NestedKeyedParser(LineParser):
    """
    ``<key> <subkey>=<value> <subkey>=<value> ...`` lines, as in io.stat.

    The first line fixes how many pairs each line carries. Every pair becomes
    one output row, so ``n`` lines of ``m`` entries (key included) produce
    ``n * (m - 1)`` rows.
    """

    kind = FormatKind.NESTED_KEYED
    default_signature = signatures.TEXT_TEXT_FLOAT8_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        if not lines:
            raise MalformedDataError(f"no lines in nested keyed file: {source}", path=source)

        expected: Optional[int] = None
        for number, line in enumerate(lines, start=1):
            pairs = parse_nested_keyed_line(line, source, number)
            if expected is None:
                expected = len(pairs)
            if len(pairs) != expected:
                raise MalformedDataError(
                    f"not nested keyed file: {source}, line {number} has "
                    f"{len(pairs) - 1} pairs, expected {expected - 1}",
                    path=source, line_number=number,
                    expected=expected - 1, actual=len(pairs) - 1,
                )
            group_key = pairs[0][1]
            for subkey, value in pairs[1:]:
                yield number, [group_key, subkey, value]


class KeqvParser(LineParser):
    """Downward API ``key="quoted value"`` lines."""

    kind = FormatKind.KEY_EQUALS_QUOTED_VALUE
    default_signature = signatures.TEXT_TEXT_SIG

    def iter_rows(self, lines: Sequence[str],
                  source: Optional[str] = None) -> Iterator[Tuple[int, Row]]:
        for number, line in enumerate(lines, start=1):
            yield number, parse_keqv_line(line, source, number)
