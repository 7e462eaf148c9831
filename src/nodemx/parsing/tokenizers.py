"""
Line and token splitting for kernel virtual files.

Kernel virtual files are small, newline separated and use runs of ASCII
spaces between fields. Empty lines carry no data and are dropped. The
quoted-string decoder handles the ``key="value"`` lines written by the
Kubernetes Downward API, whose values use Go's strconv.Quote escapes.
"""

import logging
from typing import List, Optional, Tuple, Union

from ..validation import MalformedDataError

logger = logging.getLogger(__name__)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def split_lines(content: Union[str, bytes], path: Optional[str] = None) -> List[str]:
    """Split raw file content into its non-empty lines.

    Raises:
        MalformedDataError: If byte content is not valid UTF-8

    Examples:
        >>> split_lines("a 1\\n\\nb 2\\n")
        ['a 1', 'b 2']
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedDataError(f"invalid byte sequence in file {path}: {e}", path=path)
    return [line for line in content.split("\n") if line]


def split_tokens(line: str) -> List[str]:
    """Split one line on single spaces or runs of spaces.

    Examples:
        >>> split_tokens("  8  0 sda 1")
        ['8', '0', 'sda', '1']
    """
    return [token for token in line.split(" ") if token]


def parse_nested_keyed_line(line: str, path: Optional[str] = None,
                            line_number: Optional[int] = None) -> List[Tuple[str, str]]:
    """
    Parse ``<groupkey> <subkey>=<value> <subkey>=<value> ...``.

    Index 0 of the result holds ``("key", <groupkey>)``; every following
    entry is one ``(subkey, value)`` pair, so a line with ``m`` entries
    carries ``m - 1`` pairs.

    Raises:
        MalformedDataError: If a pair lacks its subkey or its value
    """
    pairs: List[Tuple[str, str]] = []
    for index, token in enumerate(split_tokens(line)):
        if index == 0:
            pairs.append(("key", token))
            continue
        subkey, sep, value = token.partition("=")
        # strtok semantics: "=" runs are separators, so "a==1" is ("a", "1")
        value = value.lstrip("=").split("=", 1)[0] if sep else ""
        if not subkey:
            raise MalformedDataError(
                "missing key in nested keyed line", path=path, line_number=line_number
            )
        if not value:
            raise MalformedDataError(
                "missing value in nested keyed line", path=path, line_number=line_number
            )
        pairs.append((subkey, value))
    return pairs


def _read_hex(source: str, start: int, count: int, what: str) -> int:
    digits = source[start:start + count]
    if len(digits) != count or not all(ch in _HEX_DIGITS for ch in digits):
        raise MalformedDataError(f"malformed {what} literal")
    return int(digits, 16)


def parse_quoted_string(source: str) -> Tuple[str, str]:
    """
    Decode a double-quoted, backslash-escaped value.

    A leading quote is skipped. ``\\\\ \\a \\b \\f \\n \\r \\t \\v \\"`` map to
    their control characters, ``\\xHH`` inserts one raw byte, ``\\uHHHH`` and
    ``\\UHHHHHHHH`` insert a code point encoded as UTF-8. Any other escaped
    character is kept together with its backslash. Decoding stops at an
    unescaped quote that ends the input.

    Args:
        source: Text following the ``=`` of a key/value line

    Returns:
        Tuple of (decoded value, unconsumed remainder of ``source``)

    Raises:
        MalformedDataError: On a short or non-hex ``\\x``/``\\u``/``\\U`` escape,
            or when raw bytes do not form valid UTF-8
    """
    out = bytearray()
    pos = 1 if source.startswith('"') else 0
    end = len(source)
    last_slash = False

    while pos < end:
        ch = source[pos]
        if last_slash:
            last_slash = False
            if ch in _SIMPLE_ESCAPES:
                out += _SIMPLE_ESCAPES[ch].encode("utf-8")
                pos += 1
            elif ch == "x":
                out.append(_read_hex(source, pos + 1, 2, "\\x"))
                pos += 3
            elif ch in ("u", "U"):
                width = 4 if ch == "u" else 8
                code_point = _read_hex(source, pos + 1, width, "unicode")
                try:
                    out += chr(code_point).encode("utf-8")
                except (ValueError, UnicodeEncodeError):
                    raise MalformedDataError(f"invalid unicode code point {code_point:#x}")
                pos += 1 + width
            else:
                out += ("\\" + ch).encode("utf-8")
                pos += 1
            continue

        if ch == '"' and pos + 1 == end:
            pos += 1
            break
        if ch == "\\":
            last_slash = True
        else:
            out += ch.encode("utf-8")
        pos += 1

    try:
        decoded = out.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedDataError(f"invalid byte sequence in quoted value: {e}")
    return decoded, source[pos:]


def parse_keqv_line(line: str, path: Optional[str] = None,
                    line_number: Optional[int] = None) -> List[str]:
    """
    Parse a Downward API ``key="quoted value"`` line into [key, value].

    Examples:
        >>> parse_keqv_line('var="abc=123"')
        ['var', 'abc=123']

    Raises:
        MalformedDataError: If the line does not yield exactly two tokens
    """
    key, sep, rest = line.lstrip("=").partition("=")
    ntok = 0
    values: List[str] = []
    if key:
        ntok = 1
        values.append(key)
        if sep:
            try:
                value, _ = parse_quoted_string(rest)
            except MalformedDataError as e:
                raise MalformedDataError(str(e), path=path, line_number=line_number)
            ntok = 2
            values.append(value)

    if ntok != 2:
        raise MalformedDataError(
            f"incorrect format for key equals quoted value line: expected 2 tokens, found {ntok}",
            path=path, line_number=line_number, expected=2, actual=ntok,
        )
    return values
