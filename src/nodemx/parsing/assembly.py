"""
Row and table assembly.

Parsers produce rows of string tokens (None standing for a missing
trailing column). ``assemble`` checks every row against the declared
signature, coerces each token to its column type and packages the result
as an immutable TypedTable. A failure on any row fails the whole call.
"""

import logging
from typing import Any, List, Optional, Sequence

from ..models.table import Signature, TypedTable
from ..validation import MalformedDataError
from .coercion import coerce_value

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "expected at least one line of data from this source but found none"


def assemble(
    rows: Sequence[Sequence[Optional[Any]]],
    signature: Signature,
    source: Optional[str] = None,
    allow_empty: bool = False,
    line_numbers: Optional[Sequence[int]] = None,
) -> TypedTable:
    """
    Build a TypedTable from parsed token rows.

    Args:
        rows: Token rows, already normalized to the signature's column count
        signature: Declared output columns
        source: File the rows came from, for error messages
        allow_empty: True when zero rows is a legitimate result (subsystem
            disabled, or a format where an empty file is meaningful)
        line_numbers: 1-based source line of each row, defaults to row index + 1

    Returns:
        TypedTable whose every row matches ``signature``

    Raises:
        MalformedDataError: On zero rows when not allowed, a column count
            mismatch, or a token that does not coerce to its column type
    """
    if not rows and not allow_empty:
        raise MalformedDataError(f"{NO_DATA_MESSAGE}: {source}", path=source)

    ncol = len(signature)
    typed_rows: List[List[Any]] = []
    for index, row in enumerate(rows):
        line_number = line_numbers[index] if line_numbers else index + 1
        if len(row) != ncol:
            raise MalformedDataError(
                f"expected {ncol} tokens, got {len(row)} in file {source}, line {line_number}",
                path=source, line_number=line_number, expected=ncol, actual=len(row),
            )
        typed_row = []
        for token, column in zip(row, signature):
            try:
                typed_row.append(coerce_value(token, column.type))
            except MalformedDataError as e:
                raise MalformedDataError(
                    f"{e} (column {column.name}) in file {source}, line {line_number}",
                    path=source, line_number=line_number,
                )
        typed_rows.append(typed_row)

    logger.debug(f"Assembled {len(typed_rows)} rows of {signature.describe()} from {source}")
    return TypedTable.from_values(signature, typed_rows)
