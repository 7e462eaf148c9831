"""
Typed tabular result model.

A query result is an ordered set of rows whose column count and column types
are fixed by a ``Signature``. The rows are stored in a Polars DataFrame built
with an explicit schema, so a table can never hold a column of the wrong type.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import polars as pl

from ..validation import SchemaMismatchError


class ColumnType(Enum):
    """Value types a result column can carry."""
    TEXT = "text"
    INTEGER = "integer"
    BIGINT = "bigint"
    NUMERIC = "numeric"
    FLOAT8 = "float8"
    BOOL = "bool"
    TEXT_ARRAY = "text[]"
    BIGINT_ARRAY = "bigint[]"

    @property
    def polars_dtype(self) -> pl.DataType:
        return _POLARS_DTYPES[self]


_POLARS_DTYPES = {
    ColumnType.TEXT: pl.Utf8,
    ColumnType.INTEGER: pl.Int32,
    ColumnType.BIGINT: pl.Int64,
    # kernel counters are unsigned long; they overflow int64 on long uptimes
    ColumnType.NUMERIC: pl.UInt64,
    ColumnType.FLOAT8: pl.Float64,
    ColumnType.BOOL: pl.Boolean,
    ColumnType.TEXT_ARRAY: pl.List(pl.Utf8),
    ColumnType.BIGINT_ARRAY: pl.List(pl.Int64),
}


@dataclass(frozen=True)
class Column:
    """One named, typed output column."""
    name: str
    type: ColumnType


class Signature(tuple):
    """
    Ordered, immutable sequence of Columns describing one query's output.

    Examples:
        >>> sig = Signature.of(("key", ColumnType.TEXT), ("val", ColumnType.BIGINT))
        >>> sig.types
        (<ColumnType.TEXT: 'text'>, <ColumnType.BIGINT: 'bigint'>)
    """

    @classmethod
    def of(cls, *columns: Tuple[str, ColumnType]) -> "Signature":
        return cls(Column(name, ctype) for name, ctype in columns)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self)

    @property
    def types(self) -> Tuple[ColumnType, ...]:
        return tuple(c.type for c in self)

    def polars_schema(self) -> Dict[str, pl.DataType]:
        return {c.name: c.type.polars_dtype for c in self}

    def renamed(self, *names: str) -> "Signature":
        """Same column types under different names."""
        if len(names) != len(self):
            raise ValueError(f"expected {len(self)} names, got {len(names)}")
        return Signature(Column(n, c.type) for n, c in zip(names, self))

    def describe(self) -> str:
        return "(" + ", ".join(f"{c.name} {c.type.value}" for c in self) + ")"


class TypedTable:
    """
    Immutable typed result set.

    Attributes:
        signature: Column layout every row conforms to
        frame: Polars DataFrame holding the rows
    """

    def __init__(self, signature: Signature, frame: pl.DataFrame):
        self.signature = signature
        self.frame = frame

    @classmethod
    def from_values(cls, signature: Signature,
                    rows: Sequence[Sequence[Any]]) -> "TypedTable":
        """Build a table from already-coerced Python values."""
        series = []
        for index, column in enumerate(signature):
            values = [row[index] for row in rows]
            series.append(pl.Series(column.name, values, dtype=column.type.polars_dtype))
        return cls(signature, pl.DataFrame(series))

    @classmethod
    def empty(cls, signature: Signature) -> "TypedTable":
        return cls.from_values(signature, [])

    @classmethod
    def concat(cls, signature: Signature, tables: Sequence["TypedTable"]) -> "TypedTable":
        """Stack tables that share ``signature``, in order."""
        if not tables:
            return cls.empty(signature)
        return cls(signature, pl.concat([table.frame for table in tables], how="vertical"))

    def __len__(self) -> int:
        return self.frame.height

    def __iter__(self):
        return iter(self.rows())

    def __repr__(self) -> str:
        return f"TypedTable{self.signature.describe()} rows={len(self)}"

    @property
    def column_names(self) -> Tuple[str, ...]:
        return self.signature.names

    def rows(self) -> List[Tuple[Any, ...]]:
        return self.frame.rows()

    def to_dicts(self) -> List[Dict[str, Any]]:
        return self.frame.to_dicts()

    def column(self, name: str) -> List[Any]:
        return self.frame.get_column(name).to_list()

    def scalar(self) -> Optional[Any]:
        """First column of the first row, or None for an empty table."""
        if not len(self):
            return None
        return self.frame.row(0)[0]

    def equals(self, other: "TypedTable") -> bool:
        return (
            isinstance(other, TypedTable)
            and tuple(self.signature) == tuple(other.signature)
            and self.frame.equals(other.frame)
        )

    def expect(self, signature: Iterable[Any]) -> "TypedTable":
        """
        Check a caller-declared output schema against this table.

        ``signature`` may be a Signature or a plain sequence of ColumnTypes;
        column names are not compared, only count and types.

        Raises:
            SchemaMismatchError: If the column count or any column type differs
        """
        declared = [c.type if isinstance(c, Column) else c for c in signature]
        actual = list(self.signature.types)
        if len(declared) != len(actual):
            raise SchemaMismatchError(
                "query-specified return tuple and function return type are not compatible: "
                f"number of columns mismatch, expected {len(actual)}, got {len(declared)}"
            )
        for position, (want, have) in enumerate(zip(declared, actual), start=1):
            if want != have:
                raise SchemaMismatchError(
                    "query-specified return tuple and function return type are not compatible: "
                    f"column {position} expected {have.value}, got {getattr(want, 'value', want)}"
                )
        return self
