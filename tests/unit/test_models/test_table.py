"""
Unit tests for signatures and the TypedTable result model.
"""

import polars as pl
import pytest

from nodemx.models import Column, ColumnType, Signature, TypedTable, signatures
from nodemx.validation import SchemaMismatchError


@pytest.mark.unit
class TestSignature:
    """Test cases for Signature."""

    def test_names_and_types(self):
        sig = Signature.of(("key", ColumnType.TEXT), ("val", ColumnType.BIGINT))

        assert sig.names == ("key", "val")
        assert sig.types == (ColumnType.TEXT, ColumnType.BIGINT)
        assert sig.describe() == "(key text, val bigint)"

    def test_polars_schema(self):
        schema = signatures.TEXT_TEXT_FLOAT8_SIG.polars_schema()
        assert schema == {"key": pl.Utf8, "subkey": pl.Utf8, "val": pl.Float64}

    def test_renamed(self):
        sig = signatures.TEXT_BIGINT_SIG.renamed("name", "bytes")
        assert sig.names == ("name", "bytes")
        with pytest.raises(ValueError):
            signatures.TEXT_BIGINT_SIG.renamed("only")

    def test_fixed_query_widths(self):
        assert len(signatures.PROC_DISKSTATS_SIG) == 20
        assert len(signatures.PROC_MOUNTINFO_SIG) == 10
        assert len(signatures.PROC_PID_STAT_SIG) == 52
        assert len(signatures.PROC_NETWORK_STATS_SIG) == 17


@pytest.mark.unit
class TestTypedTable:
    """Test cases for TypedTable."""

    def test_frame_dtypes_follow_signature(self):
        table = TypedTable.from_values(signatures.TEXT_BIGINT_SIG, [["a", 1]])
        assert table.frame.schema == {"key": pl.Utf8, "val": pl.Int64}

    def test_empty_table_keeps_schema(self):
        table = TypedTable.empty(signatures.PROC_LOADAVG_SIG)

        assert len(table) == 0
        assert table.scalar() is None
        assert table.frame.columns == list(signatures.PROC_LOADAVG_SIG.names)

    def test_concat(self):
        first = TypedTable.from_values(signatures.BIGINT_SIG, [[1]])
        second = TypedTable.from_values(signatures.BIGINT_SIG, [[2], [3]])

        assert TypedTable.concat(signatures.BIGINT_SIG, [first, second]).column("val") == [1, 2, 3]
        assert len(TypedTable.concat(signatures.BIGINT_SIG, [])) == 0

    def test_equals(self):
        a = TypedTable.from_values(signatures.BIGINT_SIG, [[1]])
        b = TypedTable.from_values(signatures.BIGINT_SIG, [[1]])
        c = TypedTable.from_values(signatures.TEXT_SIG, [["1"]])

        assert a.equals(b)
        assert not a.equals(c)

    def test_expect_accepts_matching_types(self):
        table = TypedTable.empty(signatures.TEXT_BIGINT_SIG)

        assert table.expect([ColumnType.TEXT, ColumnType.BIGINT]) is table
        assert table.expect(Signature.of(("k", ColumnType.TEXT), ("v", ColumnType.BIGINT))) is table

    def test_expect_column_count_mismatch(self):
        table = TypedTable.empty(signatures.TEXT_BIGINT_SIG)
        with pytest.raises(SchemaMismatchError) as exc_info:
            table.expect([ColumnType.TEXT])
        assert "number of columns mismatch" in str(exc_info.value)

    def test_expect_column_type_mismatch(self):
        table = TypedTable.empty(signatures.TEXT_BIGINT_SIG)
        with pytest.raises(SchemaMismatchError) as exc_info:
            table.expect([Column("key", ColumnType.TEXT), Column("val", ColumnType.FLOAT8)])
        assert "column 2" in str(exc_info.value)
