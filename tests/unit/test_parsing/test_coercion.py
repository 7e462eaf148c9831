"""
Unit tests for token to typed value conversion.
"""

import pytest

from nodemx.models import ColumnType
from nodemx.parsing.coercion import (
    FLOAT64_MAX,
    INT64_MAX,
    UINT64_MAX,
    coerce_value,
    human_size_to_bytes,
    to_bool,
    to_float64,
    to_int32,
    to_int64,
    to_uint64,
)
from nodemx.validation import MalformedDataError


@pytest.mark.unit
class TestIntegerCoercion:
    """Test cases for integer conversions."""

    @pytest.mark.parametrize("token", ["max", "MAX", "Max"])
    def test_max_sentinel_is_case_insensitive(self, token):
        assert to_int64(token) == INT64_MAX

    def test_plain_values(self):
        assert to_int64("42") == 42
        assert to_int64("-1") == -1
        assert to_int64("+7") == 7

    @pytest.mark.parametrize("token", ["abc", "12abc", "", "1.5", " 1"])
    def test_rejects_non_integers(self, token):
        with pytest.raises(MalformedDataError):
            to_int64(token)

    def test_int64_overflow(self):
        with pytest.raises(MalformedDataError) as exc_info:
            to_int64("9223372036854775808")
        assert "out of range" in str(exc_info.value)

    def test_int32_range(self):
        assert to_int32("2147483647") == 2147483647
        with pytest.raises(MalformedDataError):
            to_int32("2147483648")

    def test_uint64(self):
        assert to_uint64("18446744073709551615") == UINT64_MAX
        assert to_uint64("max") == UINT64_MAX
        with pytest.raises(MalformedDataError):
            to_uint64("-1")


@pytest.mark.unit
class TestOtherCoercions:
    """Test cases for float, bool, size and dispatch conversions."""

    def test_float64(self):
        assert to_float64("1.25") == 1.25
        assert to_float64("max") == FLOAT64_MAX
        assert to_float64("inf") == float("inf")
        assert to_float64("-Infinity") == float("-inf")

    @pytest.mark.parametrize("token", ["abc", "1_000", "1e400", "-1e400"])
    def test_float64_rejects(self, token):
        with pytest.raises(MalformedDataError):
            to_float64(token)

    def test_bool(self):
        assert to_bool("1") is True
        assert to_bool("0\n") is False
        with pytest.raises(MalformedDataError):
            to_bool("2")

    def test_human_size_binary_units(self):
        assert human_size_to_bytes("1024", "kB") == 1048576
        assert human_size_to_bytes("1.5", "kb") == 1536
        assert human_size_to_bytes("2", "MB") == 2 * 1024 ** 2
        assert human_size_to_bytes("16") == 16

    def test_human_size_unknown_unit(self):
        with pytest.raises(MalformedDataError) as exc_info:
            human_size_to_bytes("1", "XB")
        assert "valid units" in str(exc_info.value)

    def test_coerce_value_dispatch(self):
        assert coerce_value(None, ColumnType.BIGINT) is None
        assert coerce_value("7", ColumnType.BIGINT) == 7
        assert coerce_value("x", ColumnType.TEXT) == "x"
        assert coerce_value(["max", "100000"], ColumnType.BIGINT_ARRAY) == [INT64_MAX, 100000]
        assert coerce_value(["a", "b"], ColumnType.TEXT_ARRAY) == ["a", "b"]
