"""
Unit tests for the generic cgroup interface file parsers.

Covers single values, newline separated values, space separated arrays,
flat keyed, key/subkey/value, nested keyed and Downward API key="value"
formats.
"""

import pytest

from nodemx.models import signatures
from nodemx.parsing.cgroup_formats import (
    AGGREGATE_KEY,
    ArrayParser,
    FlatKeyedParser,
    KeqvParser,
    KeySubkeyValueParser,
    NestedKeyedParser,
    ScalarParser,
    SetofParser,
)
from nodemx.parsing.coercion import INT64_MAX
from nodemx.validation import MalformedDataError


@pytest.mark.unit
class TestSingleValueFormats:
    """Test cases for scalar, setof and array files."""

    def test_scalar_max(self):
        assert ScalarParser().parse(["max"]).scalar() == INT64_MAX

    def test_scalar_text_signature(self):
        table = ScalarParser(signatures.TEXT_SIG).parse(["threaded"])
        assert table.scalar() == "threaded"

    def test_scalar_requires_exactly_one_line(self):
        with pytest.raises(MalformedDataError) as exc_info:
            ScalarParser().parse(["1", "2"], "/cg/memory.max")
        assert "expected 1, got 2" in str(exc_info.value)

    def test_scalar_rejects_wrong_width_signature(self):
        with pytest.raises(ValueError):
            ScalarParser(signatures.TEXT_BIGINT_SIG)

    def test_setof_one_row_per_line(self):
        table = SetofParser().parse(["12", "3", "12"])
        assert table.column("val") == [12, 3, 12]

    def test_setof_empty_file_is_an_error(self):
        with pytest.raises(MalformedDataError):
            SetofParser().parse([], "/cg/cgroup.threads")

    def test_array_bigint(self):
        assert ArrayParser().parse(["max 100000"]).scalar() == [INT64_MAX, 100000]

    def test_array_text(self):
        table = ArrayParser(signatures.TEXT_ARRAY_SIG).parse(["cpu io memory"])
        assert table.scalar() == ["cpu", "io", "memory"]

    def test_array_blank_line_is_null(self):
        assert ArrayParser(signatures.TEXT_ARRAY_SIG).parse(["   "]).scalar() is None

    def test_array_requires_one_line(self):
        with pytest.raises(MalformedDataError):
            ArrayParser().parse([])


@pytest.mark.unit
class TestFlatKeyed:
    """Test cases for flat keyed files."""

    def test_n_lines_give_n_rows(self):
        lines = ["anon 1024", "file 2048", "kernel_stack max"]
        table = FlatKeyedParser().parse(lines)

        assert len(table) == 3
        assert table.rows() == [("anon", 1024), ("file", 2048), ("kernel_stack", INT64_MAX)]

    def test_three_tokens_rejected_with_line_number(self):
        with pytest.raises(MalformedDataError) as exc_info:
            FlatKeyedParser().parse(["anon 1", "file 2 3"], "/cg/memory.stat")
        assert exc_info.value.line_number == 2
        assert exc_info.value.path == "/cg/memory.stat"

    def test_empty_file(self):
        with pytest.raises(MalformedDataError) as exc_info:
            FlatKeyedParser().parse([], "/cg/memory.stat")
        assert "no lines in flat keyed file" in str(exc_info.value)

    def test_reparse_is_identical(self):
        lines = ["anon 1024", "file 2048"]
        assert FlatKeyedParser().parse(lines).equals(FlatKeyedParser().parse(lines))


@pytest.mark.unit
class TestKeySubkeyValue:
    """Test cases for key/subkey/value files."""

    def test_two_tokens_get_aggregate_key(self):
        table = KeySubkeyValueParser().parse(["123 456"])
        assert table.rows() == [(AGGREGATE_KEY, "123", 456)]

    def test_three_tokens_pass_through(self):
        table = KeySubkeyValueParser().parse(["8:0 Read 10", "Total 10"])
        assert table.rows() == [("8:0", "Read", 10), ("all", "Total", 10)]

    def test_four_tokens_fail(self):
        with pytest.raises(MalformedDataError):
            KeySubkeyValueParser().parse(["8:0 Read 10 11"])


@pytest.mark.unit
class TestNestedKeyed:
    """Test cases for nested keyed files."""

    def test_row_count_is_lines_times_pairs(self):
        lines = [
            "some avg10=0.00 avg60=0.50 avg300=1.25 total=12345",
            "full avg10=0.00 avg60=0.00 avg300=0.00 total=0",
        ]
        table = NestedKeyedParser().parse(lines)

        assert len(table) == 2 * 4
        assert table.rows()[2] == ("some", "avg300", 1.25)
        assert table.rows()[4] == ("full", "avg10", 0.0)

    def test_pair_count_mismatch(self):
        lines = ["8:0 rbytes=1 wbytes=2", "8:16 rbytes=1"]
        with pytest.raises(MalformedDataError) as exc_info:
            NestedKeyedParser().parse(lines, "/cg/io.stat")
        assert "not nested keyed file" in str(exc_info.value)
        assert exc_info.value.line_number == 2

    def test_max_value(self):
        table = NestedKeyedParser().parse(["8:0 rbps=max wbps=1048576"])
        assert table.column("val")[1] == 1048576.0

    def test_key_only_lines_yield_no_rows(self):
        table = NestedKeyedParser().parse(["8:0"], allow_empty=True)
        assert len(table) == 0


@pytest.mark.unit
class TestKeqv:
    """Test cases for Downward API key="value" files."""

    def test_quoted_values_are_decoded(self):
        table = KeqvParser().parse(['app="web"', 'note="a\\tb"'])
        assert table.rows() == [("app", "web"), ("note", "a\tb")]

    def test_missing_value_fails(self):
        with pytest.raises(MalformedDataError):
            KeqvParser().parse(["app"])
