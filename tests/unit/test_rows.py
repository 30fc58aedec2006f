"""Tests for row splitting, table assembly and row-width policies."""

from __future__ import annotations

import pytest

from scrubline.core.exceptions import MalformedRowError
from scrubline.ingest.rows import build_table, conform_row, row_from_line
from scrubline.models.table import FieldId, Row, RowMismatchPolicy, Value


def _row(*cells: str) -> Row:
    return Row(values=tuple(Value(string_value=c) for c in cells))


class TestRowFromLine:
    def test_splits_on_commas(self):
        row = row_from_line("this,is,a,sentence")
        assert len(row.values) == 4
        assert row.cells == ["this", "is", "a", "sentence"]

    def test_line_without_commas_is_one_cell(self):
        assert row_from_line("single").cells == ["single"]

    def test_empty_cells_are_kept(self):
        assert row_from_line("a,,b,").cells == ["a", "", "b", ""]

    def test_quoted_commas_are_not_special(self):
        assert row_from_line('"Doe, Jane",x').cells == ['"Doe', ' Jane"', "x"]


class TestBuildTable:
    def test_builds_headers_and_rows_in_order(self):
        table = build_table(["First", "Second"], ["t1,t2", "t3,t4"])
        assert table.headers == (FieldId(name="First"), FieldId(name="Second"))
        assert table.rows == (_row("t1", "t2"), _row("t3", "t4"))

    def test_headers_are_sanitized(self):
        table = build_table(["Column 1", "bucket/object"], [])
        assert table.header_names == ["Column_1", "bucketobject"]
        assert table.rows == ()

    def test_does_not_enforce_a_bound(self):
        table = build_table(["a"], [str(i) for i in range(1000)])
        assert table.row_count == 1000

    def test_table_is_frozen(self):
        table = build_table(["a"], ["1"])
        with pytest.raises(Exception):
            table.rows = ()


class TestConformRow:
    def test_matching_width_passes_through(self):
        row = _row("a", "b")
        assert conform_row(row, 2, RowMismatchPolicy.REJECT) is row

    def test_reject_raises_with_line_number(self):
        with pytest.raises(MalformedRowError) as exc_info:
            conform_row(_row("a"), 2, RowMismatchPolicy.REJECT, line_number=7)
        assert exc_info.value.line_number == 7
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1

    def test_pad_fills_short_rows(self):
        assert conform_row(_row("a"), 3, RowMismatchPolicy.PAD).cells == ["a", "", ""]

    def test_pad_truncates_long_rows(self):
        assert conform_row(_row("a", "b", "c"), 2, RowMismatchPolicy.PAD).cells == ["a", "b"]

    def test_truncate_cuts_long_rows(self):
        assert conform_row(_row("a", "b", "c"), 2, RowMismatchPolicy.TRUNCATE).cells == ["a", "b"]

    def test_truncate_rejects_short_rows(self):
        with pytest.raises(MalformedRowError):
            conform_row(_row("a"), 2, RowMismatchPolicy.TRUNCATE)
