"""Inspection table models: headers, cells, rows and bounded tables."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class RowMismatchPolicy(StrEnum):
    """What to do with a row whose cell count differs from the header."""

    REJECT = "reject"  # skip the row and count it
    PAD = "pad"  # pad short rows with "", truncate long rows
    TRUNCATE = "truncate"  # truncate long rows, reject short ones


class FieldId(BaseModel):
    """A single column header of an inspection table."""

    model_config = {"frozen": True}

    name: str


class Value(BaseModel):
    """A single text cell. No type coercion is ever applied."""

    model_config = {"frozen": True}

    string_value: str = ""


class Row(BaseModel):
    """Ordered cells of one body line."""

    model_config = {"frozen": True}

    values: tuple[Value, ...] = ()

    @property
    def cells(self) -> list[str]:
        return [v.string_value for v in self.values]


class Table(BaseModel):
    """A bounded batch of rows plus its header, the unit of submission.

    Tables are frozen: once built by the batcher they are handed to the
    inspection client as-is.
    """

    model_config = {"frozen": True}

    headers: tuple[FieldId, ...] = ()
    rows: tuple[Row, ...] = ()

    @property
    def header_names(self) -> list[str]:
        return [h.name for h in self.headers]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def byte_size(self) -> int:
        """Approximate payload size: UTF-8 length of every header and cell."""
        size = sum(len(h.name.encode("utf-8")) for h in self.headers)
        for row in self.rows:
            size += row_byte_size(row)
        return size


def row_byte_size(row: Row) -> int:
    return sum(len(v.string_value.encode("utf-8")) for v in row.values)
