"""Row splitting and table assembly.

Rows are split naively on ``,``: quoted fields and embedded delimiters are
not supported, so a quoted comma changes the row's cell count. Such rows are
then handled by the configured :class:`RowMismatchPolicy`, not repaired.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from scrubline.core.exceptions import MalformedRowError
from scrubline.ingest.headers import sanitize_header
from scrubline.models.table import FieldId, Row, RowMismatchPolicy, Table, Value

DELIMITER = ","


def row_from_line(line: str) -> Row:
    """Split one raw line into text cells, in order."""
    return Row(values=tuple(Value(string_value=cell) for cell in line.split(DELIMITER)))


def field_ids(headers: Iterable[str]) -> tuple[FieldId, ...]:
    return tuple(FieldId(name=sanitize_header(h)) for h in headers)


def build_table(headers: Sequence[str], lines: Iterable[str]) -> Table:
    """Build one Table from headers and raw lines, preserving line order.

    The caller slices ``lines`` to the batch bound; nothing is enforced here.
    """
    return Table(
        headers=field_ids(headers),
        rows=tuple(row_from_line(line) for line in lines),
    )


def conform_row(
    row: Row,
    width: int,
    policy: RowMismatchPolicy,
    line_number: int = 0,
) -> Row:
    """Return ``row`` fitted to ``width`` cells according to ``policy``.

    Raises:
        MalformedRowError: when the policy rejects the row.
    """
    actual = len(row.values)
    if actual == width:
        return row
    if policy == RowMismatchPolicy.PAD:
        if actual > width:
            return Row(values=row.values[:width])
        padding = tuple(Value(string_value="") for _ in range(width - actual))
        return Row(values=row.values + padding)
    if policy == RowMismatchPolicy.TRUNCATE and actual > width:
        return Row(values=row.values[:width])
    raise MalformedRowError(line_number, width, actual)
