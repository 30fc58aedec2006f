"""Bounded table batching over a stream of body lines."""

from __future__ import annotations

import logging
from typing import Sequence

from scrubline.core.exceptions import MalformedRowError
from scrubline.ingest.rows import conform_row, field_ids, row_from_line
from scrubline.models.table import Row, RowMismatchPolicy, Table, row_byte_size

logger = logging.getLogger(__name__)


class TableBatcher:
    """Accumulates rows and emits a frozen Table whenever a bound is reached.

    A table holds at most ``batch_size`` rows, and at most
    ``max_batch_bytes`` of cell text unless a single row alone exceeds it
    (that row is emitted on its own). Rows keep read order across tables.
    """

    def __init__(
        self,
        headers: Sequence[str],
        *,
        batch_size: int,
        max_batch_bytes: int | None = None,
        policy: RowMismatchPolicy = RowMismatchPolicy.REJECT,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._headers = field_ids(headers)
        self._header_bytes = sum(len(h.name.encode("utf-8")) for h in self._headers)
        self._batch_size = batch_size
        self._max_bytes = max_batch_bytes
        self._policy = policy
        self._rows: list[Row] = []
        self._bytes = 0
        self.lines_seen = 0
        self.rows_emitted = 0
        self.rows_rejected = 0

    @property
    def width(self) -> int:
        return len(self._headers)

    @property
    def pending(self) -> int:
        return len(self._rows)

    def add_line(self, line: str) -> Table | None:
        """Add one body line; return a full Table if this line completed one."""
        self.lines_seen += 1
        try:
            row = conform_row(row_from_line(line), self.width, self._policy, self.lines_seen)
        except MalformedRowError as exc:
            self.rows_rejected += 1
            logger.warning("Skipping row: %s", exc)
            return None

        size = row_byte_size(row)
        emitted: Table | None = None
        if (
            self._max_bytes is not None
            and self._rows
            and self._header_bytes + self._bytes + size > self._max_bytes
        ):
            emitted = self._emit()

        self._rows.append(row)
        self._bytes += size
        # Pending rows are always below batch_size on entry, so a byte flush
        # above and this row-count flush never both fire for one line.
        if len(self._rows) >= self._batch_size:
            emitted = self._emit()
        return emitted

    def flush(self) -> Table | None:
        """Emit the remaining rows, if any, at end of stream."""
        if not self._rows:
            return None
        return self._emit()

    def discard(self) -> int:
        """Drop the partial batch without emitting it. Returns rows dropped."""
        dropped = len(self._rows)
        self._rows = []
        self._bytes = 0
        return dropped

    def _emit(self) -> Table:
        table = Table(headers=self._headers, rows=tuple(self._rows))
        self.rows_emitted += len(self._rows)
        self._rows = []
        self._bytes = 0
        return table
