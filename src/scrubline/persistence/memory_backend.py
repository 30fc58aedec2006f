"""In-memory backends for unit tests: dict-backed fakes."""

from __future__ import annotations

import io
import threading
from typing import BinaryIO

from scrubline.core.exceptions import UnreadableSourceError
from scrubline.models.schema import TableSchema
from scrubline.models.source import ObjectRef
from scrubline.models.table import Table


class TrackingStream(io.BytesIO):
    """BytesIO that remembers it was closed, so tests can assert cleanup."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.was_closed = False

    def close(self) -> None:
        self.was_closed = True
        super().close()


class MemoryObjectStore:
    """Dict-backed IObjectStore for unit tests."""

    def __init__(self, bucket: str = "memory-bucket") -> None:
        self.bucket = bucket
        self._objects: dict[str, bytes] = {}
        self.opened: list[TrackingStream] = []

    def write(self, key: str, data: bytes, content_type: str = "text/csv") -> str:
        self._objects[key] = data
        return key

    def open(self, key: str) -> BinaryIO:
        try:
            data = self._objects[key]
        except KeyError:
            raise UnreadableSourceError(self.bucket, key, "no such object") from None
        stream = TrackingStream(data)
        self.opened.append(stream)
        return stream

    def list_objects(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._objects if k.startswith(prefix))


class MemoryInspectionClient:
    """Records submitted tables per object."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.submitted: dict[ObjectRef, list[Table]] = {}

    def submit(self, ref: ObjectRef, table: Table) -> None:
        with self._lock:
            self.submitted.setdefault(ref, []).append(table)

    def tables(self, ref: ObjectRef) -> list[Table]:
        return self.submitted.get(ref, [])


class MemorySchemaSink:
    """Records the schema created for each object."""

    def __init__(self) -> None:
        self.schemas: dict[ObjectRef, TableSchema] = {}

    def create_table(self, ref: ObjectRef, schema: TableSchema) -> None:
        self.schemas[ref] = schema
