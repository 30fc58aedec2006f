"""Protocol interfaces for the collaborators around the ingest core.

All inter-layer communication uses these Protocols: structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scrubline.models.schema import TableSchema
    from scrubline.models.source import ObjectRef
    from scrubline.models.table import Table


# ---------------------------------------------------------------------------
# Object storage
# ---------------------------------------------------------------------------

@runtime_checkable
class IObjectStore(Protocol):
    """S3-compatible source object storage."""

    def list_objects(self, prefix: str = "") -> list[str]: ...

    def open(self, key: str) -> BinaryIO: ...


# ---------------------------------------------------------------------------
# Key material
# ---------------------------------------------------------------------------

@runtime_checkable
class IKeyProvider(Protocol):
    """Resolves a key name to raw data-key bytes. Shared read-only across workers."""

    def get_key(self, key_name: str | None) -> bytes: ...


# ---------------------------------------------------------------------------
# Inspection / redaction service
# ---------------------------------------------------------------------------

@runtime_checkable
class IInspectionClient(Protocol):
    """Receives bounded tables for inspection or de-identification."""

    def submit(self, ref: ObjectRef, table: Table) -> None: ...


# ---------------------------------------------------------------------------
# Destination schema
# ---------------------------------------------------------------------------

@runtime_checkable
class ISchemaSink(Protocol):
    """Creates the destination table for an object's columns."""

    def create_table(self, ref: ObjectRef, schema: TableSchema) -> None: ...
