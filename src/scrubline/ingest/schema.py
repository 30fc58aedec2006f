"""Build the destination table schema from sanitized headers."""

from __future__ import annotations

from typing import Iterable

from scrubline.models.schema import FieldType, SchemaField, TableSchema


def build_schema(names: Iterable[str]) -> TableSchema:
    """One text field per name, in input order. Names are not deduplicated here."""
    return TableSchema(
        fields=tuple(SchemaField(name=name, type=FieldType.STRING) for name in names)
    )
