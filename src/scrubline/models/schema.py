"""Destination table schema models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class FieldType(StrEnum):
    # The destination warehouse spells its text type STRING.
    STRING = "STRING"


class SchemaField(BaseModel):
    """One (name, type) column of the destination table."""

    model_config = {"frozen": True}

    name: str
    type: FieldType = FieldType.STRING
    mode: str = "NULLABLE"


class TableSchema(BaseModel):
    """Ordered destination schema, derived once per object."""

    model_config = {"frozen": True}

    fields: tuple[SchemaField, ...] = ()

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def to_api_repr(self) -> list[dict[str, str]]:
        """Render the schema the way the warehouse table API expects it."""
        return [
            {"name": f.name, "type": str(f.type), "mode": f.mode}
            for f in self.fields
        ]
