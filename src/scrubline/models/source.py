"""Source object, decryption context and per-object ingest state models."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field

from scrubline.ingest.encryption import is_encrypted


class ObjectState(StrEnum):
    OPENING = "OPENING"
    DETECTING_ENCRYPTION = "DETECTING_ENCRYPTION"
    READING_HEADER = "READING_HEADER"
    READING_BODY = "READING_BODY"
    BATCH_FULL = "BATCH_FULL"
    EOF = "EOF"
    CLOSED = "CLOSED"
    FAILED = "FAILED"


class ObjectRef(BaseModel):
    """Identifies one source object in a bucket."""

    model_config = {"frozen": True}

    bucket: str
    key: str

    def __str__(self) -> str:
        return f"{self.bucket}/{self.key}"


class DecryptionContext(BaseModel):
    """Key reference plus the wrapped key material for one object.

    ``wrapped_key`` is the base64 KMS ciphertext of the 256-bit data key;
    ``key_sha256`` is the base64 SHA-256 of the plaintext data key and is
    checked after unwrapping when present.
    """

    model_config = {"frozen": True}

    key_name: Optional[str] = None
    kms_key_id: Optional[str] = None
    wrapped_key: Optional[str] = None
    key_sha256: Optional[str] = None

    @property
    def encrypted(self) -> bool:
        return is_encrypted(self.key_name, self.kms_key_id, self.wrapped_key, self.key_sha256)


class IngestReport(BaseModel):
    """Outcome of processing one object."""

    ref: ObjectRef
    state: ObjectState = ObjectState.OPENING
    encrypted: bool = False
    headers: list[str] = Field(default_factory=list)
    lines_read: int = 0
    rows_emitted: int = 0
    rows_rejected: int = 0
    tables_submitted: int = 0
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.state == ObjectState.CLOSED
