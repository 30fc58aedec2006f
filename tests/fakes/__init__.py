"""Shared test doubles: re-export memory backends."""

from __future__ import annotations

from scrubline.crypto.keys import StaticKeyProvider
from scrubline.persistence.memory_backend import (
    MemoryInspectionClient,
    MemoryObjectStore,
    MemorySchemaSink,
    TrackingStream,
)

__all__ = [
    "MemoryInspectionClient",
    "MemoryObjectStore",
    "MemorySchemaSink",
    "StaticKeyProvider",
    "TrackingStream",
]
