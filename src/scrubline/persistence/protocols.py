"""Re-export collaborator protocols from core for convenience."""

from __future__ import annotations

from scrubline.core.protocols import (
    IInspectionClient,
    IKeyProvider,
    IObjectStore,
    ISchemaSink,
)

__all__ = ["IInspectionClient", "IKeyProvider", "IObjectStore", "ISchemaSink"]
