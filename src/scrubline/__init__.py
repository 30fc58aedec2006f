"""scrubline: stream delimited objects from S3 into bounded inspection tables."""

from __future__ import annotations

__version__ = "0.1.0"
