"""Scrubline exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scrubline.models.source import IngestReport


class ScrublineError(Exception):
    """Base exception for all scrubline errors."""


class ConfigurationError(ScrublineError):
    """Settings are missing or inconsistent."""


class ObjectError(ScrublineError):
    """Processing of a single source object failed."""

    def __init__(self, bucket: str, object_name: str, message: str) -> None:
        self.bucket = bucket
        self.object_name = object_name
        super().__init__(f"{bucket}/{object_name}: {message}")


class UnreadableSourceError(ObjectError):
    """The object stream could not be opened or read."""


class DecryptionError(ObjectError):
    """Key material could not be fetched or the object failed to decrypt."""


class SchemaError(ObjectError):
    """The header does not yield a valid column set."""


class MalformedRowError(ScrublineError):
    """A body line's cell count does not match the header."""

    def __init__(self, line_number: int, expected: int, actual: int) -> None:
        self.line_number = line_number
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Line {line_number} has {actual} cells, header has {expected}"
        )


class KeyProviderError(ScrublineError):
    """Key material lookup failed."""


class IngestCancelled(ScrublineError):
    """Processing of an object was cancelled by the caller.

    ``report`` carries the partial report of the cancelled object, when known.
    """

    def __init__(self, message: str, report: IngestReport | None = None) -> None:
        self.report = report
        super().__init__(message)
