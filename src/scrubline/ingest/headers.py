"""Header sanitization: raw column labels to identifiers valid in both schemas."""

from __future__ import annotations

import logging
import re

from scrubline.core.exceptions import SchemaError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NOT_IDENT = re.compile(r"[^A-Za-z0-9_]")


def sanitize_header(raw: str) -> str:
    """Collapse whitespace runs to ``_`` and drop everything but [A-Za-z0-9_].

    >>> sanitize_header("Column 1")
    'Column_1'
    >>> sanitize_header("'@twitterhandle'")
    'twitterhandle'
    """
    return _NOT_IDENT.sub("", _WHITESPACE.sub("_", raw))


def dedupe_headers(names: list[str]) -> list[str]:
    """Suffix repeated names with ``_2``, ``_3``, ... keeping first occurrences."""
    seen = set(names)
    counts: dict[str, int] = {}
    out: list[str] = []
    for name in names:
        if name not in counts:
            counts[name] = 1
            out.append(name)
            continue
        n = counts[name]
        candidate = name
        while candidate in seen:
            n += 1
            candidate = f"{name}_{n}"
        counts[name] = n
        seen.add(candidate)
        logger.warning("Duplicate header %r renamed to %r", name, candidate)
        out.append(candidate)
    return out


def parse_header_line(
    line: str,
    *,
    bucket: str = "",
    object_name: str = "",
    dedupe: bool = True,
) -> list[str]:
    """Split a header line on commas and sanitize every token.

    Raises:
        SchemaError: if any token sanitizes to an empty identifier.
    """
    raw_tokens = line.split(",")
    names: list[str] = []
    for position, token in enumerate(raw_tokens):
        name = sanitize_header(token)
        if not name:
            raise SchemaError(
                bucket, object_name,
                f"header {position} ({token!r}) has no usable characters",
            )
        names.append(name)
    return dedupe_headers(names) if dedupe else names
