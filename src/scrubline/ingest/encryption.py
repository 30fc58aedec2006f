"""Decide whether a source object needs client-side decryption."""

from __future__ import annotations


def is_encrypted(
    key_name: str | None,
    kms_key_id: str | None,
    wrapped_key: str | None,
    key_sha256: str | None,
) -> bool:
    """Return True when any key-material setting is configured.

    ``key_name`` only selects which key to use, so it never decides the
    verdict on its own. Missing or empty values mean "no encryption
    configured" and are not an error.
    """
    return any((kms_key_id, wrapped_key, key_sha256))
