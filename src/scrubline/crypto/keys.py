"""Key-material providers for client-side encrypted objects."""

from __future__ import annotations

import base64
import binascii
import logging
import threading
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from scrubline.core.config import EncryptionConfig
from scrubline.core.exceptions import KeyProviderError
from scrubline.crypto.stream import VALID_KEY_SIZES, key_digest
from scrubline.models.source import DecryptionContext

logger = logging.getLogger(__name__)


class StaticKeyProvider:
    """IKeyProvider over an in-memory mapping of key name to raw key bytes."""

    def __init__(self, keys: dict[str | None, bytes]) -> None:
        self._keys = dict(keys)

    def get_key(self, key_name: str | None) -> bytes:
        try:
            return self._keys[key_name]
        except KeyError:
            raise KeyProviderError(f"No key registered for key_name={key_name!r}") from None


class KmsKeyProvider:
    """Production IKeyProvider that unwraps a data key with AWS KMS.

    The unwrapped key is cached per key name; the cache is guarded by a lock
    because one provider is shared by all ingest workers.
    """

    def __init__(self, context: DecryptionContext, region: str = "us-east-1",
                 endpoint_url: str | None = None, client: Any = None) -> None:
        self._context = context
        if client is None:
            kwargs: dict = {"region_name": region}
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("kms", **kwargs)
        self._client = client
        self._cache: dict[str | None, bytes] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: EncryptionConfig) -> "KmsKeyProvider":
        return cls(config.context(), region=config.region, endpoint_url=config.endpoint_url)

    def get_key(self, key_name: str | None) -> bytes:
        expected = self._context.key_name
        if expected and key_name and key_name != expected:
            raise KeyProviderError(f"Unknown key_name={key_name!r}, expected {expected!r}")
        with self._lock:
            key = self._cache.get(key_name)
            if key is None:
                key = self._unwrap()
                self._cache[key_name] = key
            return key

    def _unwrap(self) -> bytes:
        wrapped = self._context.wrapped_key
        if not wrapped:
            raise KeyProviderError("No wrapped data key configured")
        try:
            blob = base64.b64decode(wrapped, validate=True)
        except binascii.Error as exc:
            raise KeyProviderError(f"Wrapped data key is not valid base64: {exc}") from exc

        kwargs: dict[str, Any] = {"CiphertextBlob": blob}
        if self._context.kms_key_id:
            kwargs["KeyId"] = self._context.kms_key_id
        try:
            resp = self._client.decrypt(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise KeyProviderError(f"KMS decrypt failed: {exc}") from exc

        key = resp["Plaintext"]
        if len(key) not in VALID_KEY_SIZES:
            raise KeyProviderError(f"Unwrapped key has invalid length {len(key)}")
        if self._context.key_sha256 and key_digest(key) != self._context.key_sha256:
            raise KeyProviderError("Unwrapped key does not match key_sha256")
        logger.debug("Unwrapped data key %r via KMS", self._context.key_name)
        return key
