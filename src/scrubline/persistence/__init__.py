"""Pluggable storage and key backends behind Protocol interfaces."""

from __future__ import annotations

from scrubline.core.config import AppSettings
from scrubline.crypto.keys import KmsKeyProvider
from scrubline.persistence.s3_backend import S3ObjectStore


def create_persistence(settings: AppSettings | None = None):
    """Create wired-up backends from application settings.

    Returns:
        Tuple of (object_store, key_provider). ``key_provider`` is None when
        no encryption is configured.
    """
    if settings is None:
        settings = AppSettings()

    store = S3ObjectStore(
        bucket=settings.s3.bucket,
        region=settings.s3.region,
        endpoint_url=settings.s3.endpoint_url,
        access_key=settings.s3.access_key,
        secret_key=settings.s3.secret_key,
        max_connections=settings.s3.max_connections,
        connect_timeout=settings.s3.connect_timeout,
        read_timeout=settings.s3.read_timeout,
    )

    key_provider = None
    if settings.encryption.context().encrypted:
        key_provider = KmsKeyProvider.from_config(settings.encryption)

    return store, key_provider
