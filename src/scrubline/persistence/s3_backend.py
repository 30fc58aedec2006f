"""S3 object storage backend implementing IObjectStore."""

from __future__ import annotations

from typing import BinaryIO
from urllib.parse import urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from scrubline.core.exceptions import ConfigurationError, UnreadableSourceError


def parse_bucket_name(url: str) -> str:
    """Return the bucket name from ``s3://name/...`` (or ``gs://``, or a bare name)."""
    parsed = urlparse(url)
    name = parsed.netloc if parsed.scheme else url.strip("/").split("/", 1)[0]
    if not name:
        raise ConfigurationError(f"Cannot parse a bucket name from {url!r}")
    return name


class S3ObjectStore:
    """Production IObjectStore backed by S3."""

    def __init__(self, bucket: str, region: str = "us-east-1",
                 endpoint_url: str | None = None,
                 access_key: str | None = None, secret_key: str | None = None,
                 max_connections: int = 10, connect_timeout: int = 60,
                 read_timeout: int = 60) -> None:
        self._bucket = bucket
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {
            "region_name": region,
            "config": Config(
                max_pool_connections=max_connections,
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
            ),
        }
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if access_key and secret_key:
            kwargs["aws_access_key_id"] = access_key
            kwargs["aws_secret_access_key"] = secret_key
        self._client = boto3.client("s3", **kwargs)

    def open(self, key: str) -> BinaryIO:
        """Return the streaming body of ``key``; the caller must close it."""
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
            return resp["Body"]
        except (ClientError, BotoCoreError) as exc:
            raise UnreadableSourceError(self._bucket, key, f"S3 open failed: {exc}") from exc

    def write(self, key: str, data: bytes, content_type: str = "text/csv") -> str:
        try:
            self._client.put_object(
                Bucket=self._bucket, Key=key, Body=data, ContentType=content_type,
            )
            return key
        except (ClientError, BotoCoreError) as exc:
            raise UnreadableSourceError(self._bucket, key, f"S3 write failed: {exc}") from exc

    def list_objects(self, prefix: str = "") -> list[str]:
        try:
            keys: list[str] = []
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    # Skip "directory" placeholder keys
                    if not obj["Key"].endswith("/"):
                        keys.append(obj["Key"])
            return keys
        except (ClientError, BotoCoreError) as exc:
            raise UnreadableSourceError(
                self._bucket, prefix, f"S3 list failed for prefix={prefix!r}: {exc}"
            ) from exc
