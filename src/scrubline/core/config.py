"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from scrubline.models.source import DecryptionContext
from scrubline.models.table import RowMismatchPolicy


class S3Config(BaseSettings):
    """Source bucket and S3 client configuration."""

    model_config = {"env_prefix": "SCRUBLINE_S3_"}

    bucket_url: str = "s3://scrubline-import"
    prefix: str = ""
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    access_key: str | None = None
    secret_key: str | None = None
    max_connections: int = 10
    connect_timeout: int = 60
    read_timeout: int = 60

    @property
    def bucket(self) -> str:
        from scrubline.persistence.s3_backend import parse_bucket_name

        return parse_bucket_name(self.bucket_url)


class EncryptionConfig(BaseSettings):
    """Client-side encryption key references. All empty means plaintext."""

    model_config = {"env_prefix": "SCRUBLINE_ENCRYPTION_"}

    key_name: str | None = None
    kms_key_id: str | None = None
    wrapped_key: str | None = None  # base64 KMS ciphertext of the data key
    key_sha256: str | None = None  # base64 SHA-256 of the plaintext data key
    region: str = "us-east-1"
    endpoint_url: str | None = None

    def context(self) -> DecryptionContext:
        return DecryptionContext(
            key_name=self.key_name,
            kms_key_id=self.kms_key_id,
            wrapped_key=self.wrapped_key,
            key_sha256=self.key_sha256,
        )


class InspectionConfig(BaseSettings):
    """Inspection service templates and request bounds."""

    model_config = {"env_prefix": "SCRUBLINE_INSPECT_"}

    inspect_template_name: str = ""
    deidentify_template_name: str = ""
    batch_size: int = Field(default=100, gt=0)
    max_batch_bytes: int = Field(default=524_288, gt=0)  # service request limit
    row_mismatch_policy: RowMismatchPolicy = RowMismatchPolicy.REJECT


class OutputConfig(BaseSettings):
    """Destination table configuration."""

    model_config = {"env_prefix": "SCRUBLINE_OUTPUT_"}

    dataset: str = ""
    output_file: str = ""


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "SCRUBLINE_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    max_workers: int = Field(default=4, gt=0)

    s3: S3Config = Field(default_factory=S3Config)
    encryption: EncryptionConfig = Field(default_factory=EncryptionConfig)
    inspection: InspectionConfig = Field(default_factory=InspectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
