"""Seed an S3 bucket with sample CSV objects, optionally client-side encrypted.

Usage:
    python scripts/seed_s3.py --endpoint-url http://localhost:4566 --bucket scrubline-import
    python scripts/seed_s3.py --bucket scrubline-import --kms-key-id alias/scrubline
"""

from __future__ import annotations

import argparse
import base64
from typing import Any

import boto3

from scrubline.crypto.stream import encrypt_bytes, key_digest

SAMPLE_HEADER = ["Full Name", "Email Address", "'@twitterhandle'", "Phone/Mobile"]
SAMPLE_ROWS = [
    ["Jane Roe", "jane.roe@example.com", "@janeroe", "555-0100"],
    ["John Doe", "john.doe@example.com", "@jdoe", "555-0101"],
    ["Alex Poe", "alex.poe@example.com", "@apoe", "555-0102"],
]


def create_bucket(s3: Any, bucket: str, region: str = "us-east-1") -> None:
    """Create the bucket. Skips if it already exists."""
    existing = [b["Name"] for b in s3.list_buckets().get("Buckets", [])]
    if bucket in existing:
        print(f"  Bucket {bucket} already exists, skipping")
        return
    kwargs: dict[str, Any] = {"Bucket": bucket}
    if region != "us-east-1":
        kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
    s3.create_bucket(**kwargs)
    print(f"  Created bucket {bucket}")


def sample_csv(rows: int = len(SAMPLE_ROWS)) -> bytes:
    """Render the sample header plus ``rows`` body lines, cycling the samples."""
    lines = [",".join(SAMPLE_HEADER)]
    for i in range(rows):
        lines.append(",".join(SAMPLE_ROWS[i % len(SAMPLE_ROWS)]))
    return ("\n".join(lines) + "\n").encode("utf-8")


def seed_object(s3: Any, bucket: str, key: str, data: bytes, *,
                kms: Any = None, kms_key_id: str | None = None) -> dict[str, str]:
    """Upload one object; encrypt it under a fresh KMS data key when kms_key_id is set.

    Returns:
        The encryption settings a reader needs (empty for plaintext).
    """
    settings: dict[str, str] = {}
    if kms_key_id:
        resp = kms.generate_data_key(KeyId=kms_key_id, KeySpec="AES_256")
        data = encrypt_bytes(resp["Plaintext"], data)
        settings = {
            "SCRUBLINE_ENCRYPTION_KMS_KEY_ID": kms_key_id,
            "SCRUBLINE_ENCRYPTION_WRAPPED_KEY": base64.b64encode(resp["CiphertextBlob"]).decode("ascii"),
            "SCRUBLINE_ENCRYPTION_KEY_SHA256": key_digest(resp["Plaintext"]),
        }
    s3.put_object(Bucket=bucket, Key=key, Body=data, ContentType="text/csv")
    print(f"  Uploaded s3://{bucket}/{key} ({len(data)} bytes)")
    return settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed S3 with sample CSV objects for scrubline")
    parser.add_argument("--endpoint-url", default=None, help="S3/KMS endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--bucket", default="scrubline-import", help="Bucket name")
    parser.add_argument("--key", default="samples/contacts.csv", help="Object key")
    parser.add_argument("--rows", type=int, default=len(SAMPLE_ROWS), help="Body rows to write")
    parser.add_argument("--kms-key-id", default=None, help="Encrypt under a data key from this KMS key")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    s3 = boto3.client("s3", **kwargs)
    kms = boto3.client("kms", **kwargs) if args.kms_key_id else None

    print("Creating bucket...")
    create_bucket(s3, args.bucket, region=args.region)

    print("Uploading...")
    env = seed_object(s3, args.bucket, args.key, sample_csv(args.rows),
                      kms=kms, kms_key_id=args.kms_key_id)
    for name, value in env.items():
        print(f"export {name}={value}")

    print("Done!")


if __name__ == "__main__":
    main()
