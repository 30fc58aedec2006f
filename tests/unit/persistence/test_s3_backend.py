"""Unit tests for S3ObjectStore using moto."""

from __future__ import annotations

import boto3
import pytest
from botocore.exceptions import EndpointConnectionError
from moto import mock_aws

from scrubline.core.exceptions import ConfigurationError, UnreadableSourceError
from scrubline.persistence.s3_backend import S3ObjectStore, parse_bucket_name

BUCKET = "test-import"


@pytest.fixture
def s3_backend():
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield S3ObjectStore(bucket=BUCKET, region="us-east-1")


class TestParseBucketName:
    def test_gs_url(self):
        assert parse_bucket_name("gs://name/") == "name"

    def test_s3_url_with_prefix(self):
        assert parse_bucket_name("s3://name/some/prefix") == "name"

    def test_bare_name(self):
        assert parse_bucket_name("name/") == "name"

    def test_empty_raises(self):
        with pytest.raises(ConfigurationError):
            parse_bucket_name("s3://")


class TestOpen:
    def test_open_streams_bytes(self, s3_backend):
        s3_backend.write("in/file.csv", b"a,b\n1,2\n")
        body = s3_backend.open("in/file.csv")
        try:
            assert body.read() == b"a,b\n1,2\n"
        finally:
            body.close()

    def test_open_missing_key_raises(self, s3_backend):
        with pytest.raises(UnreadableSourceError) as exc_info:
            s3_backend.open("does/not/exist.csv")
        assert exc_info.value.bucket == BUCKET
        assert exc_info.value.object_name == "does/not/exist.csv"


class TestListObjects:
    def test_list_returns_matching_keys(self, s3_backend):
        s3_backend.write("prefix/a.csv", b"1")
        s3_backend.write("prefix/b.csv", b"2")
        s3_backend.write("other/c.csv", b"3")
        assert sorted(s3_backend.list_objects("prefix/")) == ["prefix/a.csv", "prefix/b.csv"]

    def test_list_skips_directory_markers(self, s3_backend):
        s3_backend.write("prefix/", b"")
        s3_backend.write("prefix/a.csv", b"1")
        assert s3_backend.list_objects("prefix/") == ["prefix/a.csv"]

    def test_list_empty_prefix_returns_nothing(self, s3_backend):
        assert s3_backend.list_objects("nonexistent/") == []

    def test_list_handles_pagination(self, s3_backend):
        for i in range(1050):
            s3_backend.write(f"bulk/{i:04d}.csv", b"x")
        assert len(s3_backend.list_objects("bulk/")) == 1050

    def test_list_missing_bucket_raises(self):
        with mock_aws():
            store = S3ObjectStore(bucket="no-such-bucket")
            with pytest.raises(UnreadableSourceError):
                store.list_objects()


class _UnreachableS3:
    def get_object(self, **kwargs):
        raise EndpointConnectionError(endpoint_url="https://s3.us-east-1.amazonaws.com")

    def get_paginator(self, name):
        raise EndpointConnectionError(endpoint_url="https://s3.us-east-1.amazonaws.com")


class TestTransportErrors:
    def test_open_connection_failure_is_unreadable_source(self, s3_backend, monkeypatch):
        monkeypatch.setattr(s3_backend, "_client", _UnreachableS3())
        with pytest.raises(UnreadableSourceError) as exc_info:
            s3_backend.open("in/file.csv")
        assert exc_info.value.object_name == "in/file.csv"

    def test_list_connection_failure_is_unreadable_source(self, s3_backend, monkeypatch):
        monkeypatch.setattr(s3_backend, "_client", _UnreachableS3())
        with pytest.raises(UnreadableSourceError):
            s3_backend.list_objects("in/")
