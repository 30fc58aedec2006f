"""Tests for header sanitization and header-line parsing."""

from __future__ import annotations

import re

import pytest

from scrubline.core.exceptions import SchemaError
from scrubline.ingest.headers import dedupe_headers, parse_header_line, sanitize_header

IDENT = re.compile(r"^[A-Za-z0-9_]*$")


class TestSanitizeHeader:
    def test_whitespace_becomes_underscore(self):
        assert sanitize_header("Column 1") == "Column_1"

    def test_path_separator_removed(self):
        assert sanitize_header("bucket/object") == "bucketobject"

    def test_quotes_and_at_removed(self):
        assert sanitize_header("'@twitterhandle'") == "twitterhandle"

    def test_whitespace_run_collapses_to_one_underscore(self):
        assert sanitize_header("first \t\n name") == "first_name"

    def test_all_punctuation_sanitizes_to_empty(self):
        assert sanitize_header("@#$%") == ""

    def test_non_ascii_letters_removed(self):
        assert sanitize_header("café total") == "caf_total"

    @pytest.mark.parametrize("raw", [
        "Column 1", "bucket/object", "'@twitterhandle'", "  leading", "a-b.c",
        "tab\there", "ünïcødé", "", "__x__", "Phone/Mobile (home)",
    ])
    def test_output_is_identifier_and_idempotent(self, raw):
        once = sanitize_header(raw)
        assert IDENT.match(once)
        assert sanitize_header(once) == once


class TestDedupeHeaders:
    def test_unique_names_unchanged(self):
        assert dedupe_headers(["a", "b"]) == ["a", "b"]

    def test_repeats_get_numeric_suffix(self):
        assert dedupe_headers(["a", "a", "a"]) == ["a", "a_2", "a_3"]

    def test_suffix_skips_existing_names(self):
        assert dedupe_headers(["a", "a", "a_2"]) == ["a", "a_3", "a_2"]


class TestParseHeaderLine:
    def test_splits_and_sanitizes(self):
        assert parse_header_line("Full Name,E-mail,'@handle'") == ["Full_Name", "Email", "handle"]

    def test_empty_token_raises_schema_error_with_context(self):
        with pytest.raises(SchemaError) as exc_info:
            parse_header_line("name,???", bucket="b", object_name="o.csv")
        assert exc_info.value.bucket == "b"
        assert exc_info.value.object_name == "o.csv"
        assert "'???'" in str(exc_info.value)

    def test_collisions_are_suffixed(self):
        assert parse_header_line("e mail,e/mail,e_mail") == ["e_mail", "email", "e_mail_2"]

    def test_dedupe_can_be_disabled(self):
        assert parse_header_line("a,a", dedupe=False) == ["a", "a"]
