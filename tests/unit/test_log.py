"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest

from scrubline.core.config import AppSettings
from scrubline.core.log import configure_logging


@pytest.fixture(autouse=True)
def restore_levels():
    root, boto = logging.getLogger(), logging.getLogger("botocore")
    saved = root.level, boto.level
    yield
    root.setLevel(saved[0])
    boto.setLevel(saved[1])


def test_applies_configured_level():
    assert configure_logging(AppSettings(log_level="debug")) == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("botocore").level == logging.INFO


def test_unknown_level_falls_back_to_info():
    assert configure_logging(AppSettings(log_level="chatty")) == logging.INFO
