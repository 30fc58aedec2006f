"""Segmented AES-GCM encryption for client-side encrypted objects.

Object layout::

    nonce_prefix (7 bytes) || segment_0 || segment_1 || ... || segment_n

Each segment is ``AESGCM.encrypt`` of up to ``SEGMENT_SIZE`` plaintext bytes,
so ciphertext plus a 16-byte tag. The nonce of segment ``i`` is
``nonce_prefix || i (4 bytes, big-endian) || last``, where ``last`` is 1 for
the final segment and 0 otherwise. Every segment but the last is full; the
last may be empty, and there is always at least one.

A segment's plaintext is released only after its tag verifies, and the
``last`` flag makes truncation at a segment boundary fail as well.
"""

from __future__ import annotations

import base64
import hashlib
import io
import os
from typing import BinaryIO

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_PREFIX_SIZE = 7
TAG_SIZE = 16
SEGMENT_SIZE = 64 * 1024
MAX_SEGMENTS = 2**32
VALID_KEY_SIZES = (16, 24, 32)


def key_digest(key: bytes) -> str:
    """Base64 SHA-256 of raw key bytes, used to check an unwrapped key."""
    return base64.b64encode(hashlib.sha256(key).digest()).decode("ascii")


def _segment_nonce(prefix: bytes, index: int, last: bool) -> bytes:
    return prefix + index.to_bytes(4, "big") + (b"\x01" if last else b"\x00")


def encrypt_bytes(
    key: bytes,
    plaintext: bytes,
    *,
    segment_size: int = SEGMENT_SIZE,
    nonce_prefix: bytes | None = None,
) -> bytes:
    """Encrypt a whole object into the layout DecryptingStream reads."""
    if segment_size <= 0:
        raise ValueError(f"segment_size must be positive, got {segment_size}")
    prefix = nonce_prefix or os.urandom(NONCE_PREFIX_SIZE)
    if len(prefix) != NONCE_PREFIX_SIZE:
        raise ValueError(f"nonce_prefix must be {NONCE_PREFIX_SIZE} bytes")
    chunks = [plaintext[i:i + segment_size] for i in range(0, len(plaintext), segment_size)]
    chunks = chunks or [b""]
    if len(chunks) > MAX_SEGMENTS:
        raise ValueError("plaintext too large for one object")

    aead = AESGCM(key)
    out = bytearray(prefix)
    for index, chunk in enumerate(chunks):
        out += aead.encrypt(_segment_nonce(prefix, index, index == len(chunks) - 1), chunk, None)
    return bytes(out)


def _read_exact(source: BinaryIO, size: int) -> bytes:
    buf = bytearray()
    while len(buf) < size:
        chunk = source.read(size - len(buf))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


class DecryptingStream(io.RawIOBase):
    """Raw stream that decrypts ``source`` one segment at a time.

    One byte past each segment is read ahead to tell whether it is the last.
    A wrong key, a truncated object or tampered bytes raise ``InvalidTag``
    before any plaintext of the affected segment is returned.
    """

    def __init__(self, source: BinaryIO, key: bytes, segment_size: int = SEGMENT_SIZE) -> None:
        super().__init__()
        if len(key) not in VALID_KEY_SIZES:
            raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
        if segment_size <= 0:
            raise ValueError(f"segment_size must be positive, got {segment_size}")
        self._source = source
        self._aead = AESGCM(key)
        self._segment_size = segment_size
        self._prefix: bytes | None = None
        self._index = 0
        self._lookahead = b""
        self._out = bytearray()
        self._finished = False

    def readable(self) -> bool:
        return True

    def _start(self) -> None:
        prefix = _read_exact(self._source, NONCE_PREFIX_SIZE)
        if len(prefix) < NONCE_PREFIX_SIZE:
            raise InvalidTag()
        self._prefix = prefix

    def _next_segment(self) -> None:
        want = self._segment_size + TAG_SIZE
        data = self._lookahead + _read_exact(self._source, want + 1 - len(self._lookahead))
        last = len(data) <= want
        segment, self._lookahead = (data, b"") if last else (data[:want], data[want:])
        if len(segment) < TAG_SIZE or self._index >= MAX_SEGMENTS:
            raise InvalidTag()
        nonce = _segment_nonce(self._prefix, self._index, last)
        self._out += self._aead.decrypt(nonce, segment, None)
        self._index += 1
        self._finished = last

    def readinto(self, b) -> int:
        if self._prefix is None:
            self._start()
        while not self._out and not self._finished:
            self._next_segment()
        n = min(len(b), len(self._out))
        b[:n] = self._out[:n]
        del self._out[:n]
        return n

    def close(self) -> None:
        if not self.closed:
            try:
                self._source.close()
            finally:
                super().close()
