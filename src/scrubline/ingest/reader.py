"""Line-oriented reading of source objects, decrypting when required."""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Iterator

from botocore.exceptions import BotoCoreError
from cryptography.exceptions import InvalidTag

from scrubline.core.exceptions import DecryptionError, KeyProviderError, UnreadableSourceError
from scrubline.core.protocols import IKeyProvider
from scrubline.crypto.stream import DecryptingStream

logger = logging.getLogger(__name__)


class _StreamAdapter(io.RawIOBase):
    """Expose any object with ``read(n)`` (e.g. an S3 StreamingBody) as a raw stream."""

    def __init__(self, source: BinaryIO) -> None:
        super().__init__()
        self._source = source

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        data = self._source.read(len(b))
        n = len(data)
        b[:n] = data
        return n

    def close(self) -> None:
        if not self.closed:
            try:
                self._source.close()
            finally:
                super().close()


class SourceReader:
    """Sequential line reader over one object.

    ``readline`` returns lines without their terminator and ``None`` at end
    of stream. Closing the reader closes the underlying stream; use it as a
    context manager so that happens on every exit path.
    """

    def __init__(self, text: io.TextIOBase, *, bucket: str, object_name: str,
                 encrypted: bool) -> None:
        self._text = text
        self.bucket = bucket
        self.object_name = object_name
        self.encrypted = encrypted
        self.lines_read = 0

    def readline(self) -> str | None:
        try:
            line = self._text.readline()
        except InvalidTag as exc:
            raise DecryptionError(
                self.bucket, self.object_name, "authentication tag check failed"
            ) from exc
        except UnicodeDecodeError as exc:
            if self.encrypted:
                raise DecryptionError(
                    self.bucket, self.object_name, "decrypted bytes are not valid text"
                ) from exc
            raise UnreadableSourceError(self.bucket, self.object_name, str(exc)) from exc
        except (OSError, BotoCoreError) as exc:
            raise UnreadableSourceError(self.bucket, self.object_name, str(exc)) from exc

        if not line:
            return None
        self.lines_read += 1
        return line[:-1] if line.endswith("\n") else line

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.readline()
            if line is None:
                return
            yield line

    @property
    def closed(self) -> bool:
        return self._text.closed

    def close(self) -> None:
        if not self._text.closed:
            self._text.close()

    def __enter__(self) -> "SourceReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_reader(
    encrypted: bool,
    object_name: str,
    bucket_name: str,
    stream: BinaryIO,
    key_name: str | None,
    key_provider: IKeyProvider | None = None,
    *,
    encoding: str = "utf-8",
) -> SourceReader:
    """Wrap ``stream`` in a line reader, decrypting first when ``encrypted``.

    Raises:
        DecryptionError: if encrypted and the key cannot be obtained or is
            unusable. The stream is closed before raising.
    """
    if encrypted:
        try:
            if key_provider is None:
                raise KeyProviderError("object is encrypted but no key provider was given")
            key = key_provider.get_key(key_name)
            raw: io.RawIOBase = DecryptingStream(stream, key)
        except (KeyProviderError, ValueError) as exc:
            stream.close()
            raise DecryptionError(bucket_name, object_name, str(exc)) from exc
        except BaseException:
            stream.close()
            raise
        logger.debug("Decrypting %s/%s with key %r", bucket_name, object_name, key_name)
    else:
        raw = _StreamAdapter(stream)

    text = io.TextIOWrapper(io.BufferedReader(raw), encoding=encoding)
    return SourceReader(text, bucket=bucket_name, object_name=object_name, encrypted=encrypted)
