from __future__ import annotations

import io
import logging
from pathlib import Path

import requests

SOME_VALUE = "some value"

SCENARIO_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<scenarios name="sample">
  <scenario><name>invoice</name></scenario>
</scenarios>
"""

REPORT_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<report valid="true"/>
"""


class CountingStream(io.RawIOBase):
    """Binary source that records every read call."""

    def __init__(self, content: bytes) -> None:
        super().__init__()
        self._inner = io.BytesIO(content)
        self.read_calls = 0
        self.bytes_served = 0
        self.eof_reads = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self.read_calls += 1
        data = self._inner.read(size)
        self.bytes_served += len(data)
        if not data:
            self.eof_reads += 1
        return data

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)


class FailingStream(io.RawIOBase):
    """Serves `good` bytes and then raises `OSError`."""

    def __init__(self, good: bytes) -> None:
        super().__init__()
        self._good = good
        self.close_calls = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        if self._good:
            data, self._good = self._good, b""
            return data
        raise OSError("disk went away")

    def close(self) -> None:
        self.close_calls += 1
        super().close()


class HashSink:
    """Records digests delivered by a digesting stream."""

    def __init__(self) -> None:
        self.received: list[bytes] = []

    def set_hash(self, digest: bytes) -> None:
        self.received.append(digest)


class DummyRaw(io.BytesIO):
    decode_content = False


class DummyResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.raw = DummyRaw(content)
        self.status_code = status_code
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def close(self) -> None:
        self.closed = True


def write_sample(root: Path, name: str, content: bytes) -> Path:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def drain(item) -> object:
    """Read an input through its digesting stream to the end and close it."""
    with item.open_digesting_stream() as stream:
        while stream.read(4096):
            pass
    return item


def reset_docdigest_logger() -> None:
    logger = logging.getLogger("docdigest")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
