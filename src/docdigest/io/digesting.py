"""Pass-through stream that publishes a content digest when closed."""

from __future__ import annotations

import io
from typing import Any, BinaryIO, Protocol, runtime_checkable

from docdigest.util.hashing import resolve_algorithm


@runtime_checkable
class HashReceiver(Protocol):
    """Objects that accept a finished digest."""

    def set_hash(self, digest: bytes) -> None:
        """Store the finished digest."""
        ...


class DigestingStream(io.RawIOBase):
    """Feed every byte read from `source` into `accumulator`.

    The digest is finalized and handed to `target` when the stream is closed,
    once. Closing before end-of-stream publishes the digest of the bytes read
    so far, unless `require_eof` is set, in which case nothing is published.
    Garbage collection closes the source but never publishes.
    """

    def __init__(self, target: HashReceiver, source: BinaryIO, accumulator: Any, *, require_eof: bool = False) -> None:
        super().__init__()
        self._target = target
        self._source = source
        self._accumulator = accumulator
        self._require_eof = require_eof
        self._eof = False
        self._published = False

    @property
    def at_eof(self) -> bool:
        """Whether the source has reported end-of-stream."""
        return self._eof

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        count = len(data)
        buffer[:count] = data
        return count

    def read(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if size is None or size < 0:
            return self.readall()
        if size == 0:
            return b""
        data = self._source.read(size)
        if not data:
            self._eof = True
            return b""
        self._accumulator.update(data)
        return data

    def readall(self) -> bytes:
        chunks = []
        while True:
            chunk = self.read(io.DEFAULT_BUFFER_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._source.close()
        finally:
            super().close()
        self._publish()

    def __del__(self) -> None:
        self._published = True
        self.close()

    def _publish(self) -> None:
        if self._published:
            return
        self._published = True
        if self._require_eof and not self._eof:
            return
        self._target.set_hash(self._accumulator.digest())


def wrap(target: HashReceiver, source: BinaryIO, algorithm: str, *, require_eof: bool = False) -> DigestingStream:
    """Wrap `source` so its digest under `algorithm` is delivered to `target` on close."""
    accumulator = resolve_algorithm(algorithm)
    return DigestingStream(target, source, accumulator, require_eof=require_eof)


__all__ = ["DigestingStream", "HashReceiver", "wrap"]
