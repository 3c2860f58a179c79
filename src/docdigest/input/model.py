"""Content-addressed input handles."""

from __future__ import annotations

import io
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import BinaryIO, Optional, Protocol, runtime_checkable

from docdigest.errors import HashAlreadySetError, HashNotComputedError, InputIOError
from docdigest.io.digesting import wrap
from docdigest.io.fetcher import open_url


class HashCell:
    """Write-once holder for a digest."""

    def __init__(self, value: Optional[bytes] = None) -> None:
        self._value = bytes(value) if value is not None else None
        self._lock = threading.Lock()

    def is_set(self) -> bool:
        return self._value is not None

    def get(self) -> bytes:
        value = self._value
        if value is None:
            raise HashNotComputedError("Hash is not computed yet")
        return value

    def set(self, value: bytes) -> None:
        """Fill the cell; repeating the same digest is a no-op."""
        digest = bytes(value)
        with self._lock:
            if self._value is None:
                self._value = digest
                return
            if self._value != digest:
                raise HashAlreadySetError("A different hash has already been published")

    def __repr__(self) -> str:
        state = self._value.hex() if self._value is not None else "pending"
        return f"HashCell({state})"


@runtime_checkable
class Input(Protocol):
    """A document to be processed, identified by its content digest."""

    name: str
    digest_algorithm: str

    def open_stream(self) -> BinaryIO:
        """Return a fresh binary stream over the content."""
        ...

    def open_digesting_stream(self) -> BinaryIO:
        """Return a stream that publishes the digest once read to its end and closed."""
        ...

    def get_hash(self) -> bytes:
        """Return the raw digest, raising `HashNotComputedError` while pending."""
        ...

    def is_hash_computed(self) -> bool:
        """Whether the digest is available, without computing it."""
        ...


@dataclass(frozen=True, eq=False)
class InMemoryInput:
    """Fully materialized content with its digest."""

    content: bytes
    name: str
    digest_algorithm: str
    hash_cell: HashCell = field(default_factory=HashCell, repr=False)

    @property
    def length(self) -> int:
        return len(self.content)

    def open_stream(self) -> BinaryIO:
        return io.BytesIO(self.content)

    def open_digesting_stream(self) -> BinaryIO:
        return _digesting(self)

    def get_hash(self) -> bytes:
        return self.hash_cell.get()

    def is_hash_computed(self) -> bool:
        return self.hash_cell.is_set()

    def set_hash(self, digest: bytes) -> None:
        self.hash_cell.set(digest)


@dataclass(frozen=True, eq=False)
class ReferenceInput:
    """Content accessed through a URL.

    `open_stream` never computes anything. A consumer that wants the digest
    reads through `open_digesting_stream` instead; draining and closing that
    stream publishes the hash on this input. Overlapping full drains publish
    the same digest.
    """

    locator: str
    name: str
    digest_algorithm: str
    timeout_seconds: Optional[float] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), repr=False)
    hash_cell: HashCell = field(default_factory=HashCell, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def open_stream(self) -> BinaryIO:
        try:
            return open_url(self.locator, timeout_seconds=self.timeout_seconds, headers=self.headers)
        except OSError as exc:
            raise InputIOError(f"Can not open stream from {self.locator}") from exc

    def open_digesting_stream(self) -> BinaryIO:
        return _digesting(self)

    def get_hash(self) -> bytes:
        return self.hash_cell.get()

    def is_hash_computed(self) -> bool:
        return self.hash_cell.is_set()

    def set_hash(self, digest: bytes) -> None:
        self.hash_cell.set(digest)


def _digesting(item: InMemoryInput | ReferenceInput) -> BinaryIO:
    """Open `item` wrapped in a digesting stream while its hash is pending.

    The hash is only published once the stream has been read to its end, so an
    abandoned or partial read leaves the input pending.
    """
    stream = item.open_stream()
    if item.is_hash_computed():
        return stream
    try:
        return wrap(item, stream, item.digest_algorithm, require_eof=True)
    except Exception:
        stream.close()
        raise


__all__ = ["HashCell", "InMemoryInput", "Input", "ReferenceInput"]
