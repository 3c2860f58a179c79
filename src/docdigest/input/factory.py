"""Normalize paths, URLs, byte buffers and streams into `Input` handles.

Byte buffers and streams are materialized eagerly: the content is read once,
digested during that same read and returned as an `InMemoryInput` whose hash
is already set. Paths and URLs become `ReferenceInput` objects; whether their
digest is computed up front depends on the reference policy:

``deferred``
    nothing is read beyond an openability check; the hash appears once a
    consumer drains `Input.open_digesting_stream()`.
``eager``
    the factory drains one digesting stream before returning, so the
    reference already carries its hash.
``materialize``
    the resource is read into memory and returned as an `InMemoryInput`.
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO, Optional

from docdigest.config.models import DocDigestConfig
from docdigest.errors import InvalidInputError
from docdigest.input.model import HashCell, InMemoryInput, Input, ReferenceInput
from docdigest.io.fetcher import is_url, name_from_url, open_url, check_url
from docdigest.util.hashing import DEFAULT_ALGORITHM, hex_digest, normalize_algorithm_name, resolve_algorithm

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096
REFERENCE_POLICIES = ("deferred", "eager", "materialize")

_BYTES_TYPES = (bytes, bytearray, memoryview)
_OPEN_STREAM_ERROR = "Can not open stream from"


class InputFactory:
    """Build `Input` handles using one digest algorithm.

    The algorithm is resolved on construction so that an unsupported name
    fails before any source is touched.
    """

    DEFAULT_ALGORITHM = DEFAULT_ALGORITHM

    def __init__(
        self,
        algorithm: Optional[str] = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        reference_policy: str = "deferred",
        timeout_seconds: float | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.algorithm = normalize_algorithm_name(algorithm)
        resolve_algorithm(self.algorithm)

        if chunk_size < 1:
            raise InvalidInputError("chunk_size must be >= 1")
        if reference_policy not in REFERENCE_POLICIES:
            raise InvalidInputError(
                f"Unknown reference policy {reference_policy!r}; expected one of {', '.join(REFERENCE_POLICIES)}"
            )

        self.chunk_size = chunk_size
        self.reference_policy = reference_policy
        self.timeout_seconds = timeout_seconds
        self.headers = dict(headers or {})

    @classmethod
    def from_config(cls, config: DocDigestConfig) -> "InputFactory":
        return cls(
            config.digest.algorithm,
            chunk_size=config.digest.chunk_size,
            reference_policy=config.reference.hash_policy,
            timeout_seconds=config.reference.timeout_seconds,
            headers=config.reference.headers,
        )

    def read(self, source: Any, name: Optional[str] = None) -> Input:
        """Dispatch `source` to the matching ``read_*`` method.

        Strings carrying a URL scheme are read as URLs, other strings as
        filesystem paths. `name` is required for byte buffers and streams and
        ignored otherwise.
        """
        if source is None:
            raise InvalidInputError("Input can not be null")
        if isinstance(source, _BYTES_TYPES):
            return self.read_bytes(source, name)
        if isinstance(source, os.PathLike):
            return self.read_path(source)
        if isinstance(source, str):
            if is_url(source):
                return self.read_url(source)
            return self.read_path(source)
        if hasattr(source, "read"):
            return self.read_stream(source, name)
        raise InvalidInputError(f"Unsupported input type {type(source).__name__}")

    def read_path(self, path: str | os.PathLike[str]) -> Input:
        """Read the file at `path` by way of its ``file`` URL."""
        if path is None:
            raise InvalidInputError("Input can not be null")
        try:
            url = Path(path).expanduser().resolve().as_uri()
        except (TypeError, ValueError, OSError) as exc:
            raise InvalidInputError(f"Malformed format {path}") from exc
        return self.read_url(url)

    def read_file(self, handle: Any) -> Input:
        """Read the file backing an open file object, identified by its name."""
        if handle is None:
            raise InvalidInputError("Input can not be null")
        file_name = getattr(handle, "name", None)
        if not isinstance(file_name, (str, bytes, os.PathLike)):
            raise InvalidInputError(f"File handle {handle!r} is not associated with a path")
        return self.read_path(os.fsdecode(file_name))

    def read_url(self, url: str) -> Input:
        """Check `url` and return an input referring to it."""
        if url is None:
            raise InvalidInputError("Input can not be null")
        if not isinstance(url, str) or not is_url(url):
            raise InvalidInputError(f"Malformed URL {url}")

        try:
            check_url(url, timeout_seconds=self.timeout_seconds, headers=self.headers)
        except (OSError, ValueError) as exc:
            raise InvalidInputError(f"{_OPEN_STREAM_ERROR} {url}") from exc

        name = name_from_url(url)

        if self.reference_policy == "materialize":
            try:
                with open_url(url, timeout_seconds=self.timeout_seconds, headers=self.headers) as stream:
                    return self._materialize(stream, name)
            except OSError as exc:
                raise InvalidInputError(f"{_OPEN_STREAM_ERROR} {url}") from exc

        reference = ReferenceInput(
            url,
            name,
            self.algorithm,
            timeout_seconds=self.timeout_seconds,
            headers=self.headers,
        )
        if self.reference_policy == "eager":
            self._drain(reference)
        logger.debug("Created reference input %s (hash computed: %s)", name, reference.is_hash_computed())
        return reference

    def read_bytes(self, data: bytes | bytearray | memoryview, name: Optional[str]) -> InMemoryInput:
        """Materialize an in-memory buffer."""
        if data is None:
            raise InvalidInputError("Input can not be null")
        _check_name(name)
        with io.BytesIO(bytes(data)) as stream:
            return self._materialize(stream, name)

    def read_stream(self, stream: BinaryIO, name: Optional[str]) -> InMemoryInput:
        """Materialize a binary stream.

        The stream is read to its end but not closed; it remains owned by the
        caller.
        """
        if stream is None:
            raise InvalidInputError("Input can not be null")
        _check_name(name)
        if not hasattr(stream, "read"):
            raise InvalidInputError(f"Input {name} is not a readable stream")
        return self._materialize(stream, name)

    def _materialize(self, stream: BinaryIO, name: str) -> InMemoryInput:
        logger.debug("Generating hash for %s using %s algorithm", name, self.algorithm)
        accumulator = resolve_algorithm(self.algorithm)
        buffer = io.BytesIO()
        while True:
            try:
                chunk = stream.read(self.chunk_size)
            except (OSError, ValueError) as exc:
                # ValueError covers reads on closed handles
                raise InvalidInputError(f"{_OPEN_STREAM_ERROR} {name}") from exc
            if not chunk:
                break
            if not isinstance(chunk, _BYTES_TYPES):
                raise InvalidInputError(f"Stream for {name} must be opened in binary mode")
            accumulator.update(chunk)
            buffer.write(chunk)

        digest = accumulator.digest()
        logger.debug("Generated hash for %s is %s", name, hex_digest(digest))
        return InMemoryInput(buffer.getvalue(), name, self.algorithm, HashCell(digest))

    def _drain(self, reference: ReferenceInput) -> None:
        try:
            with reference.open_digesting_stream() as stream:
                while stream.read(self.chunk_size):
                    pass
        except OSError as exc:
            raise InvalidInputError(f"{_OPEN_STREAM_ERROR} {reference.locator}") from exc
        logger.debug("Generated hash for %s is %s", reference.name, hex_digest(reference.get_hash()))


def _check_name(name: Optional[str]) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError("Must supply a valid name/identifier for the input")


def read(source: Any, name: Optional[str] = None, algorithm: Optional[str] = None) -> Input:
    """Read `source` with a one-off factory using `algorithm` (SHA-256 by default)."""
    return InputFactory(algorithm).read(source, name)


def read_path(path: str | os.PathLike[str], algorithm: Optional[str] = None) -> Input:
    return InputFactory(algorithm).read_path(path)


def read_file(handle: Any, algorithm: Optional[str] = None) -> Input:
    return InputFactory(algorithm).read_file(handle)


def read_url(url: str, algorithm: Optional[str] = None) -> Input:
    return InputFactory(algorithm).read_url(url)


def read_bytes(data: bytes, name: Optional[str], algorithm: Optional[str] = None) -> InMemoryInput:
    return InputFactory(algorithm).read_bytes(data, name)


def read_stream(stream: BinaryIO, name: Optional[str], algorithm: Optional[str] = None) -> InMemoryInput:
    return InputFactory(algorithm).read_stream(stream, name)


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "REFERENCE_POLICIES",
    "InputFactory",
    "read",
    "read_bytes",
    "read_file",
    "read_path",
    "read_stream",
    "read_url",
]
