"""Exception hierarchy for document ingestion and digesting."""

from __future__ import annotations


class DocDigestError(Exception):
    """Base class for all docdigest errors."""


class InvalidInputError(DocDigestError, ValueError):
    """Source or name is missing, malformed, or cannot be read."""


class UnsupportedAlgorithmError(DocDigestError, ValueError):
    """Requested digest algorithm is not available on this platform."""


class HashStateError(DocDigestError, RuntimeError):
    """Hash lifecycle violated."""


class HashNotComputedError(HashStateError):
    """Hash requested before the content has been digested."""


class HashAlreadySetError(HashStateError):
    """A different digest was published for an input that already has one."""


class InputIOError(DocDigestError, OSError):
    """Underlying resource of an input could not be opened."""


__all__ = [
    "DocDigestError",
    "HashAlreadySetError",
    "HashNotComputedError",
    "HashStateError",
    "InputIOError",
    "InvalidInputError",
    "UnsupportedAlgorithmError",
]
