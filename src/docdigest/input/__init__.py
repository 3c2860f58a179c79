"""Input handles and the factory that builds them."""

from .factory import (
    DEFAULT_CHUNK_SIZE,
    REFERENCE_POLICIES,
    InputFactory,
    read,
    read_bytes,
    read_file,
    read_path,
    read_stream,
    read_url,
)
from .model import HashCell, InMemoryInput, Input, ReferenceInput

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "HashCell",
    "InMemoryInput",
    "Input",
    "InputFactory",
    "REFERENCE_POLICIES",
    "ReferenceInput",
    "read",
    "read_bytes",
    "read_file",
    "read_path",
    "read_stream",
    "read_url",
]
