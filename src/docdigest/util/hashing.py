"""Digest algorithm registry used for content fingerprints."""

from __future__ import annotations

import hashlib
from typing import Any

from docdigest.errors import UnsupportedAlgorithmError

DEFAULT_ALGORITHM = "SHA-256"

# JCA style names that do not map onto hashlib by simple normalisation.
_ALIASES: dict[str, str] = {
    "sha-512/224": "sha512_224",
    "sha-512/256": "sha512_256",
}


def normalize_algorithm_name(name: str | None) -> str:
    """Return `name` stripped, or the default algorithm when blank."""
    if name is None or not name.strip():
        return DEFAULT_ALGORITHM
    return name.strip()


def resolve_algorithm(name: str) -> Any:
    """Return a fresh accumulator for `name`.

    Accepts hashlib names (``sha256``) as well as the dashed spelling used by
    standards documents (``SHA-256``, ``SHA3-256``). Every call returns a new
    object; accumulators must not be shared between inputs.
    """
    if name is None or not name.strip():
        raise UnsupportedAlgorithmError("Digest algorithm name must not be blank")

    for candidate in _candidates(name.strip()):
        if candidate.startswith("shake"):
            # variable length output, no fixed digest() signature
            continue
        try:
            return hashlib.new(candidate)
        except ValueError:
            continue
    raise UnsupportedAlgorithmError(f"Specified method {name} is not available")


def hex_digest(digest: bytes) -> str:
    """Render raw digest bytes as upper-case hex."""
    return digest.hex().upper()


def _candidates(name: str) -> list[str]:
    lowered = name.lower()
    if lowered in _ALIASES:
        return [_ALIASES[lowered]]
    if lowered.startswith("sha3-"):
        return [lowered.replace("-", "_")]
    return [lowered.replace("-", "")]


__all__ = ["DEFAULT_ALGORITHM", "hex_digest", "normalize_algorithm_name", "resolve_algorithm"]
