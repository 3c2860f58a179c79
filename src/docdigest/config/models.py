"""Pydantic models describing docdigest configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docdigest.util.hashing import DEFAULT_ALGORITHM, normalize_algorithm_name, resolve_algorithm


class DigestConfig(BaseModel):
    """Digest algorithm and read granularity for eager materialization."""

    model_config = ConfigDict(extra="allow")

    algorithm: str = DEFAULT_ALGORITHM
    chunk_size: int = Field(default=4096, ge=1)

    @field_validator("algorithm", mode="before")
    @classmethod
    def _validate_algorithm(cls, value: Optional[str]) -> str:
        """Fall back to the default for blank names and reject unknown ones early."""

        if value is not None and not isinstance(value, str):
            raise ValueError("algorithm must be a string")
        name = normalize_algorithm_name(value)
        resolve_algorithm(name)
        return name


class ReferenceConfig(BaseModel):
    """Handling of inputs accessed by URL or path."""

    model_config = ConfigDict(extra="allow")

    hash_policy: Literal["deferred", "eager", "materialize"] = "deferred"
    timeout_seconds: Optional[float] = Field(default=30.0, gt=0)
    headers: Dict[str, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    """Logging destination and verbosity."""

    model_config = ConfigDict(extra="allow")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_path: Optional[Path] = None


class DocDigestConfig(BaseModel):
    """Root configuration object."""

    model_config = ConfigDict(extra="allow")

    digest: DigestConfig = Field(default_factory=DigestConfig)
    reference: ReferenceConfig = Field(default_factory=ReferenceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


__all__ = [
    "DigestConfig",
    "DocDigestConfig",
    "LoggingConfig",
    "ReferenceConfig",
]
