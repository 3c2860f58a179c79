"""Configuration models and loaders for docdigest."""

from .loader import ALGORITHM_ENV, ConfigError, DEFAULT_CONFIG_PATH, dump_example_config, load_config
from .models import DigestConfig, DocDigestConfig, LoggingConfig, ReferenceConfig

__all__ = [
    "ALGORITHM_ENV",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "DigestConfig",
    "DocDigestConfig",
    "LoggingConfig",
    "ReferenceConfig",
    "dump_example_config",
    "load_config",
]
