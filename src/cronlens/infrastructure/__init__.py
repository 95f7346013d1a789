"""Configuration and logging for cronlens front ends."""

from cronlens.infrastructure.config import (
    ConfigError,
    ConfigSource,
    ConfigSourceError,
    ConfigValidationError,
    EngineConfig,
    EnvConfigSource,
    FileConfigSource,
    load_config,
)
from cronlens.infrastructure.logging import (
    LogLevel,
    configure_logging,
    reset_logging,
)

__all__ = [
    # Config
    "ConfigError",
    "ConfigSource",
    "ConfigSourceError",
    "ConfigValidationError",
    "EngineConfig",
    "EnvConfigSource",
    "FileConfigSource",
    "load_config",
    # Logging
    "LogLevel",
    "configure_logging",
    "reset_logging",
]
