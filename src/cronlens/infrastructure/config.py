"""Configuration for cronlens front ends.

The engine functions take every setting as an explicit argument; this
module only resolves the defaults a front end (the CLI, an editor plugin)
passes in.

Architecture:
    ConfigSource[] (ordered by priority)
         |
         +---> FileConfigSource (YAML, JSON)
         +---> EnvConfigSource (environment variables)
         |
         v
    load_config()
         |
         +---> Merge & Validate
         |
         v
    EngineConfig (typed, frozen)

Usage:
    >>> from cronlens.infrastructure.config import load_config
    >>>
    >>> config = load_config("cronlens.yaml")
    >>> config.max_iterations
    1000
    >>>
    >>> # Environment overrides files:
    >>> #   CRONLENS_MAX_ITERATIONS=5000 CRONLENS_LOCALE=zh
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, fields
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from cronlens.i18n import SUPPORTED_LOCALES

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(Exception):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {', '.join(errors)}")


class ConfigSourceError(ConfigError):
    """Configuration source error."""

    pass


# =============================================================================
# Configuration Sources
# =============================================================================


class ConfigSource(ABC):
    """Abstract base class for configuration sources.

    Sources are merged in priority order; higher priority overrides lower.
    """

    def __init__(self, priority: int = 0) -> None:
        self._priority = priority

    @property
    def priority(self) -> int:
        """Get source priority."""
        return self._priority

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration from source.

        Returns:
            Dictionary of configuration values.
        """
        pass


class EnvConfigSource(ConfigSource):
    """Environment variable configuration source.

    Example:
        CRONLENS_MAX_ITERATIONS=5000
        CRONLENS_INCLUDE_SECONDS=true

        Will produce:
        {"max_iterations": 5000, "include_seconds": True}
    """

    def __init__(self, prefix: str = "CRONLENS", priority: int = 100) -> None:
        super().__init__(priority)
        self._prefix = prefix

    def load(self) -> dict[str, Any]:
        """Load configuration from environment."""
        result: dict[str, Any] = {}
        prefix = f"{self._prefix}_"

        for key, value in os.environ.items():
            if key.startswith(prefix):
                result[key[len(prefix):].lower()] = self._parse_value(value)

        return result

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        # Boolean
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        # None
        if value.lower() in ("null", "none", ""):
            return None

        # Number
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value


class FileConfigSource(ConfigSource):
    """File-based configuration source.

    Supports YAML and JSON, detected from the file extension. Settings may
    sit at the top level or under a ``cronlens`` key.
    """

    def __init__(self, path: str | Path, *, required: bool = False, priority: int = 50) -> None:
        super().__init__(priority)
        self._path = Path(path)
        self._required = required

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """Load configuration from file."""
        if not self._path.exists():
            if self._required:
                raise ConfigSourceError(f"Configuration file not found: {self._path}")
            return {}

        content = self._path.read_text(encoding="utf-8")
        suffix = self._path.suffix.lower()

        try:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif suffix == ".json":
                data = json.loads(content)
            else:
                raise ConfigSourceError(f"Unsupported file format: {suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigSourceError(f"Failed to load config {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigSourceError(f"Config file {self._path} must contain a mapping")
        nested = data.get("cronlens")
        return dict(nested) if isinstance(nested, dict) else data


# =============================================================================
# Engine Configuration
# =============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Resolved settings.

    Attributes:
        include_seconds: Parse expressions with a leading seconds field.
        max_iterations: Step budget for next-occurrence searches.
        fast_fail_hours: Give up a search after this many hours without a
            match. None or 0 disables the early give-up.
        default_count: Number of upcoming runs to show.
        locale: Locale for messages and descriptions.
        timezone: IANA zone for reference instants; None means local time.
        hour_format: 12 or 24, used when displaying times.
    """

    include_seconds: bool = False
    max_iterations: int = 1000
    fast_fail_hours: float | None = 24.0
    default_count: int = 5
    locale: str = "en"
    timezone: str | None = None
    hour_format: int = 24

    @property
    def fast_fail_window(self) -> timedelta | None:
        if not self.fast_fail_hours:
            return None
        return timedelta(hours=self.fast_fail_hours)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "include_seconds": (bool,),
    "max_iterations": (int,),
    "fast_fail_hours": (int, float, type(None)),
    "default_count": (int,),
    "locale": (str,),
    "timezone": (str, type(None)),
    "hour_format": (int,),
}


def validate_config(values: dict[str, Any]) -> list[str]:
    """Check merged values against EngineConfig.

    Returns:
        Every problem found (empty if valid).
    """
    errors: list[str] = []

    for key, value in values.items():
        expected = _FIELD_TYPES[key]
        # bool is an int subclass; only accept it where declared
        if isinstance(value, bool) and bool not in expected:
            errors.append(f"{key}: expected {expected[0].__name__}, got bool")
        elif not isinstance(value, expected):
            errors.append(f"{key}: expected {expected[0].__name__}, got {type(value).__name__}")

    if not errors:
        if values.get("max_iterations", 1) < 1:
            errors.append("max_iterations: must be at least 1")
        if values.get("default_count", 1) < 1:
            errors.append("default_count: must be at least 1")
        if (values.get("fast_fail_hours") or 0) < 0:
            errors.append("fast_fail_hours: must not be negative")
        if values.get("hour_format", 24) not in (12, 24):
            errors.append("hour_format: must be 12 or 24")
        locale = values.get("locale")
        if locale is not None and locale.replace("-", "_").split("_")[0].lower() not in SUPPORTED_LOCALES:
            errors.append(f"locale: must be one of {', '.join(SUPPORTED_LOCALES)}")

    return errors


def load_config(
    config_path: str | Path | None = None,
    *,
    env_prefix: str = "CRONLENS",
    sources: list[ConfigSource] | None = None,
) -> EngineConfig:
    """Load configuration.

    Args:
        config_path: Optional YAML/JSON file; it must exist when given.
        env_prefix: Environment variable prefix.
        sources: Extra sources merged with the file and environment.

    Returns:
        EngineConfig with defaults for anything not configured.

    Raises:
        ConfigSourceError: If the file is missing or unreadable.
        ConfigValidationError: If any value has the wrong type or range.
    """
    all_sources: list[ConfigSource] = list(sources or [])
    if config_path is not None:
        all_sources.append(FileConfigSource(config_path, required=True))
    all_sources.append(EnvConfigSource(prefix=env_prefix))

    known = {f.name for f in fields(EngineConfig)}
    merged: dict[str, Any] = {}
    for source in sorted(all_sources, key=lambda s: s.priority):
        for key, value in source.load().items():
            if key not in known:
                logger.debug("Ignoring unknown config key %r from %s", key, type(source).__name__)
                continue
            merged[key] = value

    # Env values arrive as int when written without a decimal point
    if isinstance(merged.get("fast_fail_hours"), int) and not isinstance(
        merged.get("fast_fail_hours"), bool
    ):
        merged["fast_fail_hours"] = float(merged["fast_fail_hours"])

    errors = validate_config(merged)
    if errors:
        raise ConfigValidationError(errors)

    config = EngineConfig(**merged)
    logger.debug("Loaded configuration: %s", config)
    return config
