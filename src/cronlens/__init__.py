"""cronlens - validate, explain and preview cron expressions."""

from cronlens.scheduling import (
    CronBuilder,
    CronError,
    CronExpression,
    CronField,
    FieldType,
    InvalidExpressionError,
    ParseResult,
    ValidationReport,
    describe,
    expand_field,
    get_preset,
    matches,
    next_occurrences,
    parse,
)
from cronlens.debounce import Debouncer
from cronlens.infrastructure import EngineConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "expand_field",
    "parse",
    "matches",
    "next_occurrences",
    "describe",
    "CronExpression",
    "CronField",
    "FieldType",
    "ParseResult",
    "ValidationReport",
    "CronError",
    "InvalidExpressionError",
    # Extras
    "CronBuilder",
    "get_preset",
    "Debouncer",
    # Configuration
    "EngineConfig",
    "load_config",
]
