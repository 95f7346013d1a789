"""Cron expression engine.

This module provides a cron expression parser, validator, matcher, bounded
next-run search and a description synthesizer.

Features:
    - Standard 5-field cron (minute, hour, day, month, weekday)
    - Extended 6-field cron with seconds
    - Optional trailing year field in both modes
    - Special characters: *, /, -, ,, ? (day fields)
    - Aggregated validation reports (every error in one pass)
    - Bounded next-run calculation that never hangs
    - English and Chinese descriptions
    - Expression builder and presets

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * / , -
    Minute        0-59            * / , -
    Hour          0-23            * / , -
    Day of Month  1-31            * / , - ?
    Month         1-12            * / , -
    Day of Week   0-7 (0,7=SUN)   * / , - ?
    Year          1970-2099       * / , -

Usage:
    >>> from cronlens.scheduling import parse, next_occurrences, describe
    >>>
    >>> expr, report = parse("0 9 * * 1-5")
    >>> if report.is_valid:
    ...     runs = next_occurrences(expr, datetime.now(), 5)
    ...     text = describe(expr)
"""

from cronlens.scheduling.errors import (
    CronError,
    ArityError,
    FieldRangeError,
    InvalidExpressionError,
)

from cronlens.scheduling.fields import (
    FieldType,
    FieldConstraints,
    FieldExpansion,
    FIELD_CONSTRAINTS,
    expand_field,
)

from cronlens.scheduling.cron import (
    # Core
    CronExpression,
    CronField,
    # Validation
    IssueKind,
    ValidationIssue,
    ValidationWarning,
    ValidationReport,
    ParseResult,
    parse,
    validate_expression,
    is_valid_expression,
    # Matching
    matches,
)

from cronlens.scheduling.search import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_FAST_FAIL_WINDOW,
    iter_occurrences,
    next_occurrences,
)

from cronlens.scheduling.describe import (
    COMMON_EXPRESSIONS,
    describe,
    describe_source,
)

from cronlens.scheduling.builder import (
    CronBuilder,
    crontab_line,
)

from cronlens.scheduling.presets import (
    Preset,
    PresetCategory,
    PRESETS,
    get_preset,
    list_presets,
    EVERY_MINUTE,
    EVERY_SECOND,
    HOURLY,
    DAILY,
    MIDNIGHT,
    WEEKLY,
    MONTHLY,
    YEARLY,
    ANNUALLY,
    WEEKDAYS_9AM,
    WEEKDAYS_6PM,
    QUARTERLY,
)

__all__ = [
    # Errors
    "CronError",
    "ArityError",
    "FieldRangeError",
    "InvalidExpressionError",
    # Fields
    "FieldType",
    "FieldConstraints",
    "FieldExpansion",
    "FIELD_CONSTRAINTS",
    "expand_field",
    # Core
    "CronExpression",
    "CronField",
    # Validation
    "IssueKind",
    "ValidationIssue",
    "ValidationWarning",
    "ValidationReport",
    "ParseResult",
    "parse",
    "validate_expression",
    "is_valid_expression",
    # Matching and search
    "matches",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_FAST_FAIL_WINDOW",
    "iter_occurrences",
    "next_occurrences",
    # Description
    "COMMON_EXPRESSIONS",
    "describe",
    "describe_source",
    # Builder
    "CronBuilder",
    "crontab_line",
    # Presets
    "Preset",
    "PresetCategory",
    "PRESETS",
    "get_preset",
    "list_presets",
    "EVERY_MINUTE",
    "EVERY_SECOND",
    "HOURLY",
    "DAILY",
    "MIDNIGHT",
    "WEEKLY",
    "MONTHLY",
    "YEARLY",
    "ANNUALLY",
    "WEEKDAYS_9AM",
    "WEEKDAYS_6PM",
    "QUARTERLY",
]
