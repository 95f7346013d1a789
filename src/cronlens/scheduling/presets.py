"""Predefined cron expression presets.

This module provides commonly used cron expressions as constants and as a
categorized catalog for pickers and the ``cronlens presets`` command.

Usage:
    >>> from cronlens.scheduling.presets import DAILY, get_preset
    >>>
    >>> DAILY.next_n(3, max_iterations=5000)  # three days of minute steps
    >>> get_preset("weekdays-9am").expression
    '0 9 * * 1-5'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property

from cronlens.scheduling.cron import CronExpression


class PresetCategory(Enum):
    """Groups presets are listed under."""

    COMMON = "common"
    BUSINESS_HOURS = "business_hours"
    MAINTENANCE = "maintenance"
    MONITORING = "monitoring"
    SPECIAL = "special"


@dataclass(frozen=True)
class Preset:
    """A named, described expression."""

    key: str
    name: str
    expression: str
    description: str
    category: PresetCategory
    include_seconds: bool = False

    @cached_property
    def cron(self) -> CronExpression:
        return CronExpression.parse(self.expression, self.include_seconds)


# =============================================================================
# Standard Intervals
# =============================================================================

# Every year on January 1st at midnight
YEARLY = CronExpression.parse("0 0 1 1 *")
ANNUALLY = YEARLY

# First day of every month at midnight
MONTHLY = CronExpression.parse("0 0 1 * *")

# Every Sunday at midnight
WEEKLY = CronExpression.parse("0 0 * * 0")

# Every day at midnight
DAILY = CronExpression.parse("0 0 * * *")
MIDNIGHT = DAILY

# Every hour at minute 0
HOURLY = CronExpression.parse("0 * * * *")

# Every minute
EVERY_MINUTE = CronExpression.parse("* * * * *")

# Every second (6-field cron)
EVERY_SECOND = CronExpression.parse("* * * * * *", include_seconds=True)

# Every 5/15/30 minutes
EVERY_5_MIN = CronExpression.parse("*/5 * * * *")
EVERY_15_MIN = CronExpression.parse("*/15 * * * *")
EVERY_30_MIN = CronExpression.parse("*/30 * * * *")


# =============================================================================
# Business Schedule Presets
# =============================================================================

# Weekdays (Monday-Friday) at 9 AM
WEEKDAYS_9AM = CronExpression.parse("0 9 * * 1-5")

# Weekdays (Monday-Friday) at 6 PM
WEEKDAYS_6PM = CronExpression.parse("0 18 * * 1-5")

# Every hour during business hours
BUSINESS_HOURS_HOURLY = CronExpression.parse("0 9-17 * * 1-5")

# Weekdays at noon
LUNCH_BREAK = CronExpression.parse("0 12 * * 1-5")


# =============================================================================
# Backup & Maintenance Presets
# =============================================================================

NIGHTLY_BACKUP = CronExpression.parse("0 2 * * *")
WEEKLY_BACKUP = CronExpression.parse("0 3 * * 0")
MONTHLY_BACKUP = CronExpression.parse("0 4 1 * *")
LOG_CLEANUP = CronExpression.parse("0 1 * * *")
SATURDAY_MAINTENANCE = CronExpression.parse("0 5 * * 6")


# =============================================================================
# Monitoring & Report Presets
# =============================================================================

HEALTH_CHECK = CronExpression.parse("*/10 * * * *")
DAILY_REPORT = CronExpression.parse("0 8 * * 1-5")
WEEKLY_REPORT = CronExpression.parse("0 9 * * 1")
MONTHLY_REPORT = CronExpression.parse("0 10 1 * *")


# =============================================================================
# Special Presets
# =============================================================================

WEEKENDS_10AM = CronExpression.parse("0 10 * * 6,0")

# Last few days of every month at 11 PM
MONTH_END = CronExpression.parse("0 23 28-31 * *")

# First day of each quarter
QUARTERLY = CronExpression.parse("0 0 1 1,4,7,10 *")


# =============================================================================
# Preset Registry
# =============================================================================


def _preset(
    key: str,
    name: str,
    expr: CronExpression,
    description: str,
    category: PresetCategory,
) -> Preset:
    return Preset(key, name, expr.normalized, description, category, expr.include_seconds)


_C = PresetCategory

PRESETS: dict[str, Preset] = {
    p.key: p
    for p in (
        # Common
        _preset("every_minute", "Every minute", EVERY_MINUTE, "Runs once a minute", _C.COMMON),
        _preset("every_second", "Every second", EVERY_SECOND, "Runs once a second", _C.COMMON),
        _preset("every_5_min", "Every 5 minutes", EVERY_5_MIN, "Runs every 5 minutes", _C.COMMON),
        _preset("every_15_min", "Every 15 minutes", EVERY_15_MIN, "Runs every 15 minutes", _C.COMMON),
        _preset("every_30_min", "Every 30 minutes", EVERY_30_MIN, "Runs every 30 minutes", _C.COMMON),
        _preset("hourly", "Hourly", HOURLY, "Minute 0 of every hour", _C.COMMON),
        _preset("daily", "Daily", DAILY, "Every day at midnight", _C.COMMON),
        _preset("weekly", "Weekly", WEEKLY, "Sundays at midnight", _C.COMMON),
        _preset("monthly", "Monthly", MONTHLY, "Midnight on the 1st", _C.COMMON),
        _preset("yearly", "Yearly", YEARLY, "Midnight on January 1st", _C.COMMON),
        # Business hours
        _preset("weekdays_9am", "Weekdays 9 AM", WEEKDAYS_9AM, "Monday to Friday at 9 AM", _C.BUSINESS_HOURS),
        _preset("weekdays_6pm", "Weekdays 6 PM", WEEKDAYS_6PM, "Monday to Friday at 6 PM", _C.BUSINESS_HOURS),
        _preset(
            "business_hours_hourly",
            "Hourly during business hours",
            BUSINESS_HOURS_HOURLY,
            "Every hour from 9 AM to 5 PM on weekdays",
            _C.BUSINESS_HOURS,
        ),
        _preset("lunch_break", "Lunch break", LUNCH_BREAK, "Weekdays at noon", _C.BUSINESS_HOURS),
        # Backup & maintenance
        _preset("nightly_backup", "Daily backup", NIGHTLY_BACKUP, "Every day at 2 AM", _C.MAINTENANCE),
        _preset("weekly_backup", "Weekly backup", WEEKLY_BACKUP, "Sundays at 3 AM", _C.MAINTENANCE),
        _preset("monthly_backup", "Monthly backup", MONTHLY_BACKUP, "4 AM on the 1st", _C.MAINTENANCE),
        _preset("log_cleanup", "Log cleanup", LOG_CLEANUP, "Every day at 1 AM", _C.MAINTENANCE),
        _preset(
            "saturday_maintenance",
            "System maintenance",
            SATURDAY_MAINTENANCE,
            "Saturdays at 5 AM",
            _C.MAINTENANCE,
        ),
        # Monitoring & reports
        _preset("health_check", "Health check", HEALTH_CHECK, "Every 10 minutes", _C.MONITORING),
        _preset("daily_report", "Daily report", DAILY_REPORT, "Weekdays at 8 AM", _C.MONITORING),
        _preset("weekly_report", "Weekly report", WEEKLY_REPORT, "Mondays at 9 AM", _C.MONITORING),
        _preset("monthly_report", "Monthly report", MONTHLY_REPORT, "10 AM on the 1st", _C.MONITORING),
        # Special
        _preset("weekends_10am", "Weekend task", WEEKENDS_10AM, "Saturdays and Sundays at 10 AM", _C.SPECIAL),
        _preset("month_end", "Month end", MONTH_END, "11 PM on the 28th to the 31st", _C.SPECIAL),
        _preset("quarterly", "Quarterly", QUARTERLY, "Midnight on the first day of each quarter", _C.SPECIAL),
    )
}

PRESET_CATEGORIES: tuple[PresetCategory, ...] = tuple(PresetCategory)


def get_preset(name: str) -> Preset | None:
    """Get a preset by key.

    Args:
        name: Preset key (case-insensitive, ``-`` and ``_`` interchangeable).

    Returns:
        Preset or None if not found.
    """
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets(category: PresetCategory | str | None = None) -> list[str]:
    """List preset keys, optionally restricted to one category."""
    if category is None:
        return list(PRESETS)
    category = PresetCategory(category)
    return [key for key, preset in PRESETS.items() if preset.category is category]
