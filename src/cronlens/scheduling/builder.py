"""Fluent construction of cron expressions.

Besides the chained setters, a builder can be filled from per-field value
selections (an empty or complete selection means ``*``) or from an existing
expression string.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from cronlens.scheduling.cron import CronExpression
from cronlens.scheduling.fields import FIELD_CONSTRAINTS, FieldType


def _join(values: Iterable[int]) -> str:
    return ",".join(str(v) for v in values)


def selection_token(values: Sequence[int], field_type: FieldType) -> str:
    """Token for a set of selected values.

    Nothing selected, or every value of the field selected, yields ``*``.
    """
    constraints = FIELD_CONSTRAINTS[field_type]
    unique = sorted({constraints.aliases.get(v, v) for v in values})
    span = constraints.max_value - constraints.min_value + 1
    if not unique or len(unique) == span:
        return "*"
    return _join(unique)


class CronBuilder:
    """Fluent builder for cron expressions.

    Example:
        >>> expr = (CronBuilder()
        ...     .at_minute(0, 30)
        ...     .at_hour(9, 17)
        ...     .on_weekdays()
        ...     .build())
    """

    def __init__(self) -> None:
        """Initialize builder with defaults (every minute)."""
        self._second: str = "0"
        self._minute: str = "*"
        self._hour: str = "*"
        self._day_of_month: str = "*"
        self._month: str = "*"
        self._day_of_week: str = "*"
        self._year: str = ""
        self._include_seconds: bool = False

    @classmethod
    def from_expression(cls, source: str, include_seconds: bool = False) -> "CronBuilder":
        """Load the tokens of an expression into a new builder.

        Tokens are copied as written; validation happens on ``build``.
        Too few tokens leaves the defaults in place.
        """
        builder = cls()
        builder._include_seconds = include_seconds
        tokens = source.split()
        if include_seconds and len(tokens) >= 6:
            builder._second = tokens[0]
            tokens = tokens[1:]
        elif include_seconds or len(tokens) < 5:
            return builder

        (
            builder._minute,
            builder._hour,
            builder._day_of_month,
            builder._month,
            builder._day_of_week,
        ) = tokens[:5]
        builder._year = tokens[5] if len(tokens) > 5 else ""
        return builder

    @classmethod
    def from_selections(
        cls,
        *,
        seconds: Sequence[int] = (),
        minutes: Sequence[int] = (),
        hours: Sequence[int] = (),
        days: Sequence[int] = (),
        months: Sequence[int] = (),
        weekdays: Sequence[int] = (),
        include_seconds: bool = False,
    ) -> "CronBuilder":
        """Build from explicit value selections per field."""
        builder = cls()
        builder._include_seconds = include_seconds
        if include_seconds:
            builder._second = selection_token(seconds, FieldType.SECOND) if seconds else "0"
        builder._minute = selection_token(minutes, FieldType.MINUTE)
        builder._hour = selection_token(hours, FieldType.HOUR)
        builder._day_of_month = selection_token(days, FieldType.DAY_OF_MONTH)
        builder._month = selection_token(months, FieldType.MONTH)
        builder._day_of_week = selection_token(weekdays, FieldType.DAY_OF_WEEK)
        return builder

    def with_seconds(self) -> "CronBuilder":
        """Include seconds field in expression."""
        self._include_seconds = True
        return self

    def at_second(self, *seconds: int) -> "CronBuilder":
        """Set specific seconds."""
        self._include_seconds = True
        self._second = _join(seconds)
        return self

    def every_n_seconds(self, n: int) -> "CronBuilder":
        """Run every n seconds."""
        self._include_seconds = True
        self._second = f"*/{n}"
        return self

    def at_minute(self, *minutes: int) -> "CronBuilder":
        """Set specific minutes."""
        self._minute = _join(minutes)
        return self

    def every_n_minutes(self, n: int) -> "CronBuilder":
        """Run every n minutes."""
        self._minute = f"*/{n}"
        return self

    def at_hour(self, *hours: int) -> "CronBuilder":
        """Set specific hours."""
        self._hour = _join(hours)
        return self

    def every_n_hours(self, n: int) -> "CronBuilder":
        """Run every n hours."""
        self._hour = f"*/{n}"
        return self

    def between_hours(self, start: int, end: int) -> "CronBuilder":
        self._hour = f"{start}-{end}"
        return self

    def on_day(self, *days: int) -> "CronBuilder":
        """Set specific days of month."""
        self._day_of_month = _join(days)
        return self

    def in_month(self, *months: int) -> "CronBuilder":
        """Set specific months."""
        self._month = _join(months)
        return self

    def on_weekday(self, *weekdays: int) -> "CronBuilder":
        """Set specific weekdays (0=SUN, 6=SAT)."""
        self._day_of_week = _join(weekdays)
        return self

    def on_weekdays(self) -> "CronBuilder":
        """Run Monday through Friday."""
        self._day_of_week = "1-5"
        return self

    def on_weekends(self) -> "CronBuilder":
        """Run Saturday and Sunday."""
        self._day_of_week = "0,6"
        return self

    def every_day(self) -> "CronBuilder":
        """Run every day."""
        self._day_of_month = "*"
        self._day_of_week = "*"
        return self

    def in_year(self, *years: int) -> "CronBuilder":
        self._year = _join(years)
        return self

    def daily_at(self, hour: int, minute: int = 0) -> "CronBuilder":
        """Run daily at specific time."""
        self._minute = str(minute)
        self._hour = str(hour)
        return self

    def hourly_at(self, minute: int) -> "CronBuilder":
        """Run hourly at specific minute."""
        self._minute = str(minute)
        return self

    def field(self, field_type: FieldType, token: str) -> "CronBuilder":
        """Set a raw token for any field."""
        if field_type is FieldType.SECOND:
            self._include_seconds = True
        setattr(self, f"_{field_type.value}", token)
        return self

    @property
    def include_seconds(self) -> bool:
        return self._include_seconds

    def to_string(self) -> str:
        """Render the expression without validating it."""
        tokens = [
            self._minute,
            self._hour,
            self._day_of_month,
            self._month,
            self._day_of_week,
        ]
        if self._include_seconds:
            tokens.insert(0, self._second)
        if self._year:
            tokens.append(self._year)
        return " ".join(tokens)

    def build(self) -> CronExpression:
        """Build the cron expression.

        Raises:
            InvalidExpressionError: If the assembled expression is invalid.
        """
        return CronExpression.parse(self.to_string(), self._include_seconds)


def crontab_line(expression: CronExpression | str, command: str = "your-command-here") -> str:
    """Render a crontab entry for ``command``."""
    if isinstance(expression, CronExpression):
        return expression.to_crontab_line(command)
    return f"{' '.join(expression.split())} {command}"
