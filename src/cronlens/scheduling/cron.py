"""Cron expression parser, validator and point matcher.

This module turns a raw cron string into an immutable ``CronExpression`` and
a ``ValidationReport``. Parsing never stops at the first problem: every
field is expanded and every error is collected, so one report describes
everything wrong with an expression.

Design Principles:
    1. Immutable expressions: parse once, match and search many times
    2. Aggregated validation: errors are data, not control flow
    3. Standard day semantics: day-of-month and day-of-week are OR-ed
       when both are restricted
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Any, Iterator, NamedTuple

from cronlens.i18n import MessageCode, field_label, t
from cronlens.scheduling.errors import ArityError, InvalidExpressionError
from cronlens.scheduling.fields import (
    BASE_FIELD_ORDER,
    FIELD_CONSTRAINTS,
    FieldType,
    expand_field,
)

if TYPE_CHECKING:
    from cronlens.scheduling.builder import CronBuilder

logger = logging.getLogger(__name__)


# =============================================================================
# Validation Report
# =============================================================================


class IssueKind(Enum):
    """Categories of validation findings."""

    ARITY = "arity"
    FIELD_RANGE = "field_range"
    SEMANTIC = "semantic"


@dataclass(frozen=True)
class ValidationIssue:
    """A validation error tied to a field and its raw token.

    ``field`` is None for arity errors, which concern the whole expression.
    """

    kind: IssueKind
    field: str | None
    token: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "field": self.field,
            "token": self.token,
            "message": self.message,
        }


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal finding. The expression remains usable."""

    kind: IssueKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class ValidationReport:
    """Errors and warnings collected while parsing an expression."""

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationWarning, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_for(self, field_name: str) -> list[ValidationIssue]:
        """Errors reported against a single field."""
        return [e for e in self.errors if e.field == field_name]

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


# =============================================================================
# Cron Field
# =============================================================================


@dataclass(frozen=True)
class CronField:
    """One positional field of a parsed expression.

    Attributes:
        field_type: Which slot this field occupies.
        token: The raw substring from the expression.
        values: Ascending, de-duplicated values the token selects. Empty when
            the token failed validation.
        is_wildcard: True for ``*``, and for ``?`` in the day fields.
    """

    field_type: FieldType
    token: str
    values: tuple[int, ...]
    is_wildcard: bool = False

    @property
    def name(self) -> str:
        return self.field_type.value

    @property
    def min_value(self) -> int:
        return FIELD_CONSTRAINTS[self.field_type].min_value

    @property
    def max_value(self) -> int:
        return FIELD_CONSTRAINTS[self.field_type].max_value

    @cached_property
    def _value_set(self) -> frozenset[int]:
        return frozenset(self.values)

    def contains(self, value: int) -> bool:
        return value in self._value_set

    def __repr__(self) -> str:
        return f"CronField({self.field_type.name}, {self.token!r})"


# =============================================================================
# Cron Expression
# =============================================================================


class CronExpression:
    """Parsed cron expression.

    CronExpression is immutable. It can be used to:
    - Check if a datetime matches the expression
    - Find the next matching datetimes
    - Describe the schedule in words

    Example:
        >>> expr = CronExpression.parse("0 9 * * 1-5")
        >>> expr.matches(datetime(2024, 1, 15, 9, 0))  # True (Monday)
        >>> expr.next_n(3, after=datetime(2024, 1, 15, 9, 0))
        >>> expr.describe()
        'Weekdays at 9 AM'
    """

    __slots__ = (
        "_source",
        "_fields",
        "_include_seconds",
        "_report",
        "_field_map",
    )

    def __init__(
        self,
        source: str,
        fields: list[CronField] | tuple[CronField, ...],
        *,
        include_seconds: bool = False,
        report: ValidationReport | None = None,
    ) -> None:
        """Initialize cron expression.

        Args:
            source: Original expression string.
            fields: Parsed fields in slot order (six base fields, optional year).
            include_seconds: Whether the expression carries a seconds field.
            report: Validation report produced while parsing.
        """
        self._source = source
        self._fields = tuple(fields)
        self._include_seconds = include_seconds
        self._report = report or ValidationReport()
        self._field_map: dict[FieldType, CronField] = {
            f.field_type: f for f in self._fields
        }

    @classmethod
    def parse(cls, source: str, include_seconds: bool = False) -> "CronExpression":
        """Parse an expression, raising if it is invalid.

        Args:
            source: Cron expression string.
            include_seconds: Expect a leading seconds field.

        Returns:
            Parsed CronExpression.

        Raises:
            ArityError: If the expression has the wrong number of fields.
            InvalidExpressionError: If the report contains errors.
        """
        expression, report = parse(source, include_seconds)
        if expression is None:
            raise ArityError(
                "Invalid cron expression", source, report, token_count=len(source.split())
            )
        if not report.is_valid:
            raise InvalidExpressionError("Invalid cron expression", source, report)
        return expression

    @classmethod
    def builder(cls) -> "CronBuilder":
        """Create a cron expression builder."""
        from cronlens.scheduling.builder import CronBuilder

        return CronBuilder()

    @property
    def source(self) -> str:
        """Original expression string."""
        return self._source

    @property
    def normalized(self) -> str:
        """Field tokens joined by single spaces, as written by the caller."""
        tokens = [f.token for f in self._fields]
        if not self._include_seconds:
            tokens = tokens[1:]
        return " ".join(tokens)

    @property
    def fields(self) -> tuple[CronField, ...]:
        return self._fields

    @property
    def include_seconds(self) -> bool:
        return self._include_seconds

    @property
    def has_year(self) -> bool:
        return FieldType.YEAR in self._field_map

    @property
    def report(self) -> ValidationReport:
        return self._report

    @property
    def is_valid(self) -> bool:
        return self._report.is_valid

    def get_field(self, field_type: FieldType) -> CronField | None:
        """Get a specific field by type."""
        return self._field_map.get(field_type)

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime matches this expression.

        Raises:
            InvalidExpressionError: If the expression failed validation.
        """
        require_valid(self)
        fm = self._field_map

        if self._include_seconds and not fm[FieldType.SECOND].contains(dt.second):
            return False
        if not fm[FieldType.MINUTE].contains(dt.minute):
            return False
        if not fm[FieldType.HOUR].contains(dt.hour):
            return False
        if not fm[FieldType.MONTH].contains(dt.month):
            return False

        year = fm.get(FieldType.YEAR)
        if year is not None and not year.is_wildcard and not year.contains(dt.year):
            return False

        return self._day_matches(dt)

    def _day_matches(self, dt: datetime) -> bool:
        dom = self._field_map[FieldType.DAY_OF_MONTH]
        dow = self._field_map[FieldType.DAY_OF_WEEK]

        # Python weekday: Monday=0, Sunday=6
        # Cron weekday: Sunday=0, Saturday=6
        cron_weekday = (dt.weekday() + 1) % 7

        if dom.is_wildcard and dow.is_wildcard:
            return True
        if dom.is_wildcard:
            return dow.contains(cron_weekday)
        if dow.is_wildcard:
            return dom.contains(dt.day)
        # Both restricted: either one is enough
        return dom.contains(dt.day) or dow.contains(cron_weekday)

    def next(self, after: datetime | None = None, **kwargs: Any) -> datetime | None:
        """Get the next matching datetime after ``after`` (default: now)."""
        found = self.next_n(1, after, **kwargs)
        return found[0] if found else None

    def next_n(self, n: int, after: datetime | None = None, **kwargs: Any) -> list[datetime]:
        """Get up to ``n`` next matching datetimes.

        Keyword arguments are passed to ``next_occurrences``.
        """
        from cronlens.scheduling.search import next_occurrences

        if after is None:
            after = datetime.now()
        return next_occurrences(self, after, n, **kwargs)

    def iter(
        self,
        after: datetime | None = None,
        *,
        max_iterations: int = 1000,
        fast_fail_window: timedelta | None = timedelta(hours=24),
    ) -> Iterator[datetime]:
        """Lazily iterate over matching datetimes within the search budget."""
        from cronlens.scheduling.search import iter_occurrences

        if after is None:
            after = datetime.now()
        return iter_occurrences(
            self,
            after,
            max_iterations=max_iterations,
            fast_fail_window=fast_fail_window,
        )

    def describe(self, locale: str | None = None) -> str:
        """Describe the schedule in words."""
        from cronlens.scheduling.describe import describe

        return describe(self, locale=locale)

    def to_crontab_line(self, command: str = "your-command-here") -> str:
        """Render a crontab entry running ``command`` on this schedule.

        Seconds-mode expressions keep their seconds field, so the line has six
        schedule fields. Standard crontab rejects such lines; they are meant
        for schedulers that accept a seconds field.
        """
        return f"{self.normalized} {command}"

    def __repr__(self) -> str:
        return f"CronExpression({self._source!r})"

    def __str__(self) -> str:
        return self.normalized

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CronExpression):
            return (
                self.normalized == other.normalized
                and self._include_seconds == other._include_seconds
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.normalized, self._include_seconds))


# =============================================================================
# Parser
# =============================================================================


class ParseResult(NamedTuple):
    """Outcome of ``parse``.

    ``expression`` is None when the field count is wrong; otherwise it is
    always present, even if the report carries field errors.
    """

    expression: CronExpression | None
    report: ValidationReport

    @property
    def is_valid(self) -> bool:
        return self.expression is not None and self.report.is_valid


def parse(
    source: str,
    include_seconds: bool = False,
    *,
    locale: str | None = None,
) -> ParseResult:
    """Parse and validate a cron expression.

    Args:
        source: Expression string, fields separated by whitespace.
        include_seconds: Expect six fields (seconds first) instead of five.
            A trailing year field is optional in both modes.
        locale: Locale for report messages.

    Returns:
        ParseResult of the expression and its validation report.
    """
    tokens = source.split()
    expected = 6 if include_seconds else 5

    if len(tokens) not in (expected, expected + 1):
        issue = ValidationIssue(
            kind=IssueKind.ARITY,
            field=None,
            token=source.strip(),
            message=t(
                MessageCode.ARITY_MISMATCH, locale, expected=expected, actual=len(tokens)
            ),
        )
        logger.debug("Rejected %r: %d fields, expected %d", source, len(tokens), expected)
        return ParseResult(None, ValidationReport(errors=(issue,)))

    if not include_seconds:
        tokens = ["0", *tokens]

    slots = list(zip(BASE_FIELD_ORDER, tokens))
    if len(tokens) == 7:
        slots.append((FieldType.YEAR, tokens[6]))

    fields: list[CronField] = []
    errors: list[ValidationIssue] = []
    for field_type, token in slots:
        cron_field, issue = _parse_field(field_type, token, locale)
        fields.append(cron_field)
        if issue is not None:
            errors.append(issue)

    warnings: list[ValidationWarning] = []
    dom = fields[3]
    dow = fields[5]
    if not dom.is_wildcard and not dow.is_wildcard:
        warnings.append(
            ValidationWarning(IssueKind.SEMANTIC, t(MessageCode.WARNING_DAY_FIELDS, locale))
        )

    report = ValidationReport(errors=tuple(errors), warnings=tuple(warnings))
    logger.debug(
        "Parsed %r: %d error(s), %d warning(s)", source, len(errors), len(warnings)
    )
    expression = CronExpression(
        source, fields, include_seconds=include_seconds, report=report
    )
    return ParseResult(expression, report)


def _parse_field(
    field_type: FieldType,
    token: str,
    locale: str | None,
) -> tuple[CronField, ValidationIssue | None]:
    constraints = FIELD_CONSTRAINTS[field_type]
    full_range = tuple(range(constraints.min_value, constraints.max_value + 1))

    if token == "*":
        return CronField(field_type, token, full_range, is_wildcard=True), None

    if token == "?":
        if constraints.allows_question:
            return CronField(field_type, token, full_range, is_wildcard=True), None
        reason = t(MessageCode.FIELD_QUESTION_NOT_ALLOWED, locale)
        return CronField(field_type, token, ()), _field_issue(field_type, token, reason, locale)

    expansion = expand_field(token, constraints.min_value, constraints.accepted_max)
    if not expansion.ok:
        reason = (
            t(expansion.code, locale, **expansion.params)
            if expansion.code is not None
            else expansion.error or ""
        )
        return CronField(field_type, token, ()), _field_issue(field_type, token, reason, locale)

    return CronField(field_type, token, constraints.normalize(expansion.values)), None


def _field_issue(
    field_type: FieldType,
    token: str,
    reason: str,
    locale: str | None,
) -> ValidationIssue:
    message = t(
        MessageCode.FIELD_INVALID,
        locale,
        label=field_label(field_type.value, locale),
        token=token,
        reason=reason,
    )
    return ValidationIssue(IssueKind.FIELD_RANGE, field_type.value, token, message)


# =============================================================================
# Module-level helpers
# =============================================================================


def matches(expr: CronExpression, instant: datetime) -> bool:
    """Check whether ``instant`` satisfies a validated expression."""
    return expr.matches(instant)


def require_valid(expr: CronExpression) -> None:
    """Raise InvalidExpressionError unless ``expr`` passed validation."""
    if not expr.is_valid:
        raise InvalidExpressionError(
            "Expression failed validation", expr.source, expr.report
        )


def validate_expression(
    source: str,
    include_seconds: bool = False,
    *,
    locale: str | None = None,
) -> ValidationReport:
    """Validate a cron expression.

    Returns:
        The validation report (no errors means valid).
    """
    return parse(source, include_seconds, locale=locale).report


def is_valid_expression(source: str, include_seconds: bool = False) -> bool:
    """Check if a cron expression is valid."""
    return parse(source, include_seconds).is_valid
