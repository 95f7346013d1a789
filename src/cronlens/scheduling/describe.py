"""Natural-language descriptions of cron expressions.

A small table of idiomatic expressions maps straight to a canned phrase.
Anything else is described field by field (second, minute, hour,
day-of-month, month, day-of-week, then year), skipping wildcards.

Example:
    >>> describe(CronExpression.parse("* * * * *"))
    'Every minute'
    >>> describe(CronExpression.parse("30 9-17 * * 1-5"))
    'Executes at minute 30, at hours 9 through 17, on weekdays'
    >>> describe(CronExpression.parse("30 9-17 * * 1-5"), locale="zh")
    '在第30分钟，在9点到17点，在工作日执行'
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from cronlens.i18n import (
    MessageCode,
    format_value,
    normalize_locale,
    step_unit,
    t,
)
from cronlens.scheduling.cron import CronExpression, CronField, parse, require_valid
from cronlens.scheduling.fields import FieldType


# =============================================================================
# Canned Phrases
# =============================================================================


COMMON_EXPRESSIONS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "en": MappingProxyType({
        "* * * * *": "Every minute",
        "0 * * * *": "Every hour, on the hour",
        "0 0 * * *": "Every day at midnight",
        "0 0 * * 1-5": "Every weekday at midnight",
        "0 0 1 * *": "At midnight on the 1st of every month",
        "*/5 * * * *": "Every 5 minutes",
        "0 */2 * * *": "Every 2 hours",
        "0 0 * * 0": "Every Sunday at midnight",
        "0 9 * * 1-5": "Weekdays at 9 AM",
    }),
    "zh": MappingProxyType({
        "* * * * *": "每分钟执行",
        "0 * * * *": "每小时执行（整点）",
        "0 0 * * *": "每天凌晨执行",
        "0 0 * * 1-5": "每工作日凌晨执行",
        "0 0 1 * *": "每月1号凌晨执行",
        "*/5 * * * *": "每5分钟执行",
        "0 */2 * * *": "每2小时执行",
        "0 0 * * 0": "每周日凌晨执行",
        "0 9 * * 1-5": "工作日上午9点执行",
    }),
})

_WEEKDAYS_TOKEN = "1-5"

_VALUE_CODES: dict[FieldType, tuple[MessageCode, MessageCode]] = {
    FieldType.SECOND: (MessageCode.DESC_SECOND_ONE, MessageCode.DESC_SECOND_MANY),
    FieldType.MINUTE: (MessageCode.DESC_MINUTE_ONE, MessageCode.DESC_MINUTE_MANY),
    FieldType.HOUR: (MessageCode.DESC_HOUR_ONE, MessageCode.DESC_HOUR_MANY),
    FieldType.DAY_OF_MONTH: (
        MessageCode.DESC_DAY_OF_MONTH_ONE,
        MessageCode.DESC_DAY_OF_MONTH_MANY,
    ),
    FieldType.MONTH: (MessageCode.DESC_MONTH, MessageCode.DESC_MONTH),
    FieldType.DAY_OF_WEEK: (MessageCode.DESC_DAY_OF_WEEK, MessageCode.DESC_DAY_OF_WEEK),
    FieldType.YEAR: (MessageCode.DESC_YEAR, MessageCode.DESC_YEAR),
}


def lookup_key(expr: CronExpression) -> str | None:
    """Key used against the canned-phrase table.

    Tokens are joined by single spaces with ``?`` read as ``*``. In seconds
    mode a ``0`` seconds field is dropped so the five-field forms still
    match. Expressions restricted to particular years are never canned.
    """
    year = expr.get_field(FieldType.YEAR)
    if year is not None and not year.is_wildcard:
        return None

    tokens = ["*" if f.token == "?" else f.token for f in expr.fields[:6]]
    if expr.include_seconds and tokens[0] != "0":
        return None
    return " ".join(tokens[1:])


def canned_phrase(expr: CronExpression, locale: str | None = None) -> str | None:
    key = lookup_key(expr)
    if key is None:
        return None
    return COMMON_EXPRESSIONS[normalize_locale(locale)].get(key)


# =============================================================================
# Composition
# =============================================================================


def describe(expr: CronExpression, *, locale: str | None = None) -> str:
    """Describe a validated expression in words.

    Args:
        expr: Expression with no validation errors.
        locale: Output locale (``en`` or ``zh``; others fall back to ``en``).

    Raises:
        InvalidExpressionError: If the expression failed validation.
    """
    require_valid(expr)
    locale = normalize_locale(locale)

    phrase = canned_phrase(expr, locale)
    if phrase is not None:
        return phrase

    fragments = []
    for cron_field in expr.fields:
        if cron_field.field_type is FieldType.SECOND and not expr.include_seconds:
            continue
        if cron_field.is_wildcard:
            continue
        fragments.append(_describe_field(cron_field, locale))

    if not fragments:
        every = (
            MessageCode.DESC_EVERY_SECOND
            if expr.include_seconds
            else MessageCode.DESC_EVERY_MINUTE
        )
        fragments.append(t(every, locale))

    body = t(MessageCode.DESC_CONNECTOR, locale).join(fragments)
    return t(MessageCode.DESC_TEMPLATE, locale, body=body)


def describe_source(
    source: str,
    include_seconds: bool = False,
    *,
    locale: str | None = None,
) -> str:
    """Parse and describe, substituting the invalid-expression phrase on errors."""
    expression, report = parse(source, include_seconds, locale=locale)
    if expression is None or not report.is_valid:
        return t(MessageCode.INVALID_EXPRESSION, locale)
    return describe(expression, locale=locale)


def _describe_field(cron_field: CronField, locale: str) -> str:
    field_type = cron_field.field_type
    parts = cron_field.token.split(",")

    if len(parts) == 1 and "/" in parts[0]:
        return _describe_step(cron_field, parts[0], locale)

    if field_type is FieldType.DAY_OF_WEEK and cron_field.token == _WEEKDAYS_TOKEN:
        return t(MessageCode.DESC_WEEKDAYS, locale)

    items = [_describe_part(cron_field, part, locale) for part in parts]
    single = len(parts) == 1 and "-" not in parts[0] and parts[0] != "*"
    one, many = _VALUE_CODES[field_type]
    return t(one if single else many, locale, values=_join_items(items, locale))


def _describe_part(cron_field: CronField, part: str, locale: str) -> str:
    name = cron_field.name
    if "/" in part:
        return _describe_step(cron_field, part, locale)
    if part == "*":
        return t(
            MessageCode.DESC_RANGE,
            locale,
            start=format_value(name, cron_field.min_value, locale),
            end=format_value(name, cron_field.max_value, locale),
        )
    if "-" in part:
        start, end = part.split("-")
        return t(
            MessageCode.DESC_RANGE,
            locale,
            start=format_value(name, int(start), locale),
            end=format_value(name, int(end), locale),
        )
    return format_value(name, int(part), locale)


def _describe_step(cron_field: CronField, part: str, locale: str) -> str:
    name = cron_field.name
    base, step = part.split("/")
    unit = step_unit(name, locale)

    if base == "*":
        return t(MessageCode.DESC_STEP, locale, step=step, unit=unit)
    if "-" in base:
        start, end = base.split("-")
        return t(
            MessageCode.DESC_STEP_RANGE,
            locale,
            step=step,
            unit=unit,
            start=format_value(name, int(start), locale),
            end=format_value(name, int(end), locale),
        )
    return t(
        MessageCode.DESC_STEP_FROM,
        locale,
        step=step,
        unit=unit,
        start=format_value(name, int(base), locale),
    )


def _join_items(items: list[str], locale: str) -> str:
    if len(items) == 1:
        return items[0]
    separator = t(MessageCode.DESC_LIST_SEPARATOR, locale)
    last = t(MessageCode.DESC_LIST_LAST_SEPARATOR, locale)
    return separator.join(items[:-1]) + last + items[-1]
