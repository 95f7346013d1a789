"""Message catalogs for validation messages and schedule descriptions.

Every user-facing string the engine produces is looked up here by
``MessageCode``. Catalogs exist for English and Simplified Chinese; lookups
for any other locale fall back to English.

Example:
    >>> from cronlens.i18n import MessageCode, t
    >>> t(MessageCode.INVALID_EXPRESSION, locale="zh")
    '表达式无效'
    >>> t(MessageCode.FIELD_NOT_NUMBER, token="x")
    "'x' is not a number"
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


# =============================================================================
# Message Codes
# =============================================================================


class MessageCode(str, Enum):
    """Codes for every localized message.

    Format: CATEGORY_DESCRIPTION

    Categories:
    - ARITY / FIELD: validation errors
    - WARNING: non-fatal validation findings
    - DESC: description fragments and templates
    """

    # Validation errors
    ARITY_MISMATCH = "arity.mismatch"
    FIELD_INVALID = "field.invalid"
    FIELD_EMPTY_TOKEN = "field.empty_token"
    FIELD_RECURSIVE = "field.recursive"
    FIELD_NOT_NUMBER = "field.not_number"
    FIELD_OUT_OF_RANGE = "field.out_of_range"
    FIELD_REVERSED_RANGE = "field.reversed_range"
    FIELD_BAD_STEP = "field.bad_step"
    FIELD_SELECTS_NOTHING = "field.selects_nothing"
    FIELD_QUESTION_NOT_ALLOWED = "field.question_not_allowed"
    FIELD_MALFORMED = "field.malformed"

    # Warnings
    WARNING_DAY_FIELDS = "warning.day_fields"

    # Descriptions
    INVALID_EXPRESSION = "desc.invalid"
    NO_NEXT_RUN = "desc.no_next_run"
    CRONTAB_SECONDS = "desc.crontab_seconds"
    DESC_TEMPLATE = "desc.template"
    DESC_CONNECTOR = "desc.connector"
    DESC_LIST_SEPARATOR = "desc.list_separator"
    DESC_LIST_LAST_SEPARATOR = "desc.list_last_separator"
    DESC_RANGE = "desc.range"
    DESC_EVERY_SECOND = "desc.every_second"
    DESC_EVERY_MINUTE = "desc.every_minute"
    DESC_WEEKDAYS = "desc.weekdays"
    DESC_STEP = "desc.step"
    DESC_STEP_RANGE = "desc.step_range"
    DESC_STEP_FROM = "desc.step_from"
    DESC_SECOND_ONE = "desc.second.one"
    DESC_SECOND_MANY = "desc.second.many"
    DESC_MINUTE_ONE = "desc.minute.one"
    DESC_MINUTE_MANY = "desc.minute.many"
    DESC_HOUR_ONE = "desc.hour.one"
    DESC_HOUR_MANY = "desc.hour.many"
    DESC_DAY_OF_MONTH_ONE = "desc.day_of_month.one"
    DESC_DAY_OF_MONTH_MANY = "desc.day_of_month.many"
    DESC_MONTH = "desc.month"
    DESC_DAY_OF_WEEK = "desc.day_of_week"
    DESC_YEAR = "desc.year"


# =============================================================================
# Catalogs
# =============================================================================


_EN: dict[str, str] = {
    MessageCode.ARITY_MISMATCH: (
        "Expected {expected} fields (plus an optional year), got {actual}"
    ),
    MessageCode.FIELD_INVALID: "{label} field '{token}' is invalid: {reason}",
    MessageCode.FIELD_EMPTY_TOKEN: "empty list element in '{token}'",
    MessageCode.FIELD_RECURSIVE: "list element '{token}' repeats the whole list",
    MessageCode.FIELD_NOT_NUMBER: "'{token}' is not a number",
    MessageCode.FIELD_OUT_OF_RANGE: "value {value} is outside {min}-{max}",
    MessageCode.FIELD_REVERSED_RANGE: "range '{token}' starts after it ends",
    MessageCode.FIELD_BAD_STEP: "step in '{token}' must be a positive integer",
    MessageCode.FIELD_SELECTS_NOTHING: "'{token}' selects no values in {min}-{max}",
    MessageCode.FIELD_QUESTION_NOT_ALLOWED: "'?' is only allowed in the day fields",
    MessageCode.FIELD_MALFORMED: "unrecognized syntax '{token}'",
    MessageCode.WARNING_DAY_FIELDS: (
        "Both day-of-month and day-of-week are restricted: the schedule runs "
        "when either one matches, not only when both do"
    ),
    MessageCode.INVALID_EXPRESSION: "Invalid expression",
    MessageCode.NO_NEXT_RUN: "No next run found",
    MessageCode.CRONTAB_SECONDS: "Standard crontab has no seconds field; this line needs a scheduler that accepts six fields",
    MessageCode.DESC_TEMPLATE: "Executes {body}",
    MessageCode.DESC_CONNECTOR: ", ",
    MessageCode.DESC_LIST_SEPARATOR: ", ",
    MessageCode.DESC_LIST_LAST_SEPARATOR: " and ",
    MessageCode.DESC_RANGE: "{start} through {end}",
    MessageCode.DESC_EVERY_SECOND: "every second",
    MessageCode.DESC_EVERY_MINUTE: "every minute",
    MessageCode.DESC_WEEKDAYS: "on weekdays",
    MessageCode.DESC_STEP: "every {step} {unit}",
    MessageCode.DESC_STEP_RANGE: "every {step} {unit} from {start} through {end}",
    MessageCode.DESC_STEP_FROM: "every {step} {unit} starting at {start}",
    MessageCode.DESC_SECOND_ONE: "at second {values}",
    MessageCode.DESC_SECOND_MANY: "at seconds {values}",
    MessageCode.DESC_MINUTE_ONE: "at minute {values}",
    MessageCode.DESC_MINUTE_MANY: "at minutes {values}",
    MessageCode.DESC_HOUR_ONE: "at hour {values}",
    MessageCode.DESC_HOUR_MANY: "at hours {values}",
    MessageCode.DESC_DAY_OF_MONTH_ONE: "on day {values} of the month",
    MessageCode.DESC_DAY_OF_MONTH_MANY: "on days {values} of the month",
    MessageCode.DESC_MONTH: "in {values}",
    MessageCode.DESC_DAY_OF_WEEK: "on {values}",
    MessageCode.DESC_YEAR: "in {values}",
}

_ZH: dict[str, str] = {
    MessageCode.ARITY_MISMATCH: "表达式应包含{expected}个部分（年份可选），当前为{actual}个",
    MessageCode.FIELD_INVALID: "{label}字段\"{token}\"无效：{reason}",
    MessageCode.FIELD_EMPTY_TOKEN: "\"{token}\"中存在空的列表项",
    MessageCode.FIELD_RECURSIVE: "列表项\"{token}\"与整个列表相同",
    MessageCode.FIELD_NOT_NUMBER: "\"{token}\"不是数字",
    MessageCode.FIELD_OUT_OF_RANGE: "数值{value}超出范围{min}-{max}",
    MessageCode.FIELD_REVERSED_RANGE: "范围\"{token}\"的起点大于终点",
    MessageCode.FIELD_BAD_STEP: "\"{token}\"的步长必须是正整数",
    MessageCode.FIELD_SELECTS_NOTHING: "\"{token}\"在{min}-{max}范围内没有可选值",
    MessageCode.FIELD_QUESTION_NOT_ALLOWED: "\"?\"只能用于日期或星期字段",
    MessageCode.FIELD_MALFORMED: "无法识别的语法\"{token}\"",
    MessageCode.WARNING_DAY_FIELDS: "同时指定日期和星期：任一条件满足即执行，而不是两者同时满足",
    MessageCode.INVALID_EXPRESSION: "表达式无效",
    MessageCode.NO_NEXT_RUN: "未找到下次执行时间",
    MessageCode.CRONTAB_SECONDS: "标准 crontab 不支持秒字段，此行需要支持六个字段的调度器",
    MessageCode.DESC_TEMPLATE: "{body}执行",
    MessageCode.DESC_CONNECTOR: "，",
    MessageCode.DESC_LIST_SEPARATOR: "、",
    MessageCode.DESC_LIST_LAST_SEPARATOR: "、",
    MessageCode.DESC_RANGE: "{start}到{end}",
    MessageCode.DESC_EVERY_SECOND: "每秒",
    MessageCode.DESC_EVERY_MINUTE: "每分钟",
    MessageCode.DESC_WEEKDAYS: "在工作日",
    MessageCode.DESC_STEP: "每{step}{unit}",
    MessageCode.DESC_STEP_RANGE: "从{start}到{end}每{step}{unit}",
    MessageCode.DESC_STEP_FROM: "从{start}开始每{step}{unit}",
    MessageCode.DESC_SECOND_ONE: "在第{values}秒",
    MessageCode.DESC_SECOND_MANY: "在第{values}秒",
    MessageCode.DESC_MINUTE_ONE: "在第{values}分钟",
    MessageCode.DESC_MINUTE_MANY: "在第{values}分钟",
    MessageCode.DESC_HOUR_ONE: "在{values}",
    MessageCode.DESC_HOUR_MANY: "在{values}",
    MessageCode.DESC_DAY_OF_MONTH_ONE: "在{values}",
    MessageCode.DESC_DAY_OF_MONTH_MANY: "在{values}",
    MessageCode.DESC_MONTH: "在{values}",
    MessageCode.DESC_DAY_OF_WEEK: "在{values}",
    MessageCode.DESC_YEAR: "在{values}",
}

CATALOGS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "en": MappingProxyType(_EN),
    "zh": MappingProxyType(_ZH),
})

SUPPORTED_LOCALES: tuple[str, ...] = tuple(CATALOGS)


# Field labels, step units and value formats per locale.

_FIELD_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "second": "Second",
        "minute": "Minute",
        "hour": "Hour",
        "day_of_month": "Day-of-month",
        "month": "Month",
        "day_of_week": "Day-of-week",
        "year": "Year",
    },
    "zh": {
        "second": "秒",
        "minute": "分钟",
        "hour": "小时",
        "day_of_month": "日期",
        "month": "月份",
        "day_of_week": "星期",
        "year": "年份",
    },
}

_STEP_UNITS: dict[str, dict[str, str]] = {
    "en": {
        "second": "seconds",
        "minute": "minutes",
        "hour": "hours",
        "day_of_month": "days",
        "month": "months",
        "day_of_week": "days of the week",
        "year": "years",
    },
    "zh": {
        "second": "秒",
        "minute": "分钟",
        "hour": "小时",
        "day_of_month": "天",
        "month": "个月",
        "day_of_week": "天",
        "year": "年",
    },
}

_WEEKDAYS: dict[str, tuple[str, ...]] = {
    "en": ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
    "zh": ("周日", "周一", "周二", "周三", "周四", "周五", "周六"),
}

_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    "zh": tuple(f"{m}月" for m in range(1, 13)),
}

# Suffixes appended to plain numbers when rendering values in a description.
_VALUE_SUFFIXES: dict[str, dict[str, str]] = {
    "zh": {"hour": "点", "day_of_month": "号", "year": "年"},
}


# =============================================================================
# Lookup
# =============================================================================


def normalize_locale(locale: str | None) -> str:
    """Reduce a locale tag to a supported catalog key.

    ``"zh_CN"``, ``"zh-Hans"`` and ``"ZH"`` all resolve to ``"zh"``.
    Unsupported locales resolve to the default locale.
    """
    if not locale:
        return DEFAULT_LOCALE
    language = locale.replace("-", "_").split("_")[0].lower()
    if language in CATALOGS:
        return language
    logger.debug("Unsupported locale %r, falling back to %s", locale, DEFAULT_LOCALE)
    return DEFAULT_LOCALE


def t(code: MessageCode, locale: str | None = None, **params: Any) -> str:
    """Translate a message code.

    Args:
        code: Message to look up.
        locale: Locale tag; unsupported or missing tags use English.
        **params: Placeholder values.

    Returns:
        The formatted message.
    """
    catalog = CATALOGS[normalize_locale(locale)]
    template = catalog.get(code) or CATALOGS[DEFAULT_LOCALE][code]
    return template.format(**params) if params else template


def field_label(field_name: str, locale: str | None = None) -> str:
    return _FIELD_LABELS[normalize_locale(locale)].get(field_name, field_name)


def step_unit(field_name: str, locale: str | None = None) -> str:
    return _STEP_UNITS[normalize_locale(locale)][field_name]


def weekday_name(value: int, locale: str | None = None) -> str:
    """Name of a cron weekday (0 = Sunday)."""
    return _WEEKDAYS[normalize_locale(locale)][value % 7]


def month_name(value: int, locale: str | None = None) -> str:
    """Name of a month (1 = January)."""
    return _MONTHS[normalize_locale(locale)][value - 1]


def format_value(field_name: str, value: int, locale: str | None = None) -> str:
    """Render a single field value the way descriptions display it."""
    locale = normalize_locale(locale)
    if field_name == "day_of_week":
        return weekday_name(value, locale)
    if field_name == "month":
        return month_name(value, locale)
    suffix = _VALUE_SUFFIXES.get(locale, {}).get(field_name, "")
    return f"{value}{suffix}"
