"""Cron field definitions and the field expander.

The expander turns one field token (``*/15``, ``1-5``, ``0,30``...) into the
ascending, de-duplicated tuple of integers it denotes within the field's
bounds.

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * / , -
    Minute        0-59            * / , -
    Hour          0-23            * / , -
    Day of Month  1-31            * / , - ?
    Month         1-12            * / , -
    Day of Week   0-7 (7 = SUN)   * / , - ?
    Year          1970-2099       * / , -

Steps over ``*`` or a range keep the values whose offset from the field
minimum is a multiple of the step, so ``*/5`` on minutes yields 0, 5, 10, ...
and ``*/2`` on days of the month yields 1, 3, 5, ... A single start value
steps from itself: ``5/10`` on minutes yields 5, 15, 25, ...
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, NoReturn

from cronlens.i18n import MessageCode, t
from cronlens.scheduling.errors import FieldRangeError


# =============================================================================
# Field Types
# =============================================================================


class FieldType(Enum):
    """Positional slots of a cron expression."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "day_of_month"
    MONTH = "month"
    DAY_OF_WEEK = "day_of_week"
    YEAR = "year"


@dataclass(frozen=True)
class FieldConstraints:
    """Bounds and accepted extras for a cron field."""

    min_value: int
    max_value: int
    aliases: Mapping[int, int] = field(default_factory=dict)
    allows_question: bool = False

    @property
    def accepted_max(self) -> int:
        """Largest literal accepted in a token, aliases included."""
        return max([self.max_value, *self.aliases])

    def normalize(self, values: Iterable[int]) -> tuple[int, ...]:
        """Map aliased values to their canonical value, sorted and unique."""
        return tuple(sorted({self.aliases.get(v, v) for v in values}))


FIELD_CONSTRAINTS: dict[FieldType, FieldConstraints] = {
    FieldType.SECOND: FieldConstraints(0, 59),
    FieldType.MINUTE: FieldConstraints(0, 59),
    FieldType.HOUR: FieldConstraints(0, 23),
    FieldType.DAY_OF_MONTH: FieldConstraints(1, 31, allows_question=True),
    FieldType.MONTH: FieldConstraints(1, 12),
    FieldType.DAY_OF_WEEK: FieldConstraints(0, 6, aliases={7: 0}, allows_question=True),
    FieldType.YEAR: FieldConstraints(1970, 2099),
}

# Slot order of the six base fields; the optional year always follows.
BASE_FIELD_ORDER: tuple[FieldType, ...] = (
    FieldType.SECOND,
    FieldType.MINUTE,
    FieldType.HOUR,
    FieldType.DAY_OF_MONTH,
    FieldType.MONTH,
    FieldType.DAY_OF_WEEK,
)


# =============================================================================
# Expansion Result
# =============================================================================


@dataclass(frozen=True)
class FieldExpansion:
    """Outcome of expanding one token.

    On failure ``values`` is empty and ``error`` describes the problem;
    ``code`` and ``params`` allow re-rendering the message in another locale.
    """

    values: tuple[int, ...]
    error: str | None = None
    code: MessageCode | None = None
    params: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


# =============================================================================
# Expander
# =============================================================================


_NUMBER = re.compile(r"[0-9]+")


def expand_field(token: str, min_value: int, max_value: int) -> FieldExpansion:
    """Expand a field token into the values it selects.

    Args:
        token: Field token such as ``*``, ``5``, ``1-5``, ``*/15`` or ``0,30``.
        min_value: Smallest value of the field.
        max_value: Largest value of the field.

    Returns:
        A FieldExpansion; ``values`` is empty and ``error`` set when the token
        is malformed or out of bounds.
    """
    try:
        values = _expand(token, min_value, max_value)
    except FieldRangeError as e:
        return FieldExpansion((), e.message, e.code, e.params)
    return FieldExpansion(values)


def _expand(token: str, lo: int, hi: int) -> tuple[int, ...]:
    if token == "*":
        return tuple(range(lo, hi + 1))

    parts = token.split(",")
    values: set[int] = set()
    for part in parts:
        if not part:
            _fail(MessageCode.FIELD_EMPTY_TOKEN, token)
        values.update(_expand_part(part, lo, hi))
    return tuple(sorted(values))


def _expand_part(part: str, lo: int, hi: int) -> list[int]:
    """Expand a single list element.

    A list element never contains another list, so a comma here means the
    caller handed back the whole list and is rejected instead of expanded.
    """
    if "," in part:
        _fail(MessageCode.FIELD_RECURSIVE, part)
    if part == "*":
        return list(range(lo, hi + 1))
    if "/" in part:
        return _expand_step(part, lo, hi)
    if "-" in part:
        return _expand_range(part, lo, hi)
    return [_parse_number(part, part, lo, hi)]


def _expand_step(part: str, lo: int, hi: int) -> list[int]:
    pieces = part.split("/")
    if len(pieces) != 2 or not pieces[0]:
        _fail(MessageCode.FIELD_MALFORMED, part)

    base, step_text = pieces
    if not _NUMBER.fullmatch(step_text) or int(step_text) <= 0:
        _fail(MessageCode.FIELD_BAD_STEP, part)
    step = int(step_text)

    # Ranges step from the field minimum; a single start value steps from itself.
    anchor = lo
    if base == "*":
        candidates = range(lo, hi + 1)
    elif "-" in base:
        candidates = _expand_range(base, lo, hi)
    else:
        anchor = _parse_number(base, part, lo, hi)
        candidates = range(anchor, hi + 1)

    values = [v for v in candidates if (v - anchor) % step == 0]
    if not values:
        _fail(MessageCode.FIELD_SELECTS_NOTHING, part, min=lo, max=hi)
    return values


def _expand_range(part: str, lo: int, hi: int) -> list[int]:
    pieces = part.split("-")
    if len(pieces) != 2:
        _fail(MessageCode.FIELD_MALFORMED, part)

    start = _parse_number(pieces[0], part, lo, hi)
    end = _parse_number(pieces[1], part, lo, hi)
    if start > end:
        _fail(MessageCode.FIELD_REVERSED_RANGE, part)
    return list(range(start, end + 1))


def _parse_number(text: str, token: str, lo: int, hi: int) -> int:
    if not text:
        _fail(MessageCode.FIELD_MALFORMED, token)
    if not _NUMBER.fullmatch(text):
        _fail(MessageCode.FIELD_NOT_NUMBER, text)
    value = int(text)
    if value < lo or value > hi:
        _fail(MessageCode.FIELD_OUT_OF_RANGE, token, value=value, min=lo, max=hi)
    return value


def _fail(code: MessageCode, token: str, **params: Any) -> NoReturn:
    params["token"] = token
    raise FieldRangeError(t(code, **params), token=token, code=code, params=params)
