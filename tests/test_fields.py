"""Tests for the cron field expander and field constraints."""

import pytest

from cronlens.i18n import MessageCode
from cronlens.scheduling import (
    FIELD_CONSTRAINTS,
    FieldExpansion,
    FieldType,
    expand_field,
)
from cronlens.scheduling.errors import FieldRangeError
from cronlens.scheduling.fields import _expand_part


# =============================================================================
# FieldConstraints Tests
# =============================================================================


class TestFieldConstraints:
    """Tests for per-field bounds."""

    @pytest.mark.parametrize(
        "field_type,lo,hi",
        [
            (FieldType.SECOND, 0, 59),
            (FieldType.MINUTE, 0, 59),
            (FieldType.HOUR, 0, 23),
            (FieldType.DAY_OF_MONTH, 1, 31),
            (FieldType.MONTH, 1, 12),
            (FieldType.DAY_OF_WEEK, 0, 6),
            (FieldType.YEAR, 1970, 2099),
        ],
    )
    def test_bounds(self, field_type, lo, hi):
        c = FIELD_CONSTRAINTS[field_type]
        assert (c.min_value, c.max_value) == (lo, hi)

    def test_day_of_week_accepts_seven(self):
        c = FIELD_CONSTRAINTS[FieldType.DAY_OF_WEEK]
        assert c.accepted_max == 7
        assert c.normalize([7, 1, 0]) == (0, 1)

    def test_question_mark_only_in_day_fields(self):
        allowed = {t for t, c in FIELD_CONSTRAINTS.items() if c.allows_question}
        assert allowed == {FieldType.DAY_OF_MONTH, FieldType.DAY_OF_WEEK}


# =============================================================================
# Expansion Tests
# =============================================================================


class TestExpandField:
    """Tests for successful expansion."""

    def test_wildcard_is_complete(self):
        assert expand_field("*", 0, 59).values == tuple(range(60))
        assert expand_field("*", 1, 31).values == tuple(range(1, 32))

    def test_single_value(self):
        assert expand_field("5", 0, 59).values == (5,)

    def test_range_inclusive(self):
        assert expand_field("1-5", 0, 6).values == (1, 2, 3, 4, 5)

    def test_single_value_range(self):
        assert expand_field("3-3", 0, 59).values == (3,)

    def test_step_from_wildcard(self):
        assert expand_field("*/15", 0, 59).values == (0, 15, 30, 45)

    def test_step_anchored_at_field_minimum(self):
        """Day of month starts at 1, so */2 selects odd days."""
        values = expand_field("*/2", 1, 31).values
        assert values[:3] == (1, 3, 5)
        assert values[-1] == 31

    def test_step_over_range(self):
        assert expand_field("1-10/3", 1, 31).values == (1, 4, 7, 10)

    def test_step_from_single_value(self):
        assert expand_field("30/15", 0, 59).values == (30, 45)

    def test_step_from_unaligned_start(self):
        """A start value that is not a multiple of the step is kept."""
        assert expand_field("5/10", 0, 59).values == (5, 15, 25, 35, 45, 55)
        assert expand_field("2/5", 1, 31).values == (2, 7, 12, 17, 22, 27)

    def test_range_step_stays_anchored_at_minimum(self):
        assert expand_field("5-30/10", 0, 59).values == (10, 20, 30)

    def test_list_sorted_and_deduplicated(self):
        assert expand_field("5,1,3,1", 0, 59).values == (1, 3, 5)

    def test_list_of_mixed_parts(self):
        assert expand_field("0,10-12,*/30", 0, 59).values == (0, 10, 11, 12, 30)

    def test_expansion_is_truthy(self):
        result = expand_field("1", 0, 59)
        assert result
        assert result.ok
        assert result.error is None

    @pytest.mark.parametrize(
        "token,lo,hi",
        [
            ("*", 0, 59),
            ("*/7", 0, 59),
            ("2-20/4", 0, 23),
            ("1,31,15", 1, 31),
            ("0-7", 0, 7),
            ("1970-1975,2099", 1970, 2099),
        ],
    )
    def test_values_stay_in_bounds(self, token, lo, hi):
        values = expand_field(token, lo, hi).values
        assert values
        assert all(lo <= v <= hi for v in values)
        assert list(values) == sorted(set(values))


# =============================================================================
# Expansion Error Tests
# =============================================================================


class TestExpandFieldErrors:
    """Tests for rejected tokens."""

    @pytest.mark.parametrize(
        "token,code",
        [
            ("60", MessageCode.FIELD_OUT_OF_RANGE),
            ("0-60", MessageCode.FIELD_OUT_OF_RANGE),
            ("5-1", MessageCode.FIELD_REVERSED_RANGE),
            ("*/0", MessageCode.FIELD_BAD_STEP),
            ("*/x", MessageCode.FIELD_BAD_STEP),
            ("*/-1", MessageCode.FIELD_BAD_STEP),
            ("1,,2", MessageCode.FIELD_EMPTY_TOKEN),
            ("1,", MessageCode.FIELD_EMPTY_TOKEN),
            ("abc", MessageCode.FIELD_NOT_NUMBER),
            ("+5", MessageCode.FIELD_NOT_NUMBER),
            ("1.5", MessageCode.FIELD_NOT_NUMBER),
            ("1-2-3", MessageCode.FIELD_MALFORMED),
            ("-5", MessageCode.FIELD_MALFORMED),
            ("/5", MessageCode.FIELD_MALFORMED),
            ("*/5/2", MessageCode.FIELD_MALFORMED),
            ("50-59/20", MessageCode.FIELD_SELECTS_NOTHING),
        ],
    )
    def test_error_codes(self, token, code):
        result = expand_field(token, 0, 59)
        assert not result
        assert result.values == ()
        assert result.code is code
        assert result.error

    def test_out_of_range_message(self):
        result = expand_field("60", 0, 59)
        assert result.error == "value 60 is outside 0-59"
        assert result.params["value"] == 60

    def test_below_minimum(self):
        result = expand_field("0", 1, 31)
        assert result.code is MessageCode.FIELD_OUT_OF_RANGE

    def test_error_result_is_falsy(self):
        assert not FieldExpansion((), error="bad")

    def test_list_element_never_reexpands_a_list(self):
        with pytest.raises(FieldRangeError) as exc_info:
            _expand_part("1,2", 0, 59)
        assert exc_info.value.code is MessageCode.FIELD_RECURSIVE
        assert exc_info.value.token == "1,2"
