"""Bounded next-occurrence search.

The search walks forward one minimal unit at a time (a second when the
expression has a seconds field, a minute otherwise) and tests every
candidate with the point matcher. Two limits keep it finite:

- ``max_iterations``: hard cap on the number of steps.
- ``fast_fail_window``: if nothing has matched once the cursor is this far
  past the reference, give up early. This is a heuristic for obviously
  impossible expressions, not a correctness bound: very sparse but valid
  schedules (a leap day, a single month of a single year) can end up with
  no result within the default budget.

Both outcomes return a shorter list, never an exception.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from itertools import islice
from typing import Iterator

from cronlens.scheduling.cron import CronExpression, require_valid

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_FAST_FAIL_WINDOW = timedelta(hours=24)


def iter_occurrences(
    expr: CronExpression,
    reference: datetime,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    fast_fail_window: timedelta | None = DEFAULT_FAST_FAIL_WINDOW,
) -> Iterator[datetime]:
    """Lazily yield matching datetimes strictly after ``reference``.

    Args:
        expr: A validated expression.
        reference: Instant to search from. Naive and aware datetimes are both
            accepted; arithmetic is plain ``timedelta`` addition.
        max_iterations: Maximum number of cursor steps.
        fast_fail_window: Stop when nothing matched this far past the
            reference. None disables the check.

    Raises:
        InvalidExpressionError: If the expression failed validation.
    """
    require_valid(expr)

    if expr.include_seconds:
        unit = timedelta(seconds=1)
        cursor = reference.replace(microsecond=0)
    else:
        unit = timedelta(minutes=1)
        cursor = reference.replace(second=0, microsecond=0)

    found = 0
    for _ in range(max_iterations):
        cursor += unit
        if expr.matches(cursor):
            found += 1
            yield cursor
        elif found == 0 and fast_fail_window is not None:
            if cursor - reference > fast_fail_window:
                logger.debug(
                    "No match for %r within %s of %s, giving up",
                    expr.source,
                    fast_fail_window,
                    reference.isoformat(),
                )
                return

    logger.debug(
        "Search budget of %d steps exhausted for %r after %d match(es)",
        max_iterations,
        expr.source,
        found,
    )


def next_occurrences(
    expr: CronExpression,
    reference: datetime,
    count: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    *,
    fast_fail_window: timedelta | None = DEFAULT_FAST_FAIL_WINDOW,
) -> list[datetime]:
    """Find up to ``count`` matching datetimes after ``reference``.

    Args:
        expr: A validated expression.
        reference: Instant to search from; results are strictly later.
        count: Number of occurrences wanted.
        max_iterations: Maximum number of cursor steps.
        fast_fail_window: Early give-up window, see ``iter_occurrences``.

    Returns:
        Occurrences in increasing order. Fewer than ``count`` (possibly none)
        means no further run was found within the budget.
    """
    if count <= 0:
        require_valid(expr)
        return []
    return list(
        islice(
            iter_occurrences(
                expr,
                reference,
                max_iterations=max_iterations,
                fast_fail_window=fast_fail_window,
            ),
            count,
        )
    )
