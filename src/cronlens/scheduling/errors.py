"""Exceptions raised by the cron engine.

Parsing never raises for bad user input: problems are aggregated into a
``ValidationReport``. These exceptions cover the internal expansion path and
the strict helpers that turn an invalid report into a raised error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cronlens.i18n import MessageCode
    from cronlens.scheduling.cron import ValidationReport


class CronError(ValueError):
    """Base class for cron engine errors."""

    def __init__(self, message: str, expression: str = "") -> None:
        self.expression = expression
        self.message = message
        super().__init__(message)


class FieldRangeError(CronError):
    """Raised when a field token is malformed or out of bounds.

    ``code`` and ``params`` identify the message so the parser can render
    it again in the caller's locale.
    """

    def __init__(
        self,
        message: str,
        *,
        token: str = "",
        expression: str = "",
        code: "MessageCode | None" = None,
        params: dict[str, Any] | None = None,
    ) -> None:
        self.token = token
        self.code = code
        self.params = params or {}
        super().__init__(message, expression)


class InvalidExpressionError(CronError):
    """Raised when an invalid expression is used as if it were valid.

    Matching, searching and describing are only defined for expressions
    whose report carries no errors.
    """

    def __init__(
        self,
        message: str,
        expression: str = "",
        report: "ValidationReport | None" = None,
    ) -> None:
        self.report = report
        super().__init__(message, expression)

    def __str__(self) -> str:
        if self.report is None or not self.report.errors:
            return self.message
        details = "; ".join(issue.message for issue in self.report.errors)
        return f"{self.message}: {details}"


class ArityError(InvalidExpressionError):
    """Raised by strict parsing when an expression has the wrong number of fields."""

    def __init__(
        self,
        message: str,
        expression: str = "",
        report: "ValidationReport | None" = None,
        token_count: int = 0,
    ) -> None:
        self.token_count = token_count
        super().__init__(message, expression, report)
