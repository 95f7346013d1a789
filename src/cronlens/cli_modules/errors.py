"""CLI error handling utilities.

This module provides standardized error handling for CLI commands.
"""

from __future__ import annotations

import functools
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, TypeVar

import typer

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCode(Enum):
    """Standard CLI error codes."""

    # General errors (1-9)
    GENERAL_ERROR = 1
    USAGE_ERROR = 2

    # File errors (10-19)
    FILE_NOT_FOUND = 10

    # Validation errors (20-29)
    VALIDATION_FAILED = 20

    # Configuration errors (30-39)
    CONFIG_NOT_FOUND = 30
    CONFIG_INVALID = 31


# =============================================================================
# Exception Classes
# =============================================================================


class CLIError(Exception):
    """Base exception for CLI errors.

    Attributes:
        message: Error message
        code: Error code
        details: Additional error details
        hint: Helpful hint for resolution
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.hint = hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return "\n".join(parts)


class UsageError(CLIError):
    """Error for option values the engine cannot use."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message=message, code=ErrorCode.USAGE_ERROR, hint=hint)


class ExpressionError(CLIError):
    """Error when an expression fails validation."""

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_FAILED,
            details={"errors": errors or []},
            hint=hint,
        )
        self.errors = errors or []


class ConfigurationError(CLIError):
    """Error with configuration."""

    def __init__(
        self,
        message: str,
        config_path: Path | str | None = None,
        hint: str | None = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details={"config_path": str(config_path) if config_path else None},
            hint=hint or "Check the configuration file format and values.",
        )
        self.config_path = config_path


# =============================================================================
# Decorator
# =============================================================================


F = TypeVar("F", bound=Callable[..., Any])


def _echo_error(error: CLIError) -> None:
    typer.echo(typer.style(f"Error: {error.message}", fg="red"), err=True)
    for line in error.details.get("errors", []):
        typer.echo(typer.style(f"  - {line}", fg="red"), err=True)
    if error.hint:
        typer.echo(typer.style(f"Hint: {error.hint}", fg="yellow"), err=True)


def error_boundary(func: F) -> F:
    """Simple error boundary decorator.

    Catches all exceptions and converts them to CLI exit codes.

    Args:
        func: Function to wrap

    Returns:
        Wrapped function
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except CLIError as e:
            _echo_error(e)
            raise typer.Exit(e.code.value)
        except Exception as e:
            logger.exception("Unexpected error")
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(ErrorCode.GENERAL_ERROR.value)

    return wrapper  # type: ignore


# =============================================================================
# Validation Helpers
# =============================================================================


def require_file(path: Path, description: str = "File") -> Path:
    """Require that a file exists.

    Raises:
        ConfigurationError: If the file doesn't exist
    """
    if not path.exists():
        raise ConfigurationError(
            f"{description} not found: {path}",
            config_path=path,
            hint="Check that the file exists and the path is correct.",
            code=ErrorCode.FILE_NOT_FOUND,
        )
    return path
