"""Command-line interface for cronlens."""

from __future__ import annotations

import json
import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Annotated, Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cronlens.cli_modules.errors import (
    ConfigurationError,
    ErrorCode,
    ExpressionError,
    UsageError,
    error_boundary,
    require_file,
)
from cronlens.i18n import MessageCode, t, weekday_name
from cronlens.infrastructure.config import (
    ConfigSourceError,
    ConfigValidationError,
    EngineConfig,
    load_config,
)
from cronlens.infrastructure.logging import configure_logging
from cronlens.scheduling import (
    PRESETS,
    CronBuilder,
    CronExpression,
    FieldType,
    PresetCategory,
    ValidationReport,
    describe,
    list_presets,
    next_occurrences,
    parse,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cronlens",
    help="Validate, explain and preview cron expressions",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# Type Aliases
# =============================================================================

ExpressionArg = Annotated[str, typer.Argument(help="Cron expression, quoted")]

SecondsOpt = Annotated[
    bool,
    typer.Option("--seconds", "-s", help="Expect a leading seconds field"),
]

LocaleOpt = Annotated[
    Optional[str],
    typer.Option("--locale", "-l", help="Message locale (en, zh)"),
]

FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format (console, json)"),
]


# =============================================================================
# Helpers
# =============================================================================


def _settings(ctx: typer.Context) -> EngineConfig:
    return ctx.obj if isinstance(ctx.obj, EngineConfig) else EngineConfig()


def _check_format(format: str) -> None:
    if format not in ("console", "json"):
        raise UsageError(f"Unknown output format: {format}", hint="Use console or json.")


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _parse_strict(source: str, include_seconds: bool, locale: str) -> CronExpression:
    expr, report = parse(source, include_seconds, locale=locale)
    if expr is None or not report.is_valid:
        raise ExpressionError(
            t(MessageCode.INVALID_EXPRESSION, locale),
            errors=[issue.message for issue in report.errors],
        )
    return expr


def _resolve_timezone(name: str | None) -> tzinfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise UsageError(f"Unknown timezone: {name}", hint="Use an IANA name such as Europe/Berlin.")


def _resolve_reference(start: str | None, zone: tzinfo | None) -> datetime:
    if start is None:
        return datetime.now(zone)
    try:
        reference = datetime.fromisoformat(start)
    except ValueError:
        raise UsageError(f"Invalid --from value: {start}", hint="Use ISO 8601, e.g. 2024-01-31T09:00.")
    if zone is None:
        return reference
    if reference.tzinfo is None:
        return reference.replace(tzinfo=zone)
    return reference.astimezone(zone)


def _format_instant(instant: datetime, hour_format: int) -> str:
    pattern = "%Y-%m-%d %I:%M:%S %p" if hour_format == 12 else "%Y-%m-%d %H:%M:%S"
    text = instant.strftime(pattern)
    if instant.tzinfo is not None:
        text = f"{text} {instant.tzname()}"
    return text


def _print_report(report: ValidationReport) -> None:
    if report.errors:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Field", style="cyan")
        table.add_column("Token")
        table.add_column("Message", style="red")
        for issue in report.errors:
            table.add_row(issue.field or "-", escape(issue.token), escape(issue.message))
        console.print(table)
    for warning in report.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning.message)}")


def _occurrences_table(
    runs: list[datetime],
    hour_format: int,
    locale: str,
) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Time", style="cyan")
    table.add_column("Weekday")
    for index, run in enumerate(runs, start=1):
        table.add_row(
            str(index),
            _format_instant(run, hour_format),
            weekday_name((run.weekday() + 1) % 7, locale),
        )
    return table


# =============================================================================
# Global Options
# =============================================================================


@app.callback()
@error_boundary
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML or JSON configuration file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Validate, explain and preview cron expressions."""
    configure_logging(level="debug" if verbose else "warning")
    if config is not None:
        require_file(config, "Configuration file")
    try:
        ctx.obj = load_config(config)
    except (ConfigValidationError, ConfigSourceError) as e:
        raise ConfigurationError(str(e), config_path=config)
    logger.debug("Using %s", ctx.obj)


# =============================================================================
# Commands
# =============================================================================


@app.command(name="validate")
@error_boundary
def validate_cmd(
    ctx: typer.Context,
    expression: ExpressionArg,
    seconds: SecondsOpt = False,
    locale: LocaleOpt = None,
    format: FormatOpt = "console",
) -> None:
    """Validate an expression and list every problem found."""
    settings = _settings(ctx)
    _check_format(format)
    include_seconds = seconds or settings.include_seconds
    locale = locale or settings.locale

    expr, report = parse(expression, include_seconds, locale=locale)

    if format == "json":
        _echo_json(
            {
                "expression": expression,
                "normalized": expr.normalized if expr is not None else None,
                **report.to_dict(),
            }
        )
    else:
        if report.is_valid:
            console.print(f"[green]✓ Valid expression:[/green] {escape(expr.normalized)}")
        else:
            console.print(f"[red]✗ {escape(t(MessageCode.INVALID_EXPRESSION, locale))}[/red]")
        _print_report(report)

    if not report.is_valid:
        raise typer.Exit(ErrorCode.VALIDATION_FAILED.value)


@app.command(name="next")
@error_boundary
def next_cmd(
    ctx: typer.Context,
    expression: ExpressionArg,
    count: Annotated[
        Optional[int],
        typer.Option("--count", "-n", help="Number of runs to show"),
    ] = None,
    seconds: SecondsOpt = False,
    start: Annotated[
        Optional[str],
        typer.Option("--from", help="Reference time in ISO 8601 (default: now)"),
    ] = None,
    timezone: Annotated[
        Optional[str],
        typer.Option("--timezone", "-z", help="IANA timezone for the reference time"),
    ] = None,
    max_iterations: Annotated[
        Optional[int],
        typer.Option("--max-iterations", help="Search step budget"),
    ] = None,
    locale: LocaleOpt = None,
    format: FormatOpt = "console",
) -> None:
    """Show the next times an expression fires."""
    settings = _settings(ctx)
    _check_format(format)
    include_seconds = seconds or settings.include_seconds
    locale = locale or settings.locale
    count = settings.default_count if count is None else count
    budget = settings.max_iterations if max_iterations is None else max_iterations
    if budget < 1:
        raise UsageError("--max-iterations must be at least 1")

    expr = _parse_strict(expression, include_seconds, locale)
    reference = _resolve_reference(start, _resolve_timezone(timezone or settings.timezone))
    runs = next_occurrences(
        expr,
        reference,
        count,
        budget,
        fast_fail_window=settings.fast_fail_window,
    )

    if format == "json":
        _echo_json(
            {
                "expression": expr.normalized,
                "reference": reference.isoformat(),
                "occurrences": [run.isoformat() for run in runs],
            }
        )
        return

    if not runs:
        console.print(f"[yellow]{escape(t(MessageCode.NO_NEXT_RUN, locale))}[/yellow]")
        return
    console.print(_occurrences_table(runs, settings.hour_format, locale))


@app.command(name="describe")
@error_boundary
def describe_cmd(
    ctx: typer.Context,
    expression: ExpressionArg,
    seconds: SecondsOpt = False,
    locale: LocaleOpt = None,
) -> None:
    """Describe an expression in words."""
    settings = _settings(ctx)
    include_seconds = seconds or settings.include_seconds
    locale = locale or settings.locale

    expr = _parse_strict(expression, include_seconds, locale)
    typer.echo(describe(expr, locale=locale))


@app.command(name="explain")
@error_boundary
def explain_cmd(
    ctx: typer.Context,
    expression: ExpressionArg,
    count: Annotated[
        Optional[int],
        typer.Option("--count", "-n", help="Number of runs to show"),
    ] = None,
    seconds: SecondsOpt = False,
    locale: LocaleOpt = None,
    format: FormatOpt = "console",
) -> None:
    """Validate, describe and preview an expression in one view."""
    settings = _settings(ctx)
    _check_format(format)
    include_seconds = seconds or settings.include_seconds
    locale = locale or settings.locale
    count = settings.default_count if count is None else count

    expr, report = parse(expression, include_seconds, locale=locale)
    if expr is None or not report.is_valid:
        if format == "json":
            _echo_json({"expression": expression, **report.to_dict()})
        else:
            console.print(f"[red]✗ {escape(t(MessageCode.INVALID_EXPRESSION, locale))}[/red]")
            _print_report(report)
        raise typer.Exit(ErrorCode.VALIDATION_FAILED.value)

    zone = _resolve_timezone(settings.timezone)
    runs = next_occurrences(
        expr,
        datetime.now(zone),
        count,
        settings.max_iterations,
        fast_fail_window=settings.fast_fail_window,
    )
    description = describe(expr, locale=locale)

    if format == "json":
        _echo_json(
            {
                "expression": expr.normalized,
                "description": description,
                **report.to_dict(),
                "occurrences": [run.isoformat() for run in runs],
            }
        )
        return

    console.print(
        Panel(
            f"[bold]{escape(expr.normalized)}[/bold]\n{escape(description)}",
            title="cronlens",
            expand=False,
        )
    )
    _print_report(report)
    if runs:
        console.print(_occurrences_table(runs, settings.hour_format, locale))
    else:
        console.print(f"[yellow]{escape(t(MessageCode.NO_NEXT_RUN, locale))}[/yellow]")


@app.command(name="presets")
@error_boundary
def presets_cmd(
    category: Annotated[
        Optional[str],
        typer.Option("--category", help="Only list one category"),
    ] = None,
    format: FormatOpt = "console",
) -> None:
    """List the built-in schedule presets."""
    _check_format(format)
    try:
        keys = list_presets(category)
    except ValueError:
        choices = ", ".join(c.value for c in PresetCategory)
        raise UsageError(f"Unknown category: {category}", hint=f"Choose one of: {choices}")

    presets = [PRESETS[key] for key in keys]
    if format == "json":
        _echo_json(
            [
                {
                    "key": p.key,
                    "name": p.name,
                    "expression": p.expression,
                    "description": p.description,
                    "category": p.category.value,
                }
                for p in presets
            ]
        )
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Expression", style="green")
    table.add_column("Name")
    table.add_column("Category", style="dim")
    for p in presets:
        table.add_row(p.key, p.expression, p.name, p.category.value)
    console.print(table)


@app.command(name="build")
@error_boundary
def build_cmd(
    ctx: typer.Context,
    second: Annotated[Optional[str], typer.Option("--second", help="Seconds token")] = None,
    minute: Annotated[Optional[str], typer.Option("--minute", help="Minutes token")] = None,
    hour: Annotated[Optional[str], typer.Option("--hour", help="Hours token")] = None,
    day: Annotated[Optional[str], typer.Option("--day", help="Day-of-month token")] = None,
    month: Annotated[Optional[str], typer.Option("--month", help="Month token")] = None,
    weekday: Annotated[Optional[str], typer.Option("--weekday", help="Day-of-week token")] = None,
    year: Annotated[Optional[str], typer.Option("--year", help="Year token")] = None,
    command: Annotated[
        str,
        typer.Option("--command", help="Command for the crontab line"),
    ] = "your-command-here",
    locale: LocaleOpt = None,
) -> None:
    """Assemble an expression from field tokens and print a crontab line."""
    locale = locale or _settings(ctx).locale

    builder = CronBuilder()
    tokens = {
        FieldType.SECOND: second,
        FieldType.MINUTE: minute,
        FieldType.HOUR: hour,
        FieldType.DAY_OF_MONTH: day,
        FieldType.MONTH: month,
        FieldType.DAY_OF_WEEK: weekday,
        FieldType.YEAR: year,
    }
    for field_type, token in tokens.items():
        if token is not None:
            builder.field(field_type, token)

    expr = _parse_strict(builder.to_string(), builder.include_seconds, locale)

    typer.echo(expr.to_crontab_line(command))
    console.print(f"[dim]{escape(describe(expr, locale=locale))}[/dim]")
    if expr.include_seconds:
        console.print(f"[yellow]{escape(t(MessageCode.CRONTAB_SECONDS, locale))}[/yellow]")


if __name__ == "__main__":
    app()
