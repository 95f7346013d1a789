"""Tests for the cronlens command line."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cronlens.cli import app
from cronlens.infrastructure.logging import reset_logging


def _has_zone(name):
    try:
        ZoneInfo(name)
    except ZoneInfoNotFoundError:
        return False
    return True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_environment():
    with patch.dict("os.environ", {}, clear=True):
        yield
    reset_logging()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "cronlens.yaml"
    path.write_text("locale: zh\ndefault_count: 2\n")
    return path


# =============================================================================
# validate
# =============================================================================


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid(self, runner):
        result = runner.invoke(app, ["validate", "0 9 * * 1-5"])
        assert result.exit_code == 0
        assert "Valid expression" in result.output

    def test_invalid_exit_code(self, runner):
        result = runner.invoke(app, ["validate", "60 * * * *"])
        assert result.exit_code == 20
        assert "minute" in result.output

    def test_arity(self, runner):
        result = runner.invoke(app, ["validate", "* * *"])
        assert result.exit_code == 20

    def test_json(self, runner):
        result = runner.invoke(app, ["validate", "60 24 * * *", "--format", "json"])
        assert result.exit_code == 20
        data = json.loads(result.output)
        assert data["valid"] is False
        assert [e["field"] for e in data["errors"]] == ["minute", "hour"]

    def test_warning_shown(self, runner):
        result = runner.invoke(app, ["validate", "0 0 1 * 1"])
        assert result.exit_code == 0
        assert "Warning" in result.output

    def test_seconds_flag(self, runner):
        result = runner.invoke(app, ["validate", "0 0 9 * * *", "--seconds"])
        assert result.exit_code == 0

    def test_unknown_format(self, runner):
        result = runner.invoke(app, ["validate", "* * * * *", "--format", "xml"])
        assert result.exit_code == 2


# =============================================================================
# next
# =============================================================================


class TestNextCommand:
    """Tests for the next command."""

    def test_json(self, runner):
        result = runner.invoke(
            app,
            ["next", "*/15 * * * *", "--from", "2024-01-01T10:07", "-n", "3", "--format", "json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["occurrences"] == [
            "2024-01-01T10:15:00",
            "2024-01-01T10:30:00",
            "2024-01-01T10:45:00",
        ]

    def test_console(self, runner):
        result = runner.invoke(app, ["next", "0 9 * * *", "--from", "2024-01-01T08:00", "-n", "1"])
        assert result.exit_code == 0
        assert "2024-01-01 09:00:00" in result.output
        assert "Monday" in result.output

    def test_no_next_run(self, runner):
        result = runner.invoke(app, ["next", "0 0 31 2 *", "--from", "2024-01-01T00:00"])
        assert result.exit_code == 0
        assert "No next run found" in result.output

    @pytest.mark.skipif(not _has_zone("UTC"), reason="no tz database")
    def test_timezone(self, runner):
        result = runner.invoke(
            app,
            [
                "next", "0 * * * *",
                "--from", "2024-01-01T10:00+00:00",
                "--timezone", "UTC",
                "-n", "1",
                "--format", "json",
            ],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["occurrences"] == ["2024-01-01T11:00:00+00:00"]

    def test_unknown_timezone(self, runner):
        result = runner.invoke(app, ["next", "* * * * *", "--timezone", "Mars/Olympus"])
        assert result.exit_code == 2

    def test_bad_reference(self, runner):
        result = runner.invoke(app, ["next", "* * * * *", "--from", "yesterday"])
        assert result.exit_code == 2

    def test_invalid_expression(self, runner):
        result = runner.invoke(app, ["next", "0 25 * * *"])
        assert result.exit_code == 20
        assert "Invalid expression" in result.output

    def test_budget_option(self, runner):
        result = runner.invoke(
            app,
            [
                "next", "0 * * * *",
                "--from", "2024-01-01T10:00",
                "-n", "100",
                "--max-iterations", "120",
                "--format", "json",
            ],
        )
        assert result.exit_code == 0
        assert len(json.loads(result.output)["occurrences"]) == 2


# =============================================================================
# describe / explain
# =============================================================================


class TestDescribeCommand:
    """Tests for the describe and explain commands."""

    def test_describe(self, runner):
        result = runner.invoke(app, ["describe", "0,30 * * * *"])
        assert result.exit_code == 0
        assert result.output.strip() == "Executes at minutes 0 and 30"

    def test_describe_locale(self, runner):
        result = runner.invoke(app, ["describe", "* * * * *", "--locale", "zh"])
        assert result.output.strip() == "每分钟执行"

    def test_describe_invalid(self, runner):
        result = runner.invoke(app, ["describe", "0 25 * * *", "--locale", "zh"])
        assert result.exit_code == 20
        assert "表达式无效" in result.output

    def test_explain_json(self, runner):
        result = runner.invoke(app, ["explain", "0 9 * * 1-5", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["description"] == "Weekdays at 9 AM"
        assert data["valid"] is True

    def test_explain_invalid(self, runner):
        result = runner.invoke(app, ["explain", "61 * * * *"])
        assert result.exit_code == 20


# =============================================================================
# presets / build
# =============================================================================


class TestPresetsCommand:
    """Tests for the presets command."""

    def test_list(self, runner):
        result = runner.invoke(app, ["presets", "--format", "json"])
        assert result.exit_code == 0
        keys = [p["key"] for p in json.loads(result.output)]
        assert "weekdays_9am" in keys

    def test_category(self, runner):
        result = runner.invoke(app, ["presets", "--category", "maintenance", "--format", "json"])
        assert {p["category"] for p in json.loads(result.output)} == {"maintenance"}

    def test_unknown_category(self, runner):
        result = runner.invoke(app, ["presets", "--category", "sometimes"])
        assert result.exit_code == 2


class TestBuildCommand:
    """Tests for the build command."""

    def test_crontab_line(self, runner):
        result = runner.invoke(
            app,
            ["build", "--minute", "0", "--hour", "2", "--command", "/usr/bin/backup"],
        )
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "0 2 * * * /usr/bin/backup"

    def test_with_seconds_and_year(self, runner):
        result = runner.invoke(app, ["build", "--second", "30", "--year", "2030"])
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "30 * * * * * 2030 your-command-here"
        assert "Standard crontab has no seconds field" in result.output

    def test_five_field_line_has_no_seconds_note(self, runner):
        result = runner.invoke(app, ["build", "--minute", "0"])
        assert result.exit_code == 0
        assert "seconds field" not in result.output

    def test_invalid(self, runner):
        result = runner.invoke(app, ["build", "--hour", "24"])
        assert result.exit_code == 20


# =============================================================================
# Global options
# =============================================================================


class TestGlobalOptions:
    """Tests for --config and environment configuration."""

    def test_config_file(self, runner, config_file):
        result = runner.invoke(
            app,
            [
                "--config", str(config_file),
                "next", "* * * * *",
                "--from", "2024-01-01T00:00",
                "--format", "json",
            ],
        )
        assert result.exit_code == 0
        assert len(json.loads(result.output)["occurrences"]) == 2

    def test_config_locale(self, runner, config_file):
        result = runner.invoke(app, ["--config", str(config_file), "describe", "* * * * *"])
        assert result.output.strip() == "每分钟执行"

    def test_missing_config(self, runner, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "absent.yaml"), "presets"])
        assert result.exit_code == 10

    def test_invalid_config(self, runner, tmp_path):
        path = tmp_path / "cronlens.yaml"
        path.write_text("max_iterations: lots\n")
        result = runner.invoke(app, ["--config", str(path), "presets"])
        assert result.exit_code == 31

    def test_env_seconds_mode(self, runner):
        with patch.dict("os.environ", {"CRONLENS_INCLUDE_SECONDS": "true"}):
            result = runner.invoke(app, ["validate", "0 0 9 * * *"])
        assert result.exit_code == 0
