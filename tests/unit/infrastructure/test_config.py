"""Tests for configuration loading."""

import json
from datetime import timedelta
from unittest.mock import patch

import pytest

from cronlens.infrastructure.config import (
    ConfigSource,
    ConfigSourceError,
    ConfigValidationError,
    EngineConfig,
    EnvConfigSource,
    FileConfigSource,
    load_config,
    validate_config,
)


class _StaticSource(ConfigSource):
    def __init__(self, data, priority=0):
        super().__init__(priority)
        self._data = data

    def load(self):
        return dict(self._data)


class TestEngineConfig:
    """Tests for EngineConfig defaults."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.include_seconds is False
        assert config.max_iterations == 1000
        assert config.default_count == 5
        assert config.locale == "en"
        assert config.timezone is None

    def test_fast_fail_window(self):
        assert EngineConfig().fast_fail_window == timedelta(hours=24)
        assert EngineConfig(fast_fail_hours=0.5).fast_fail_window == timedelta(minutes=30)

    def test_fast_fail_disabled(self):
        assert EngineConfig(fast_fail_hours=None).fast_fail_window is None
        assert EngineConfig(fast_fail_hours=0).fast_fail_window is None

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(AttributeError):
            config.locale = "zh"

    def test_to_dict(self):
        assert EngineConfig().to_dict()["max_iterations"] == 1000


class TestEnvConfigSource:
    """Tests for EnvConfigSource."""

    def test_load_values(self):
        """Test loading and type inference."""
        with patch.dict("os.environ", {
            "CRONLENS_MAX_ITERATIONS": "5000",
            "CRONLENS_INCLUDE_SECONDS": "true",
            "CRONLENS_LOCALE": "zh",
            "CRONLENS_FAST_FAIL_HOURS": "1.5",
            "CRONLENS_TIMEZONE": "none",
        }):
            config = EnvConfigSource().load()

        assert config["max_iterations"] == 5000
        assert config["include_seconds"] is True
        assert config["locale"] == "zh"
        assert config["fast_fail_hours"] == 1.5
        assert config["timezone"] is None

    def test_ignores_other_prefixes(self):
        with patch.dict("os.environ", {"OTHER_LOCALE": "zh"}):
            assert "locale" not in EnvConfigSource().load()

    def test_custom_prefix(self):
        with patch.dict("os.environ", {"MYAPP_LOCALE": "zh"}):
            assert EnvConfigSource(prefix="MYAPP").load()["locale"] == "zh"


class TestFileConfigSource:
    """Tests for FileConfigSource."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "cronlens.yaml"
        path.write_text("max_iterations: 2000\nlocale: zh\n")
        assert FileConfigSource(path).load() == {"max_iterations": 2000, "locale": "zh"}

    def test_nested_section(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("cronlens:\n  default_count: 10\nother: 1\n")
        assert FileConfigSource(path).load() == {"default_count": 10}

    def test_json(self, tmp_path):
        path = tmp_path / "cronlens.json"
        path.write_text(json.dumps({"include_seconds": True}))
        assert FileConfigSource(path).load() == {"include_seconds": True}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "cronlens.yaml"
        path.write_text("")
        assert FileConfigSource(path).load() == {}

    def test_missing_optional_file(self, tmp_path):
        assert FileConfigSource(tmp_path / "absent.yaml").load() == {}

    def test_missing_required_file(self, tmp_path):
        with pytest.raises(ConfigSourceError):
            FileConfigSource(tmp_path / "absent.yaml", required=True).load()

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "cronlens.toml"
        path.write_text("locale = 'zh'")
        with pytest.raises(ConfigSourceError):
            FileConfigSource(path).load()

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "cronlens.yaml"
        path.write_text("locale: [zh\n")
        with pytest.raises(ConfigSourceError):
            FileConfigSource(path).load()

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "cronlens.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigSourceError):
            FileConfigSource(path).load()


class TestValidateConfig:
    """Tests for value validation."""

    def test_valid(self):
        assert validate_config({"max_iterations": 10, "locale": "zh_CN"}) == []

    def test_wrong_type(self):
        errors = validate_config({"max_iterations": "many"})
        assert errors == ["max_iterations: expected int, got str"]

    def test_bool_is_not_int(self):
        assert validate_config({"default_count": True})

    def test_ranges(self):
        errors = validate_config({
            "max_iterations": 0,
            "default_count": 0,
            "fast_fail_hours": -1.0,
            "hour_format": 13,
            "locale": "fr",
        })
        assert len(errors) == 5


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            assert load_config() == EngineConfig()

    def test_file_values(self, tmp_path):
        path = tmp_path / "cronlens.yaml"
        path.write_text("max_iterations: 2000\nfast_fail_hours: 2\n")
        with patch.dict("os.environ", {}, clear=True):
            config = load_config(path)
        assert config.max_iterations == 2000
        assert config.fast_fail_hours == 2.0

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "cronlens.yaml"
        path.write_text("locale: en\ndefault_count: 3\n")
        with patch.dict("os.environ", {"CRONLENS_LOCALE": "zh"}, clear=True):
            config = load_config(path)
        assert config.locale == "zh"
        assert config.default_count == 3

    def test_priority_order(self):
        low = _StaticSource({"default_count": 1}, priority=10)
        high = _StaticSource({"default_count": 9}, priority=200)
        with patch.dict("os.environ", {}, clear=True):
            config = load_config(sources=[high, low])
        assert config.default_count == 9

    def test_unknown_keys_ignored(self):
        with patch.dict("os.environ", {"CRONLENS_COLOR": "red"}, clear=True):
            assert load_config() == EngineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigSourceError):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_values(self):
        with patch.dict("os.environ", {
            "CRONLENS_MAX_ITERATIONS": "lots",
            "CRONLENS_HOUR_FORMAT": "13",
        }, clear=True):
            with pytest.raises(ConfigValidationError) as exc_info:
                load_config()
        assert len(exc_info.value.errors) == 1
        assert "max_iterations" in exc_info.value.errors[0]

    def test_disable_fast_fail_from_env(self):
        with patch.dict("os.environ", {"CRONLENS_FAST_FAIL_HOURS": "none"}, clear=True):
            assert load_config().fast_fail_window is None
