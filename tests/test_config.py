"""Tests for configuration loading, validation and interval parsing."""

from pathlib import Path

import pytest

from snipesniff.config import (
    ConfigurationError,
    LogFormat,
    load_config,
    load_environment_config,
    resolve_run_configuration,
    validate_config_file,
)
from snipesniff.config.duration import (
    DurationParseError,
    describe_seconds,
    parse_interval,
    validate_interval_range,
)
from snipesniff.config.models import AppConfig
from snipesniff.config.validators import check_for_warnings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestConfigurationLoading:
    """Loading the YAML file together with the environment."""

    def test_load_valid_config(self, mock_env_vars):
        app_config, env_config = load_config(FIXTURES_DIR / "valid_config.yaml")

        assert app_config.interval == "5m"
        assert app_config.interval_seconds == 300
        assert app_config.server_mode is True
        assert app_config.api_address == "https://snipe.example.com"
        assert app_config.subnet == "10.0.0.0/24"
        assert app_config.executor == "os.path:join"
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == LogFormat.JSON.value

        assert env_config.api_token == "env-token-123"
        assert env_config.environment == "local"

    def test_load_minimal_config_applies_defaults(self, mock_env_vars):
        with pytest.warns(UserWarning, match="auto-detect"):
            app_config, _ = load_config(FIXTURES_DIR / "minimal_config.yaml")

        assert app_config.interval == "15m"
        assert app_config.interval_seconds == 900
        assert app_config.server_mode is False
        assert app_config.subnet == ""
        assert app_config.executor is None
        assert app_config.logging.level == "INFO"
        assert app_config.logging.format == "key-value"

    def test_load_iso8601_interval(self, mock_env_vars):
        app_config, _ = load_config(FIXTURES_DIR / "iso8601_interval_config.yaml")

        assert app_config.interval_seconds == 1800

    def test_integer_interval(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "config.yaml"
        config_file.write_text('interval: 90\napi_address: "https://snipe"\nsubnet: "10.0.0.0/8"\n')

        app_config, _ = load_config(config_file)

        assert app_config.interval_seconds == 90

    def test_config_file_not_found(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(Path("nonexistent.yaml"))

        assert "not found" in str(exc_info.value).lower()
        assert "config.example.yaml" in str(exc_info.value)

    def test_default_locations_searched(self, tmp_path, monkeypatch, mock_env_vars):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text(
            'api_address: "https://snipe"\nsubnet: "10.0.0.0/24"\n'
        )

        app_config, _ = load_config()

        assert app_config.api_address == "https://snipe"

    def test_no_config_anywhere(self, tmp_path, monkeypatch, mock_env_vars):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.errors == ["Tried: config.yaml", "Tried: config/config.yaml"]

    def test_invalid_yaml_syntax(self, tmp_path, mock_env_vars):
        invalid_yaml = tmp_path / "invalid.yaml"
        invalid_yaml.write_text("api_address: 'unterminated\n  subnet: [")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(invalid_yaml)

        assert "parse" in str(exc_info.value).lower()

    def test_empty_file(self, tmp_path, mock_env_vars):
        empty = tmp_path / "empty.yaml"
        empty.write_text("")

        with pytest.raises(ConfigurationError, match="empty"):
            load_config(empty)

    def test_non_mapping_file(self, tmp_path, mock_env_vars):
        listing = tmp_path / "list.yaml"
        listing.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(listing)


class TestConfigurationValidation:
    """Schema rules on the configuration file."""

    def test_invalid_interval(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(FIXTURES_DIR / "invalid_interval_config.yaml")

        assert "interval" in str(exc_info.value).lower()

    def test_invalid_log_format(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(FIXTURES_DIR / "invalid_log_format_config.yaml")

        assert "logging -> format" in str(exc_info.value)

    @pytest.mark.parametrize("interval", [0, "0s", "25h", "P2D"])
    def test_interval_out_of_range(self, interval):
        with pytest.raises(ValueError):
            AppConfig(interval=interval, api_address="https://snipe")

    @pytest.mark.parametrize("executor", ["module_only", ":func", "module:", "  "])
    def test_malformed_executor_reference(self, executor):
        with pytest.raises(ValueError, match="executor"):
            AppConfig(executor=executor)

    def test_executor_reference_stripped(self):
        assert AppConfig(executor="  pkg.mod:run ").executor == "pkg.mod:run"


class TestEnvironmentConfig:
    def test_missing_token(self, monkeypatch):
        monkeypatch.delenv("SNIPE_API_TOKEN", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "SNIPE_API_TOKEN" in str(exc_info.value)

    def test_invalid_log_level(self, monkeypatch, mock_env_vars):
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
            load_environment_config()

    def test_optional_values(self, monkeypatch, mock_env_vars):
        monkeypatch.setenv("SNIPE_API_ADDRESS", "https://override.example.com")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ENVIRONMENT", "production")

        env_config = load_environment_config()

        assert env_config.api_address == "https://override.example.com"
        assert env_config.log_level == "DEBUG"
        assert env_config.environment == "production"

    def test_repr_hides_token(self, mock_env_vars):
        assert "env-token-123" not in repr(load_environment_config())


class TestResolveRunConfiguration:
    def test_merges_file_and_environment(self, mock_env_vars):
        app_config, env_config = load_config(FIXTURES_DIR / "valid_config.yaml")

        run_config = resolve_run_configuration(app_config, env_config)

        assert run_config.interval_seconds == 300
        assert run_config.server_mode is True
        assert run_config.api_address == "https://snipe.example.com"
        assert run_config.api_token.get_secret_value() == "env-token-123"
        assert run_config.subnet == "10.0.0.0/24"

    def test_environment_address_wins(self, monkeypatch, mock_env_vars):
        monkeypatch.setenv("SNIPE_API_ADDRESS", "https://override.example.com")
        app_config, env_config = load_config(FIXTURES_DIR / "valid_config.yaml")

        run_config = resolve_run_configuration(app_config, env_config)

        assert run_config.api_address == "https://override.example.com"

    def test_missing_address_everywhere(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "config.yaml"
        config_file.write_text('interval: "1m"\nsubnet: "10.0.0.0/24"\n')
        app_config, env_config = load_config(config_file)

        with pytest.raises(ConfigurationError, match="api_address"):
            resolve_run_configuration(app_config, env_config)


class TestWarnings:
    def test_short_interval(self):
        warnings = check_for_warnings({"interval": "10s", "subnet": "10.0.0.0/24"})
        assert any("Short interval" in w for w in warnings)

    def test_plain_http_address(self):
        warnings = check_for_warnings({"api_address": "http://snipe.local", "subnet": "10.0.0.0/24"})
        assert any("not HTTPS" in w for w in warnings)

    def test_environment_address_checked(self):
        warnings = check_for_warnings(
            {"api_address": "https://snipe", "subnet": "10.0.0.0/24"},
            api_address="http://plain.local",
        )
        assert any("http://plain.local" in w for w in warnings)

    def test_clean_config(self):
        assert check_for_warnings(
            {"interval": "15m", "api_address": "https://snipe", "subnet": "10.0.0.0/24"}
        ) == []

    def test_invalid_interval_not_warned(self):
        assert check_for_warnings({"interval": "soon", "subnet": "10.0.0.0/24"}) == []


class TestValidateConfigFile:
    def test_valid(self, capsys):
        assert validate_config_file(FIXTURES_DIR / "valid_config.yaml") is True
        assert "is valid" in capsys.readouterr().out

    def test_invalid(self, capsys):
        assert validate_config_file(FIXTURES_DIR / "invalid_interval_config.yaml") is False
        assert "validation failed" in capsys.readouterr().out


class TestIntervalParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (45, 45),
            ("45", 45),
            ("30s", 30),
            ("15m", 900),
            ("1h", 3600),
            ("1h30m", 5400),
            ("2d", 172800),
            ("PT30S", 30),
            ("PT15M", 900),
            ("PT1H30M", 5400),
            ("P1D", 86400),
            (" 15M ", 900),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_interval(value) == expected

    @pytest.mark.parametrize("value", ["", "   ", "soon", "15x", "15m later", "PT", "PT0S", "0m", True, 1.5])
    def test_invalid_values(self, value):
        with pytest.raises(DurationParseError):
            parse_interval(value)

    def test_range_bounds(self):
        validate_interval_range(1)
        validate_interval_range(86400)

        with pytest.raises(DurationParseError, match="too short"):
            validate_interval_range(0)
        with pytest.raises(DurationParseError, match="too long"):
            validate_interval_range(86401)

    @pytest.mark.parametrize(
        "seconds, text",
        [(1, "1 second"), (45, "45 seconds"), (60, "1 minute"), (7200, "2 hours"), (86400, "1 day")],
    )
    def test_describe_seconds(self, seconds, text):
        assert describe_seconds(seconds) == text
