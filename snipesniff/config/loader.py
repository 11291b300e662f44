"""Configuration loader for SnipeSniff."""

from pathlib import Path
from typing import Optional, Tuple

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig, RunConfiguration, build_run_configuration, format_validation_errors
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from a YAML file and the environment.

    Config file lookup order:
    1. ``config_path`` if given
    2. ./config.yaml
    3. ./config/config.yaml

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid or the file is missing
    """
    config_file = _find_config_file(config_path)
    config_dict = _read_yaml(config_file)

    env_config = load_environment_config()

    warnings = check_for_warnings(config_dict, api_address=env_config.api_address)
    if warnings:
        emit_warnings(warnings)

    try:
        app_config = AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=format_validation_errors(e),
            suggestions=[
                "Review config.example.yaml for correct format",
                "Verify field types match the expected schema",
            ],
        ) from None

    return app_config, env_config


def resolve_run_configuration(
    app_config: AppConfig, env_config: EnvironmentConfig
) -> RunConfiguration:
    """
    Merge file and environment settings into the RunConfiguration handed to the scheduler.

    SNIPE_API_ADDRESS takes precedence over ``api_address`` from the file.

    Raises:
        ConfigurationError: If the merged values are invalid (e.g. no API address anywhere)
    """
    return build_run_configuration(
        interval_seconds=app_config.interval_seconds,
        server_mode=app_config.server_mode,
        api_address=env_config.api_address or app_config.api_address,
        api_token=env_config.api_token,
        subnet=app_config.subnet,
    )


def _read_yaml(config_file: Path) -> dict:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {config_file}",
            suggestions=[
                "Copy config.example.yaml to config.yaml",
                f"Ensure {config_file} exists and is readable",
            ],
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[
                f"Ensure {config_file} is readable",
                "Check file permissions",
            ],
        )

    if not config_dict:
        raise ConfigurationError(
            "Configuration file is empty",
            suggestions=["Copy config.example.yaml to config.yaml and edit it"],
        )

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got {type(config_dict).__name__}",
            suggestions=["Review config.example.yaml for correct format"],
        )

    return config_dict


def _find_config_file(config_path: Optional[Path] = None) -> Path:
    """
    Resolve the configuration file to load.

    Raises:
        ConfigurationError: If no config file is found
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Copy config.example.yaml to config.yaml",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    raise ConfigurationError(
        "Configuration file not found",
        errors=[f"Tried: {candidate}" for candidate in DEFAULT_CONFIG_LOCATIONS],
        suggestions=[
            "Copy config.example.yaml to config.yaml",
            "Use --config flag to specify a custom location",
        ],
    )


def validate_config_file(config_path: Path) -> bool:
    """
    Validate a configuration file without reading environment variables.

    Useful for pre-deployment checks.

    Returns:
        True if valid, False otherwise (errors printed to stdout)
    """
    try:
        AppConfig.model_validate(_read_yaml(config_path))
    except ConfigurationError as e:
        print(f"✗ Configuration validation failed:\n{e}")
        return False
    except ValidationError as e:
        errors = "\n".join(f"  - {message}" for message in format_validation_errors(e))
        print(f"✗ Configuration validation failed:\n{errors}")
        return False

    print(f"✓ Configuration file {config_path} is valid")
    return True
