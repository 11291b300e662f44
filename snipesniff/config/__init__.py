"""Configuration management for SnipeSniff."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, resolve_run_configuration, validate_config_file
from .models import (
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    RunConfiguration,
    build_run_configuration,
)

__all__ = [
    # Loading
    "load_config",
    "load_environment_config",
    "resolve_run_configuration",
    "validate_config_file",
    # Models
    "AppConfig",
    "EnvironmentConfig",
    "LoggingConfig",
    "RunConfiguration",
    "build_run_configuration",
    # Enums
    "LogFormat",
    "LogLevel",
    # Exceptions
    "ConfigurationError",
]
