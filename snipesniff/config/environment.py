"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Values read from the process environment (secrets and overrides)."""

    def __init__(
        self,
        api_token: str,
        api_address: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.api_token = api_token
        self.api_address = api_address
        self.log_level = log_level
        self.environment = environment or "local"

    def __repr__(self) -> str:
        return (
            f"EnvironmentConfig(api_token='<not displayed>', api_address={self.api_address!r}, "
            f"log_level={self.log_level!r}, environment={self.environment!r})"
        )


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SNIPE_API_TOKEN: Snipe-IT API token

    Optional environment variables:
    - SNIPE_API_ADDRESS: Snipe-IT API base URL (overrides api_address in the config file)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment label attached to log records (default: local)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    api_token = (os.getenv("SNIPE_API_TOKEN") or "").strip()
    api_address = (os.getenv("SNIPE_API_ADDRESS") or "").strip() or None
    log_level = (os.getenv("LOG_LEVEL") or "").strip() or None
    environment = (os.getenv("ENVIRONMENT") or "").strip() or None

    if not api_token:
        errors.append("Missing required environment variable: SNIPE_API_TOKEN")

    if log_level:
        log_level = log_level.upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your Snipe-IT API token",
                "Ensure all required environment variables are set",
            ],
        )

    return EnvironmentConfig(
        api_token=api_token,
        api_address=api_address,
        log_level=log_level,
        environment=environment,
    )
