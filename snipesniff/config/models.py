"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from snipesniff.logging import REDACTION_MARKER

from .duration import DurationParseError, parse_interval, validate_interval_range
from .exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _require_text(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field_name} cannot be empty or whitespace-only")
    return value


class RunConfiguration(BaseModel):
    """
    Immutable settings shared by every scheduled discovery-and-sync run.

    Validated eagerly: an instance only exists if the interval is a positive
    integer and both API address and token are non-empty. The token is held
    as a SecretStr so that reprs and model dumps never expose it.
    """

    model_config = ConfigDict(frozen=True)

    interval_seconds: int = Field(..., ge=1, description="Seconds between two discovery runs")
    server_mode: bool = Field(False, description="Passed through to the sync executor")
    api_address: str = Field(..., description="Base URL of the Snipe-IT API")
    api_token: SecretStr = Field(..., description="Snipe-IT API token")
    subnet: str = Field("", description="Subnet to scan; empty means auto-detect")

    @field_validator("interval_seconds", mode="before")
    @classmethod
    def reject_non_integer_interval(cls, v: Any) -> Any:
        # bool is an int subclass and floats would silently truncate
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"interval_seconds must be an integer, got {type(v).__name__}")
        return v

    @field_validator("server_mode", mode="before")
    @classmethod
    def require_boolean(cls, v: Any) -> Any:
        if not isinstance(v, bool):
            raise ValueError(f"server_mode must be a boolean, got {type(v).__name__}")
        return v

    @field_validator("api_address", mode="before")
    @classmethod
    def validate_api_address(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return _require_text(v, "api_address").strip()
        return v

    @field_validator("api_token", mode="before")
    @classmethod
    def validate_api_token(cls, v: Any) -> Any:
        # Checked for emptiness only; the secret is kept exactly as given
        raw = v.get_secret_value() if isinstance(v, SecretStr) else v
        if raw is None or isinstance(raw, str):
            return _require_text(raw, "api_token")
        return v

    @field_validator("subnet", mode="before")
    @classmethod
    def normalize_subnet(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    def log_items(self) -> List[Tuple[str, Any]]:
        """Parameter name/value pairs safe to log, with the token replaced by the marker."""
        return [
            ("IntervalInSeconds", self.interval_seconds),
            ("ServerMode", self.server_mode),
            ("SnipeApiAddress", self.api_address),
            ("SnipeApiToken", REDACTION_MARKER),
            ("SubnetsToScan", self.subnet),
        ]


def build_run_configuration(**values: Any) -> RunConfiguration:
    """
    Validate raw values into a RunConfiguration.

    Raises:
        ConfigurationError: Listing every invalid field
    """
    try:
        return RunConfiguration(**values)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid run configuration",
            errors=format_validation_errors(e),
            suggestions=[
                "interval_seconds must be an integer of at least 1",
                "api_address and api_token must both be set to non-empty values",
            ],
        ) from None


def format_validation_errors(error: ValidationError) -> List[str]:
    """
    Turn pydantic errors into readable messages.

    Input values are never echoed back, since a rejected field may hold the
    API token.
    """
    messages = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"]) or "configuration"
        error_type = item["type"]

        if error_type == "missing":
            messages.append(f"Missing required field: {field_path}")
        elif error_type.endswith("_type"):
            expected = error_type[: -len("_type")]
            messages.append(f"Invalid type for '{field_path}': expected {expected}")
        elif "enum" in error_type:
            messages.append(f"Invalid value for '{field_path}': {item['msg']}")
        else:
            messages.append(f"{field_path}: {item['msg']}")
    return messages


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = ConfigDict(use_enum_values=True)


class AppConfig(BaseModel):
    """Root of the YAML configuration file.

    Secrets are not part of the file; the API token comes from the
    environment (see ``EnvironmentConfig``).
    """

    interval: Union[int, str] = Field("15m", description="Time between discovery runs")
    server_mode: bool = Field(False, description="Run the sync executor in server mode")
    api_address: Optional[str] = Field(
        None, description="Snipe-IT API base URL; SNIPE_API_ADDRESS overrides it"
    )
    subnet: str = Field("", description="Subnet to scan, empty for auto-detect")
    executor: Optional[str] = Field(
        None, description="Textual reference 'package.module:callable' of the sync executor"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    # Computed from ``interval``
    interval_seconds: Optional[int] = None

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: Union[int, str]) -> Union[int, str]:
        try:
            validate_interval_range(parse_interval(v))
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @field_validator("subnet", mode="before")
    @classmethod
    def normalize_subnet(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("executor")
    @classmethod
    def validate_executor_reference(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        stripped = v.strip()
        module, sep, attr = stripped.partition(":")
        if not sep or not module or not attr:
            raise ValueError(
                f"executor must look like 'package.module:callable', got '{stripped}'"
            )
        return stripped

    def model_post_init(self, __context: Any) -> None:
        self.interval_seconds = parse_interval(self.interval)
