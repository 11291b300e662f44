"""Logging configuration for the SnipeSniff service."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Literal, Set

from . import REDACTION_MARKER
from .context import get_log_context

LogFormat = Literal["json", "key-value"]

SERVICE_NAME = "snipesniff"

# LogRecord attributes that are never treated as structured extras
_RECORD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "asctime",
    "exc_info", "exc_text", "stack_info", "taskName",
}

_TRACEBACK_FORMATTER = logging.Formatter()


class ContextualFilter(logging.Filter):
    """Stamp records with static service metadata and the active log context.

    Fields already present on the record (passed through ``extra``) are left
    untouched, so call-site values win over context values.
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment

        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class SecretRedactionFilter(logging.Filter):
    """Replace registered secret values with the redaction marker.

    Applies to the rendered message, every string extra, and the rendered
    traceback, so a token that leaks into a third-party log call (APScheduler
    job failure tracebacks, request errors from the sync executor) never
    reaches the sink. The exception object is dropped from the record once
    its traceback text has been scrubbed.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self._secrets: Set[str] = set()
        for secret in secrets:
            self.add_secret(secret)

    def add_secret(self, secret: str) -> None:
        """Register a value to scrub. Empty values are ignored."""
        if secret:
            self._secrets.add(secret)

    def redact(self, text: str) -> str:
        # Longest first so a secret containing another is replaced whole
        for secret in sorted(self._secrets, key=len, reverse=True):
            text = text.replace(secret, REDACTION_MARKER)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True

        # Render the traceback now; the exception object itself may hold the secret
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = _TRACEBACK_FORMATTER.formatException(record.exc_info)
            record.exc_info = None
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        if record.stack_info:
            record.stack_info = self.redact(record.stack_info)

        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None

        for key, value in list(record.__dict__.items()):
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if isinstance(value, str):
                setattr(record, key, self.redact(value))

        return True


class JSONFormatter(logging.Formatter):
    """Single-line JSON formatter with stable field names."""

    STANDARD_ATTRS = _RECORD_ATTRS

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in self.STANDARD_ATTRS or key.startswith("_"):
                continue
            if isinstance(value, datetime):
                log_obj[key] = value.isoformat()
            elif isinstance(value, (str, int, float, bool, type(None), list, dict)):
                log_obj[key] = value
            else:
                log_obj[key] = str(value)

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            log_obj["exc_info"] = record.exc_text
        if record.stack_info:
            log_obj["stack_info"] = record.stack_info

        return json.dumps(log_obj, ensure_ascii=False, default=str)

    def _format_timestamp(self, created: float) -> str:
        """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class KeyValueFormatter(logging.Formatter):
    """Human-readable formatter.

    Produces lines like:
    2026-10-19 12:00:00 [INFO] snipesniff.scheduler.service: Scheduler started event=scheduler.started
    """

    SKIP_ATTRS = _RECORD_ATTRS | {"service", "environment"}

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        extras = []
        for key, value in sorted(record.__dict__.items()):
            if key in self.SKIP_ATTRS or key.startswith("_"):
                continue
            extras.append(f"{key}={self._format_value(value)}")

        if extras:
            return f"{base} {' '.join(extras)}"
        return base

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, str):
            if " " in value or "=" in value or "," in value:
                return f'"{value}"'
            return value
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, bool):
            return str(value).lower()
        if value is None:
            return "null"
        return str(value)


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    environment: str = "local",
    secrets: Iterable[str] = (),
) -> SecretRedactionFilter:
    """
    Configure the root logger with the specified level and format.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'json' for JSON lines or 'key-value' for human-readable
        environment: Environment label (production, staging, local)
        secrets: Values scrubbed from every record (e.g. the API token)

    Returns:
        The redaction filter attached to the handler, so callers can
        register further secrets later.

    Raises:
        ValueError: If level or format_type is invalid
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    if format_type not in ("json", "key-value"):
        raise ValueError(f"Invalid log format: {format_type}. Must be 'json' or 'key-value'")

    handler = logging.StreamHandler(sys.stdout)

    if format_type == "json":
        formatter = JSONFormatter()
    else:
        formatter = KeyValueFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    handler.setFormatter(formatter)

    # Context first, redaction last, so context values are scrubbed too
    handler.addFilter(ContextualFilter(service=SERVICE_NAME, environment=environment))
    redaction_filter = SecretRedactionFilter(secrets)
    handler.addFilter(redaction_filter)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # APScheduler is chatty at INFO ("Added job", "Running job") on every tick
    logging.getLogger("apscheduler").setLevel(max(numeric_level, logging.WARNING))

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": level.upper(),
            "log_format": format_type,
        },
    )

    return redaction_filter
