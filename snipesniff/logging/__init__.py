"""Structured logging helpers shared by every SnipeSniff component."""

import logging
from typing import Optional

REDACTION_MARKER = "<not displayed>"


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that tags records with a component while keeping call-site extras."""

    def process(self, msg, kwargs):
        # Call-site extra wins over the adapter's defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger, optionally bound to a component name.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into every record

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="scheduler")
        >>> logger.info("Scheduler started", extra={"event": "scheduler.started"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger


__all__ = [
    "REDACTION_MARKER",
    "ComponentLoggerAdapter",
    "get_logger",
]
