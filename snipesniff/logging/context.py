"""Scoped contextual fields for structured log records.

Fields pushed here (run_id, fired_at, ...) are picked up by
``ContextualFilter`` and attached to every record emitted inside the scope.
Storage is a ContextVar, so each scheduler worker thread sees its own copy.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("snipesniff_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current context."""
    return LogContextVar.get().copy()


def push_log_context(**fields: Any) -> Token:
    """Merge ``fields`` over the active context.

    Returns:
        Token to hand back to ``pop_log_context`` to restore the previous state.
    """
    merged = {**LogContextVar.get(), **fields}
    return LogContextVar.set(merged)


def pop_log_context(token: Token) -> None:
    """Restore the context captured by ``push_log_context``."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every active field. Mostly useful in tests."""
    LogContextVar.set({})


class log_context:
    """Context manager pushing fields for the duration of a block.

    Example:
        >>> with log_context(run_id="9f2c", subnet="10.0.0.0/24"):
        ...     logger.info("Discovery started")  # record carries run_id and subnet
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
