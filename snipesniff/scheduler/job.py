"""Job payload and invocation wrapper for the discovery-and-sync executor."""

import importlib
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable
from uuid import uuid4

from snipesniff.config.exceptions import ConfigurationError
from snipesniff.config.models import RunConfiguration
from snipesniff.logging import get_logger
from snipesniff.logging.context import log_context
from snipesniff.utils.timestamps import format_timestamp_for_log, utc_now

logger = get_logger(__name__, component="job")


@dataclass(frozen=True)
class JobPayload:
    """
    Read-only settings handed to the executor on every firing.

    Attributes:
        server_mode: Executor-defined mode flag
        api_address: Snipe-IT API base URL
        api_token: Snipe-IT API token (hidden from repr)
        subnet: Subnet to scan, empty for auto-detect
    """

    server_mode: bool
    api_address: str
    api_token: str = field(repr=False)
    subnet: str

    @classmethod
    def from_configuration(cls, config: RunConfiguration) -> "JobPayload":
        return cls(
            server_mode=config.server_mode,
            api_address=config.api_address,
            api_token=config.api_token.get_secret_value(),
            subnet=config.subnet,
        )


# The discovery-and-sync work; outcomes are reported through its own logging
SyncExecutor = Callable[[JobPayload], Any]


@dataclass(frozen=True)
class JobInvocation:
    """One execution of the executor."""

    run_id: str
    fired_at: datetime
    payload: JobPayload


def run_invocation(executor: SyncExecutor, payload: JobPayload) -> JobInvocation:
    """
    Execute the executor once with a fresh run id in the log context.

    Failures are logged and re-raised so the engine records them; the
    trigger keeps firing regardless of the outcome.

    Returns:
        The JobInvocation that was executed
    """
    invocation = JobInvocation(run_id=uuid4().hex, fired_at=utc_now(), payload=payload)

    with log_context(run_id=invocation.run_id):
        logger.info(
            "Discovery job started",
            extra={
                "event": "job.started",
                "fired_at": format_timestamp_for_log(invocation.fired_at),
                "server_mode": payload.server_mode,
                "subnet": payload.subnet or "auto",
            },
        )
        started = time.monotonic()

        try:
            executor(payload)
        except Exception as e:
            logger.error(
                f"Discovery job failed: {e}",
                extra={
                    "event": "job.failed",
                    "error_type": type(e).__name__,
                    "duration_ms": int((time.monotonic() - started) * 1000),
                },
            )
            raise

        logger.info(
            "Discovery job completed",
            extra={
                "event": "job.completed",
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )

    return invocation


def _load_reference(reference: str) -> Any:
    module_name, _, attr_path = reference.partition(":")
    if not module_name or not attr_path:
        raise ValueError("expected the form 'package.module:callable'")

    obj = importlib.import_module(module_name)
    for name in attr_path.split("."):
        obj = getattr(obj, name)
    return obj


def resolve_executor(reference: str) -> SyncExecutor:
    """
    Import the executor named by a 'package.module:callable' reference.

    The part after the colon may be a dotted path, e.g. 'pkg.sync:Client.run'.

    Raises:
        ConfigurationError: If the reference cannot be imported or is not callable
    """
    try:
        executor = _load_reference(reference)
    except (ImportError, AttributeError, ValueError) as e:
        raise ConfigurationError(
            f"Cannot load executor '{reference}': {e}",
            suggestions=[
                "Use the form 'package.module:callable'",
                "Ensure the executor's package is installed in this environment",
            ],
        ) from e

    if not callable(executor):
        raise ConfigurationError(
            f"Executor '{reference}' is not callable (got {type(executor).__name__})",
            suggestions=["Point executor at a function or a class implementing __call__"],
        )

    return executor
