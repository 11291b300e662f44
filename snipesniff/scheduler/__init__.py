"""Recurring scheduling of the discovery-and-sync job."""

from .engine import JOB_ID, create_engine
from .exceptions import AlreadyRunningError, EngineError, SchedulerError, ServiceClosedError
from .job import JobInvocation, JobPayload, SyncExecutor, resolve_executor, run_invocation
from .service import ServiceState, SnifferService

__all__ = [
    "SnifferService",
    "ServiceState",
    "create_engine",
    "JOB_ID",
    # Job execution
    "JobPayload",
    "JobInvocation",
    "SyncExecutor",
    "run_invocation",
    "resolve_executor",
    # Errors
    "SchedulerError",
    "AlreadyRunningError",
    "EngineError",
    "ServiceClosedError",
]
