"""Scheduler service driving periodic discovery-and-sync runs."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from apscheduler.events import EVENT_JOB_MAX_INSTANCES, EVENT_JOB_MISSED, JobEvent
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from snipesniff.config.models import RunConfiguration, build_run_configuration
from snipesniff.logging import get_logger
from snipesniff.utils.timestamps import format_timestamp_for_log, utc_now

from .engine import JOB_ID, JOB_NAME, create_engine
from .exceptions import AlreadyRunningError, EngineError, ServiceClosedError
from .job import JobInvocation, JobPayload, SyncExecutor, run_invocation

logger = get_logger(__name__, component="scheduler")


class ServiceState(str, Enum):
    """Lifecycle states of a SnifferService."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"
    CLOSED = "closed"


class SnifferService:
    """
    Runs the discovery-and-sync executor on a fixed interval.

    Each instance owns its own APScheduler engine (built by ``engine_factory``)
    with a single recurring job. Lifecycle contract:

    - ``start()`` arms the trigger; the first run happens one full interval
      later, then every ``interval_seconds``. Starting a running service
      raises AlreadyRunningError.
    - ``stop()`` removes the trigger and shuts the engine down. It does not
      interrupt a run in progress. Safe to call repeatedly or before start.
    - ``close()`` stops if needed and makes the instance unusable. Also
      available as a context manager.

    A firing that comes due while the previous run is still executing is
    skipped and logged; runs never overlap.
    """

    def __init__(
        self,
        interval_seconds: int,
        server_mode: bool,
        api_address: str,
        api_token: str,
        subnet: Optional[str] = "",
        *,
        executor: SyncExecutor,
        engine_factory: Callable[[], BaseScheduler] = create_engine,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Validate configuration and acquire a stopped engine.

        Args:
            interval_seconds: Seconds between runs, at least 1
            server_mode: Passed through to the executor
            api_address: Snipe-IT API base URL, non-empty
            api_token: Snipe-IT API token, non-empty; never logged
            subnet: Subnet to scan, empty for auto-detect
            executor: Callable receiving a JobPayload on every firing
            engine_factory: Builds a fresh, stopped scheduling engine
            clock: Source of the current UTC time used to anchor the trigger

        Raises:
            ConfigurationError: If any configuration value is invalid
            EngineError: If the engine cannot be created
        """
        self.config: RunConfiguration = build_run_configuration(
            interval_seconds=interval_seconds,
            server_mode=server_mode,
            api_address=api_address,
            api_token=api_token,
            subnet=subnet,
        )
        self.executor = executor
        self._payload = JobPayload.from_configuration(self.config)
        self._engine_factory = engine_factory
        self._clock = clock
        self._state = ServiceState.NOT_STARTED

        for name, value in self.config.log_items():
            logger.info(
                f"Configuration parameter {name} set to {value}",
                extra={"event": "config.parameter", "parameter": name},
            )

        self._engine: Optional[BaseScheduler] = self._acquire_engine()

    @classmethod
    def from_configuration(
        cls,
        config: RunConfiguration,
        executor: SyncExecutor,
        engine_factory: Callable[[], BaseScheduler] = create_engine,
        clock: Callable[[], datetime] = utc_now,
    ) -> "SnifferService":
        """Build a service from an already validated RunConfiguration."""
        return cls(
            interval_seconds=config.interval_seconds,
            server_mode=config.server_mode,
            api_address=config.api_address,
            api_token=config.api_token.get_secret_value(),
            subnet=config.subnet,
            executor=executor,
            engine_factory=engine_factory,
            clock=clock,
        )

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def interval_seconds(self) -> int:
        return self.config.interval_seconds

    def is_running(self) -> bool:
        return self._state is ServiceState.RUNNING

    def start(self) -> None:
        """
        Start the engine and register the recurring job.

        Returns once the trigger is armed. On any engine failure the engine
        is shut down and the service is left stopped.

        Raises:
            ServiceClosedError: If the service was closed
            AlreadyRunningError: If the service is already running
            EngineError: If the engine fails to start or to register the job
        """
        if self._state is ServiceState.CLOSED:
            raise ServiceClosedError("Cannot start a closed SnifferService")
        if self._state is ServiceState.RUNNING:
            raise AlreadyRunningError("SnifferService is already running")

        if self._engine is None:
            self._engine = self._acquire_engine()
        engine = self._engine

        try:
            engine.start()
        except Exception as e:
            self._engine = None
            self._state = ServiceState.STOPPED
            raise EngineError(f"Failed to start scheduling engine: {e}") from e

        interval = self.config.interval_seconds
        first_run = self._clock() + timedelta(seconds=interval)

        try:
            engine.add_listener(self._log_skipped_run, EVENT_JOB_MAX_INSTANCES | EVENT_JOB_MISSED)
            engine.add_job(
                func=run_invocation,
                trigger=IntervalTrigger(
                    seconds=interval,
                    start_date=first_run,
                    timezone=timezone.utc,
                ),
                args=(self.executor, self._payload),
                id=JOB_ID,
                name=JOB_NAME,
                replace_existing=True,
                misfire_grace_time=interval,
                next_run_time=first_run,
            )
        except Exception as e:
            self._abandon_engine(engine)
            raise EngineError(f"Failed to schedule discovery job: {e}") from e

        self._state = ServiceState.RUNNING

        logger.info(
            f"Scheduler started with interval: {interval} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": interval,
                "next_run_time": format_timestamp_for_log(first_run),
            },
        )

    def stop(self, wait: bool = False) -> None:
        """
        Remove the trigger and shut the engine down.

        No-op unless the service is running. A run already in progress is
        not interrupted; with ``wait=True`` this call blocks until it ends.

        Raises:
            EngineError: If the engine fails to shut down. The service is
                still considered stopped and the engine is discarded.
        """
        if self._state is not ServiceState.RUNNING:
            return

        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        engine = self._engine
        self._engine = None
        self._state = ServiceState.STOPPED

        try:
            try:
                engine.remove_job(JOB_ID)
            finally:
                engine.shutdown(wait=wait)
        except Exception as e:
            raise EngineError(f"Failed to shut down scheduling engine: {e}") from e

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def close(self) -> None:
        """Stop if running and release the engine. Idempotent."""
        if self._state is ServiceState.CLOSED:
            return

        try:
            self.stop()
        finally:
            self._engine = None
            self._state = ServiceState.CLOSED

    def run_now(self) -> JobInvocation:
        """
        Execute one run synchronously in the calling thread.

        Independent of the trigger; useful for one-shot runs and diagnostics.

        Raises:
            ServiceClosedError: If the service was closed
            Exception: Whatever the executor raises
        """
        if self._state is ServiceState.CLOSED:
            raise ServiceClosedError("Cannot run a closed SnifferService")

        logger.info("Triggering immediate discovery run", extra={"event": "scheduler.run_now"})
        return run_invocation(self.executor, self._payload)

    def next_run_time(self) -> Optional[datetime]:
        """Next scheduled firing, or None when not running."""
        if self._state is not ServiceState.RUNNING or self._engine is None:
            return None
        job = self._engine.get_job(JOB_ID)
        return job.next_run_time if job else None

    def __enter__(self) -> "SnifferService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def _acquire_engine(self) -> BaseScheduler:
        try:
            return self._engine_factory()
        except Exception as e:
            raise EngineError(f"Failed to create scheduling engine: {e}") from e

    def _abandon_engine(self, engine: BaseScheduler) -> None:
        """Shut down an engine whose job could not be registered."""
        self._engine = None
        self._state = ServiceState.STOPPED
        try:
            engine.shutdown(wait=False)
        except Exception:
            logger.warning(
                "Engine shutdown failed after job registration error",
                extra={"event": "scheduler.cleanup_failed"},
                exc_info=True,
            )

    def _log_skipped_run(self, event: JobEvent) -> None:
        if event.job_id != JOB_ID:
            return
        if event.code == EVENT_JOB_MAX_INSTANCES:
            # Submission events carry every run time that was due
            reason = "previous_run_active"
            run_times = getattr(event, "scheduled_run_times", None) or [None]
            scheduled = run_times[-1]
        else:
            reason = "misfired"
            scheduled = getattr(event, "scheduled_run_time", None)

        logger.warning(
            "Discovery run skipped",
            extra={
                "event": "job.skipped",
                "reason": reason,
                "scheduled_run_time": format_timestamp_for_log(scheduled),
            },
        )
