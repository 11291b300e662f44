"""Errors raised by the scheduler service lifecycle."""


class SchedulerError(Exception):
    """Base class for scheduler lifecycle errors."""


class AlreadyRunningError(SchedulerError):
    """start() was called on a service that is already running."""


class ServiceClosedError(SchedulerError):
    """The service has been closed and cannot be started again."""


class EngineError(SchedulerError):
    """
    The underlying scheduling engine failed to start, stop or register the job.

    The original engine exception is available as ``__cause__``.
    """
