"""Construction of the APScheduler engine owned by each SnifferService."""

import logging
from datetime import timezone

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.background import BackgroundScheduler

ENGINE_NAME = "SnifferSchedule"
JOB_ID = "SniffJob"
JOB_NAME = "Network discovery and Snipe-IT sync"


def create_engine() -> BackgroundScheduler:
    """
    Build a stopped BackgroundScheduler for a single recurring job.

    - In-memory job store: nothing survives a restart
    - One worker thread: invocations never run concurrently
    - max_instances=1: a firing that comes due while the previous run is
      still executing is skipped, not queued
    - coalesce=True: firings missed while the process was stalled collapse
      into one run
    """
    return BackgroundScheduler(
        jobstores={"default": MemoryJobStore()},
        executors={"default": ThreadPoolExecutor(max_workers=1)},
        job_defaults={
            "max_instances": 1,
            "coalesce": True,
        },
        timezone=timezone.utc,
        daemon=True,
        logger=logging.getLogger(f"apscheduler.scheduler.{ENGINE_NAME}"),
    )
