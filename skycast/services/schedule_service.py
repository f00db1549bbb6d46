import asyncio
from collections import deque
from datetime import datetime, timedelta
from typing import Any, Callable, Deque, Dict, Optional, Sequence

import structlog
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from skycast.exceptions.scheduler import JobSchedulingError

logger = structlog.get_logger(__name__)

MAX_HISTORY_ENTRIES = 100


class ScheduleService:
    """
    Service for managing the delayed retry and auto refresh jobs.

    Jobs are keyed by id and always added with ``replace_existing``, so
    scheduling an id that is already pending replaces it instead of adding a
    second timer.
    """

    def __init__(self):
        """Initialize the schedule service."""
        job_store = {"default": MemoryJobStore()}
        executors = {"default": AsyncIOExecutor()}
        job_defaults = {"coalesce": True, "max_instances": 1, "misfire_grace_time": 30}

        self.scheduler = AsyncIOScheduler(
            jobstores=job_store,
            executors=executors,
            job_defaults=job_defaults,
        )

        self.job_history: Deque[Dict[str, Any]] = deque(maxlen=MAX_HISTORY_ENTRIES)
        self.scheduler.add_listener(self._record_run, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

        logger.info("Schedule service initialized")

    def _record_run(self, event):
        """Keep the outcome of every retry or refresh run."""
        entry = {
            "job_id": event.job_id,
            "run_time": event.scheduled_run_time.isoformat(),
            "status": "error" if event.exception else "success",
        }
        if event.exception:
            entry["exception"] = str(event.exception)
            logger.error("Scheduled job failed", traceback=event.traceback, **entry)
        else:
            logger.debug("Scheduled job finished", **entry)
        self.job_history.append(entry)

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self):
        """Start the scheduler. Must be called from within a running event loop."""
        if self.scheduler.running:
            return
        logger.info("Starting scheduler service")
        try:
            self.scheduler.start()
        except Exception as e:
            logger.error("Failed to start scheduler", error=str(e))
            raise JobSchedulingError(f"Failed to start scheduler: {str(e)}")

    async def stop(self):
        """
        Stop the scheduler, dropping any pending jobs.

        AsyncIOScheduler finishes shutting down in a callback on the event loop,
        so this yields once before returning; afterwards ``running`` is False and
        the scheduler can be started again.
        """
        if not self.scheduler.running:
            return
        try:
            self.scheduler.remove_all_jobs()
            self.scheduler.shutdown(wait=False)
        except Exception as e:
            logger.error("Failed to stop scheduler", error=str(e))
            raise JobSchedulingError(f"Failed to stop scheduler: {str(e)}")

        await asyncio.sleep(0)
        logger.info("Scheduler stopped", running=self.scheduler.running)

    def schedule_once(
        self,
        job_id: str,
        func: Callable,
        delay_seconds: float,
        args: Optional[Sequence[Any]] = None,
    ):
        """Run ``func`` once after ``delay_seconds``, replacing any job with the same id."""
        run_date = datetime.now() + timedelta(seconds=delay_seconds)
        try:
            self.scheduler.add_job(
                func,
                trigger=DateTrigger(run_date=run_date),
                args=list(args or []),
                id=job_id,
                name=job_id,
                replace_existing=True,
            )
        except Exception as e:
            logger.error("Failed to schedule job", job_id=job_id, error=str(e))
            raise JobSchedulingError(f"Failed to schedule {job_id}: {str(e)}")
        logger.info("One-shot job scheduled", job_id=job_id, run_date=run_date.isoformat())

    def schedule_interval(
        self,
        job_id: str,
        func: Callable,
        seconds: float,
        args: Optional[Sequence[Any]] = None,
    ):
        """Run ``func`` every ``seconds``, replacing any job with the same id."""
        try:
            self.scheduler.add_job(
                func,
                trigger=IntervalTrigger(seconds=seconds),
                args=list(args or []),
                id=job_id,
                name=job_id,
                replace_existing=True,
            )
        except Exception as e:
            logger.error("Failed to schedule job", job_id=job_id, error=str(e))
            raise JobSchedulingError(f"Failed to schedule {job_id}: {str(e)}")
        logger.info("Interval job scheduled", job_id=job_id, interval_seconds=seconds)

    def cancel(self, job_id: str) -> bool:
        """Remove a job; returns False if it was not scheduled."""
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        logger.info("Job cancelled", job_id=job_id)
        return True

    def has_job(self, job_id: str) -> bool:
        return self.scheduler.get_job(job_id) is not None

    def get_job_status(self) -> Dict[str, Any]:
        """Pending jobs with their next run time, plus the latest runs."""
        return {
            "running": self.scheduler.running,
            "jobs": {
                job.id: job.next_run_time.isoformat() if getattr(job, "next_run_time", None) else None
                for job in self.scheduler.get_jobs()
            },
            "recent_runs": list(self.job_history)[-10:],
        }


schedule_service = ScheduleService()
