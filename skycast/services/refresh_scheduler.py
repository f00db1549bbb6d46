from typing import Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

REFRESH_JOB_ID = "auto_refresh"


class RefreshScheduler:
    """Re-issues the last resolved location on a fixed interval while enabled."""

    def __init__(
        self,
        scheduler,
        interval_seconds: float,
        callback: Callable[[str], Awaitable[object]],
        job_id: str = REFRESH_JOB_ID,
    ):
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.job_id = job_id
        self.enabled = False
        self.location: Optional[str] = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable(self, location: Optional[str] = None):
        self.enabled = True
        self.sync(location if location is not None else self.location)

    def disable(self):
        self.enabled = False
        self._stop()

    def sync(self, location: Optional[str]):
        """
        Reconcile the timer with the current report.

        Args:
            location: Name of the last resolved location, None if no report is held
        """
        self.location = location
        if self.enabled and location:
            if not self._active:
                self.scheduler.schedule_interval(self.job_id, self._fire, self.interval_seconds)
                self._active = True
                logger.info("Auto refresh started", location=location, interval_seconds=self.interval_seconds)
        else:
            self._stop()

    def _stop(self):
        if self._active:
            self.scheduler.cancel(self.job_id)
            self._active = False
            logger.info("Auto refresh stopped")

    async def _fire(self):
        if not self.location:
            return None
        logger.info("Auto refreshing report", location=self.location)
        return await self.callback(self.location)
