from typing import Awaitable, Callable, Optional

import structlog

from skycast.models.request import RequestMode

logger = structlog.get_logger(__name__)

RETRY_JOB_ID = "tier_downgrade_retry"
RETRY_NOTICE = "Historical data unavailable on this plan. Retrying with live data..."

RetryCallback = Callable[[str, RequestMode], Awaitable[object]]


class RetryCoordinator:
    """
    Schedules the single LIVE retry that follows a tier-restricted response.

    Only one retry is ever pending; scheduling again replaces it. The retry
    always runs in LIVE mode.
    """

    retry_mode = RequestMode.LIVE

    def __init__(self, scheduler, delay_seconds: float, job_id: str = RETRY_JOB_ID):
        self.scheduler = scheduler
        self.delay_seconds = delay_seconds
        self.job_id = job_id
        self.pending_query: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self.pending_query is not None

    def schedule(self, query: str, callback: RetryCallback) -> str:
        """
        Schedule ``callback(query, LIVE)`` after the fixed delay.

        Returns:
            The interim notice to show while the retry is pending
        """
        self.pending_query = query
        self.scheduler.schedule_once(self.job_id, self._fire, self.delay_seconds, args=[query, callback])
        logger.info(
            "Tier restricted, retry scheduled",
            query=query,
            mode=self.retry_mode.value,
            delay_seconds=self.delay_seconds,
        )
        return RETRY_NOTICE

    async def _fire(self, query: str, callback: RetryCallback):
        self.pending_query = None
        logger.info("Running tier downgrade retry", query=query)
        return await callback(query, self.retry_mode)

    def cancel(self) -> bool:
        """Drop the pending retry, if any."""
        if self.pending_query is None:
            return False
        logger.info("Cancelling pending retry", query=self.pending_query)
        self.pending_query = None
        return self.scheduler.cancel(self.job_id)

    def cancel_unless(self, query: str) -> bool:
        """Drop the pending retry when it targets a different location."""
        if self.pending_query is None or self.pending_query == query:
            return False
        return self.cancel()
