from unittest.mock import AsyncMock

import pytest

from skycast.models.request import RequestMode
from skycast.services.retry_coordinator import RETRY_JOB_ID, RETRY_NOTICE, RetryCoordinator


class TestRetryCoordinator:
    """Test cases for the RetryCoordinator class."""

    @pytest.mark.asyncio
    async def test_schedule_runs_callback_once_in_live_mode(self, fake_scheduler):
        callback = AsyncMock()
        coordinator = RetryCoordinator(fake_scheduler, delay_seconds=2.0)

        notice = coordinator.schedule("paris", callback)

        assert notice == RETRY_NOTICE
        assert coordinator.pending is True
        assert fake_scheduler.jobs[RETRY_JOB_ID].next_run == 2.0

        await fake_scheduler.advance(10)

        callback.assert_awaited_once_with("paris", RequestMode.LIVE)
        assert coordinator.pending is False

    @pytest.mark.asyncio
    async def test_rescheduling_replaces_pending_retry(self, fake_scheduler):
        callback = AsyncMock()
        coordinator = RetryCoordinator(fake_scheduler, delay_seconds=2.0)

        coordinator.schedule("paris", callback)
        coordinator.schedule("rome", callback)
        await fake_scheduler.advance(5)

        callback.assert_awaited_once_with("rome", RequestMode.LIVE)

    @pytest.mark.asyncio
    async def test_cancel(self, fake_scheduler):
        callback = AsyncMock()
        coordinator = RetryCoordinator(fake_scheduler, delay_seconds=2.0)

        assert coordinator.cancel() is False
        coordinator.schedule("paris", callback)
        assert coordinator.cancel() is True
        await fake_scheduler.advance(5)

        callback.assert_not_awaited()
        assert coordinator.pending is False

    def test_cancel_unless_keeps_retry_for_same_location(self, fake_scheduler):
        coordinator = RetryCoordinator(fake_scheduler, delay_seconds=2.0)
        coordinator.schedule("paris", AsyncMock())

        assert coordinator.cancel_unless("paris") is False
        assert fake_scheduler.has_job(RETRY_JOB_ID)

        assert coordinator.cancel_unless("rome") is True
        assert not fake_scheduler.has_job(RETRY_JOB_ID)
