import asyncio

import pytest

from skycast.services.schedule_service import ScheduleService


class TestScheduleService:
    """Test cases for the ScheduleService class."""

    @pytest.mark.asyncio
    async def test_schedule_once_runs_after_delay(self):
        service = ScheduleService()
        calls = []

        async def job(value):
            calls.append(value)

        service.start()
        try:
            service.schedule_once("once", job, 0.05, args=["paris"])
            assert service.has_job("once")

            await asyncio.sleep(0.5)

            assert calls == ["paris"]
            assert not service.has_job("once")
            assert service.job_history[-1]["job_id"] == "once"
            assert service.job_history[-1]["status"] == "success"
        finally:
            await service.stop()

    @pytest.mark.asyncio
    async def test_same_id_replaces_job(self):
        service = ScheduleService()

        async def job():
            return None

        service.start()
        try:
            service.schedule_interval("refresh", job, 300)
            service.schedule_interval("refresh", job, 300)

            status = service.get_job_status()
            assert status["running"] is True
            assert list(status["jobs"]) == ["refresh"]
        finally:
            await service.stop()

    @pytest.mark.asyncio
    async def test_cancel(self):
        service = ScheduleService()

        async def job():
            return None

        service.start()
        try:
            service.schedule_once("once", job, 60)

            assert service.cancel("once") is True
            assert service.cancel("once") is False
            assert not service.has_job("once")
        finally:
            await service.stop()

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self):
        service = ScheduleService()

        service.start()
        service.start()
        assert service.running is True

        await service.stop()
        assert service.running is False
        await service.stop()
        assert service.running is False

    @pytest.mark.asyncio
    async def test_restart_after_stop(self):
        service = ScheduleService()
        calls = []

        async def job():
            calls.append("ran")

        service.start()
        service.schedule_once("stale", job, 0.05)
        await service.stop()

        service.start()
        try:
            assert service.running is True
            assert not service.has_job("stale")

            service.schedule_once("fresh", job, 0.05)
            await asyncio.sleep(0.5)

            assert calls == ["ran"]
        finally:
            await service.stop()
