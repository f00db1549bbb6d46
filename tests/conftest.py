import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from skycast.config.config import Config
from skycast.models.request import RawResponse
from skycast.services.geolocation import StaticGeolocationProvider
from skycast.services.weather_orchestrator import WeatherOrchestrator
from skycast.storage.memory import InMemoryKeyValueStore


@dataclass
class FakeJob:
    id: str
    func: Callable
    args: List[Any]
    next_run: float
    interval: Optional[float] = None


@dataclass
class FakeScheduler:
    """Scheduler double with simulated time; mirrors ScheduleService's job API."""

    now: float = 0.0
    jobs: Dict[str, FakeJob] = field(default_factory=dict)
    fired: List[str] = field(default_factory=list)

    def schedule_once(self, job_id, func, delay_seconds, args=None):
        self.jobs[job_id] = FakeJob(job_id, func, list(args or []), self.now + delay_seconds)

    def schedule_interval(self, job_id, func, seconds, args=None):
        self.jobs[job_id] = FakeJob(job_id, func, list(args or []), self.now + seconds, interval=seconds)

    def cancel(self, job_id):
        return self.jobs.pop(job_id, None) is not None

    def has_job(self, job_id):
        return job_id in self.jobs

    async def advance(self, seconds: float):
        """Move simulated time forward, running every job that falls due."""
        target = self.now + seconds
        while True:
            due = [job for job in self.jobs.values() if job.next_run <= target]
            if not due:
                break
            job = min(due, key=lambda j: j.next_run)
            self.now = job.next_run
            if job.interval:
                job.next_run += job.interval
            else:
                del self.jobs[job.id]
            self.fired.append(job.id)
            result = job.func(*job.args)
            if inspect.isawaitable(result):
                await result
        self.now = target


@pytest.fixture
def test_config():
    """Config with in-memory storage and fast timers."""
    return Config(
        weatherstack_base_url="http://api.weatherstack.com",
        weatherstack_access_key="test-access-key",
        hosting_scheme="http",
        relay_url="https://skycast.example.com/api/weather",
        retry_delay_seconds=2.0,
        refresh_interval_seconds=300,
        recent_searches_limit=5,
        storage_backend="memory",
        default_latitude=None,
        default_longitude=None,
        geolocation_url=None,
        api_token=None,
    )


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def mock_weather_service():
    """Mock network layer for orchestrator testing."""
    mock_service = AsyncMock()
    mock_service.fetch = AsyncMock()
    return mock_service


@pytest.fixture
def notices():
    return []


@pytest.fixture
def orchestrator(test_config, memory_store, fake_scheduler, mock_weather_service, notices):
    return WeatherOrchestrator(
        store=memory_store,
        scheduler=fake_scheduler,
        settings=test_config,
        weather_service=mock_weather_service,
        geolocation=StaticGeolocationProvider(12.97, 77.59),
        notify=notices.append,
    )


@pytest.fixture
def current_payload():
    """Sample Weatherstack /current response."""
    return {
        "request": {"type": "City", "query": "Bangalore, India", "language": "en", "unit": "m"},
        "location": {
            "name": "Bangalore",
            "country": "India",
            "region": "Karnataka",
            "lat": "12.983",
            "lon": "77.583",
            "timezone_id": "Asia/Kolkata",
            "localtime": "2024-05-01 14:30",
            "localtime_epoch": 1714573800,
            "utc_offset": "5.50",
        },
        "current": {
            "observation_time": "09:00 AM",
            "temperature": 31,
            "weather_code": 116,
            "weather_icons": ["https://cdn.worldweatheronline.com/images/wsymbols01_png_64/wsymbol_0002.png"],
            "weather_descriptions": ["Partly cloudy"],
            "wind_speed": 13,
            "wind_degree": 270,
            "wind_dir": "W",
            "pressure": 1012,
            "precip": 0,
            "humidity": 38,
            "cloudcover": 25,
            "feelslike": 33,
            "uv_index": 8,
            "visibility": 10,
            "is_day": "yes",
        },
    }


@pytest.fixture
def historical_payload(current_payload):
    """Sample Weatherstack /historical response for a single date."""
    return {
        "location": current_payload["location"],
        "current": current_payload["current"],
        "historical": {
            "2024-04-01": {
                "date": "2024-04-01",
                "date_epoch": 1711929600,
                "astro": {"sunrise": "06:17 AM", "sunset": "06:32 PM"},
                "mintemp": 21,
                "maxtemp": 34,
                "avgtemp": 27,
                "totalsnow": 0,
                "sunhour": 11.6,
                "uv_index": 7,
                "hourly": [
                    {
                        "time": "0",
                        "temperature": 23,
                        "wind_speed": 9,
                        "wind_degree": 120,
                        "wind_dir": "ESE",
                        "weather_code": 113,
                        "weather_icons": ["https://cdn.worldweatheronline.com/images/wsymbols01_png_64/wsymbol_0008.png"],
                        "weather_descriptions": ["Clear"],
                        "precip": 0,
                        "humidity": 61,
                        "visibility": 10,
                        "pressure": 1013,
                        "cloudcover": 3,
                        "feelslike": 25,
                        "uv_index": 1,
                    }
                ],
            }
        },
    }


@pytest.fixture
def tier_error_payload():
    """Weatherstack rejection of historical data on the free plan."""
    return {
        "success": False,
        "error": {
            "code": 603,
            "type": "historical_queries_not_supported_on_plan",
            "info": "Your current subscription plan does not support historical weather data.",
        },
    }


@pytest.fixture
def ok_response(current_payload):
    return RawResponse(status_code=200, body=current_payload, text="")
