from skycast.exceptions.base import SkyCastError
from skycast.exceptions.scheduler import JobSchedulingError
from skycast.exceptions.storage import StorageError
from skycast.exceptions.weather import (
    AuthError,
    InputError,
    LocationError,
    TierError,
    TransportError,
    UpstreamError,
    WeatherServiceError,
)

__all__ = [
    "SkyCastError",
    "JobSchedulingError",
    "StorageError",
    "AuthError",
    "InputError",
    "LocationError",
    "TierError",
    "TransportError",
    "UpstreamError",
    "WeatherServiceError",
]
