from skycast.exceptions.base import SkyCastError


class WeatherServiceError(SkyCastError):
    """Base exception for weather pipeline errors."""

    pass
