from skycast.exceptions.weather.weather_service_error import WeatherServiceError


class UpstreamError(WeatherServiceError):
    """Exception for failures explicitly reported by the upstream service."""

    pass
