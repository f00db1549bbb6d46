from skycast.exceptions.weather.weather_service_error import WeatherServiceError


class TransportError(WeatherServiceError):
    """Exception raised when no response reached the client."""

    pass
