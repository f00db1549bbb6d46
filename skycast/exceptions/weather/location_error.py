from skycast.exceptions.weather.weather_service_error import WeatherServiceError


class LocationError(WeatherServiceError):
    """Exception raised when the geolocation provider is denied or unavailable."""

    pass
