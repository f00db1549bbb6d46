from skycast.exceptions.weather.weather_service_error import WeatherServiceError


class InputError(WeatherServiceError):
    """Exception for queries rejected before any network call."""

    pass
