from skycast.exceptions.weather.weather_service_error import WeatherServiceError


class AuthError(WeatherServiceError):
    """Exception for an invalid or missing access credential."""

    pass
