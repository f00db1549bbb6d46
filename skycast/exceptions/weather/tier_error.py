from skycast.exceptions.weather.weather_service_error import WeatherServiceError


class TierError(WeatherServiceError):
    """Exception for features not permitted on the credential's subscription tier."""

    pass
