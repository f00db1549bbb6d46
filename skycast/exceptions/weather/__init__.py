from skycast.exceptions.weather.auth_error import AuthError
from skycast.exceptions.weather.input_error import InputError
from skycast.exceptions.weather.location_error import LocationError
from skycast.exceptions.weather.tier_error import TierError
from skycast.exceptions.weather.transport_error import TransportError
from skycast.exceptions.weather.upstream_error import UpstreamError
from skycast.exceptions.weather.weather_service_error import WeatherServiceError

__all__ = [
    "AuthError",
    "InputError",
    "LocationError",
    "TierError",
    "TransportError",
    "UpstreamError",
    "WeatherServiceError",
]
