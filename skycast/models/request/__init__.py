from skycast.models.request.request import RawResponse, RequestMode, TransportRoute, WeatherRequest

__all__ = ["RawResponse", "RequestMode", "TransportRoute", "WeatherRequest"]
