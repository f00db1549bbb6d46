from typing import Optional, Protocol, Tuple

import httpx
import structlog

from skycast.config.config import Config, config as default_config
from skycast.exceptions.weather import LocationError

logger = structlog.get_logger(__name__)

LOCATION_DENIED_MESSAGE = "Location access denied. Please enter city manually."

Coordinates = Tuple[float, float]


class GeolocationProvider(Protocol):
    """Anything that can resolve the client's current coordinates."""

    async def resolve(self) -> Coordinates:
        """Return ``(latitude, longitude)`` or raise LocationError."""
        ...


class StaticGeolocationProvider:
    """Coordinates fixed by configuration."""

    def __init__(self, latitude: Optional[float], longitude: Optional[float]):
        self.latitude = latitude
        self.longitude = longitude

    async def resolve(self) -> Coordinates:
        if self.latitude is None or self.longitude is None:
            raise LocationError(LOCATION_DENIED_MESSAGE)
        return self.latitude, self.longitude


class IPGeolocationProvider:
    """Coordinates looked up from the host's public IP (ip-api.com style JSON)."""

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    async def resolve(self) -> Coordinates:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Geolocation lookup failed", url=self.url, error=str(e))
            raise LocationError(LOCATION_DENIED_MESSAGE)

        if not isinstance(data, dict) or data.get("status", "success") != "success":
            logger.warning("Geolocation lookup refused", url=self.url)
            raise LocationError(LOCATION_DENIED_MESSAGE)

        latitude = data.get("lat", data.get("latitude"))
        longitude = data.get("lon", data.get("longitude"))
        try:
            return float(latitude), float(longitude)
        except (TypeError, ValueError):
            raise LocationError(LOCATION_DENIED_MESSAGE)


def build_geolocation_provider(settings: Optional[Config] = None) -> GeolocationProvider:
    """Pick the IP lookup when a URL is configured, static coordinates otherwise."""
    settings = settings or default_config
    if settings.geolocation_url:
        return IPGeolocationProvider(settings.geolocation_url)
    return StaticGeolocationProvider(settings.default_latitude, settings.default_longitude)
