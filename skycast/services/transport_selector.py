from typing import Any, Dict, Optional

import structlog

from skycast.config.config import Config, config as default_config
from skycast.exceptions.weather import AuthError
from skycast.models.request import RequestMode, TransportRoute, WeatherRequest

logger = structlog.get_logger(__name__)

# Fixed granularity attached to every historical request
HISTORICAL_PARAMS: Dict[str, Any] = {"hourly": 1, "interval": 3}


def resolve_mode(use_historical: bool, historical_date: Optional[str]) -> RequestMode:
    """HISTORICAL only when requested and a date is present."""
    if use_historical and historical_date:
        return RequestMode.HISTORICAL
    return RequestMode.LIVE


class TransportSelector:
    """
    Builds the request descriptor for a normalized query.

    Weatherstack's free tier is reachable only over plain HTTP. A client served
    over HTTPS cannot call it directly, so secure hosting contexts go through
    the same-origin relay, which passes the operation on as the ``endpoint``
    parameter.
    """

    def __init__(self, settings: Optional[Config] = None):
        self.settings = settings or default_config

    def select_route(self, secure: bool) -> TransportRoute:
        return TransportRoute.RELAYED if secure else TransportRoute.DIRECT

    def select(
        self,
        query: str,
        mode: RequestMode,
        credential: str,
        *,
        secure: Optional[bool] = None,
        historical_date: Optional[str] = None,
    ) -> WeatherRequest:
        """
        Build a WeatherRequest for the given query.

        Args:
            query: Normalized location query
            mode: Requested operation; HISTORICAL without a date falls back to LIVE
            credential: Access key, trimmed before use
            secure: Whether the hosting context is encrypted (defaults to config)
            historical_date: Target date for HISTORICAL mode

        Returns:
            WeatherRequest describing target URL, parameters and route

        Raises:
            AuthError: If the credential is empty
        """
        access_key = (credential or "").strip()
        if not access_key:
            raise AuthError("No access key configured. Add one in settings.")

        if mode == RequestMode.HISTORICAL and not historical_date:
            mode = RequestMode.LIVE

        if secure is None:
            secure = self.settings.is_secure_context
        route = self.select_route(secure)

        params: Dict[str, Any] = {"access_key": access_key, "query": query}
        if route == TransportRoute.RELAYED:
            url = self.settings.relay_url
            params["endpoint"] = mode.value
        else:
            url = f"{self.settings.weatherstack_base_url}/{mode.value}"

        if mode == RequestMode.HISTORICAL:
            params["historical_date"] = historical_date
            params.update(HISTORICAL_PARAMS)
        else:
            historical_date = None

        logger.debug("Selected transport", route=route.value, mode=mode.value, url=url, query=query)

        return WeatherRequest(
            url=url,
            params=params,
            route=route,
            mode=mode,
            query=query,
            historical_date=historical_date,
        )
