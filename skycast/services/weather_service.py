from typing import Optional

import httpx
import structlog

from skycast.config.config import Config, config as default_config
from skycast.exceptions.weather import TransportError
from skycast.models.request import RawResponse, WeatherRequest
from skycast.utils.utils import mask_params

logger = structlog.get_logger(__name__)


class WeatherService:
    """
    Network layer for Weatherstack requests, direct or through the relay.

    The service never interprets responses: any response that reaches the
    client is returned as a RawResponse for the classifier. Only the absence
    of a response is an error here.
    """

    def __init__(self, settings: Optional[Config] = None):
        self.settings = settings or default_config

        # HTTP client configuration
        self.timeout = httpx.Timeout(self.settings.request_timeout_seconds, connect=10.0)

    async def fetch(self, request: WeatherRequest) -> RawResponse:
        """
        Issue a GET for the request descriptor.

        Args:
            request: Descriptor produced by the transport selector

        Returns:
            RawResponse with status code and decoded body

        Raises:
            TransportError: If no response was received at all
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                logger.info(
                    "Making API request",
                    url=request.url,
                    route=request.route.value,
                    mode=request.mode.value,
                    params=mask_params(request.params),
                )

                response = await client.get(request.url, params=request.params)

        except httpx.TimeoutException as e:
            logger.warning("Request timeout", url=request.url, route=request.route.value)
            raise TransportError(f"Request timeout: {str(e) or 'no response'}")

        except httpx.RequestError as e:
            logger.warning("Request error", url=request.url, route=request.route.value, error=str(e))
            raise TransportError(f"Request failed: {str(e)}")

        try:
            body = response.json()
        except ValueError:
            body = None

        logger.info(
            "Received API response",
            url=request.url,
            status_code=response.status_code,
            json_body=body is not None,
        )
        return RawResponse(status_code=response.status_code, body=body, text=response.text)
