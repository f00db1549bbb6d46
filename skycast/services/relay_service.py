import json
from typing import Any, Dict, Mapping, Optional

import httpx
import structlog
from pydantic import BaseModel, Field

from skycast.config.config import Config, config as default_config
from skycast.models.request import RequestMode
from skycast.utils.utils import mask_params

logger = structlog.get_logger(__name__)

ALLOWED_ENDPOINTS = frozenset(mode.value for mode in RequestMode)

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}


class RelayResponse(BaseModel):
    """Response the relay hands back to the client verbatim."""

    status_code: int = Field(..., description="HTTP status code")
    content: bytes = Field(default=b"", description="Response body")
    media_type: str = Field(default="application/json", description="Content type of the body")

    @classmethod
    def failure(cls, status_code: int, info: str) -> "RelayResponse":
        body = {"success": False, "error": {"info": info}}
        return cls(status_code=status_code, content=json.dumps(body).encode("utf-8"))


class RelayService:
    """
    Stateless pass-through from a secure origin to Weatherstack's HTTP endpoint.

    The relay validates presence of the credential and query, forwards every
    other parameter untouched and mirrors the upstream status and body. It
    holds no state and never retries.
    """

    def __init__(self, settings: Optional[Config] = None):
        self.settings = settings or default_config
        self.timeout = httpx.Timeout(self.settings.request_timeout_seconds, connect=10.0)

    async def forward(self, params: Mapping[str, Any]) -> RelayResponse:
        """
        Forward a relay request upstream.

        Args:
            params: Incoming query parameters (access_key, query, endpoint, passthrough)

        Returns:
            RelayResponse mirroring the upstream, or a 400/500 failure body
        """
        params = dict(params)
        endpoint = params.pop("endpoint", None) or RequestMode.LIVE.value
        access_key = params.get("access_key")
        query = params.get("query")

        if not access_key or not query:
            logger.warning("Relay request rejected", reason="missing parameters")
            return RelayResponse.failure(400, "Missing access_key or query parameters.")

        if endpoint not in ALLOWED_ENDPOINTS:
            logger.warning("Relay request rejected", reason="unsupported endpoint", endpoint=endpoint)
            return RelayResponse.failure(400, f"Unsupported endpoint '{endpoint}'.")

        url = f"{self.settings.weatherstack_base_url}/{endpoint}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                logger.info("Relaying request", url=url, params=mask_params(params))
                response = await client.get(url, params=params)

        except httpx.HTTPError as e:
            logger.error("Proxy Error", url=url, error=str(e))
            return RelayResponse.failure(500, f"Proxy Error: {str(e) or type(e).__name__}")

        logger.info("Relayed response", url=url, status_code=response.status_code)
        return RelayResponse(
            status_code=response.status_code,
            content=response.content,
            media_type=response.headers.get("content-type", "application/json"),
        )


relay_service = RelayService()
