from typing import FrozenSet, Optional

import structlog
from pydantic import ValidationError

from skycast.models.outcome import ClassifiedOutcome, ErrorCategory, RecoverableError, Success, TerminalError
from skycast.models.request import RawResponse, RequestMode, TransportRoute, WeatherRequest
from skycast.models.weather.weather import WeatherReport, WeatherstackResponse

logger = structlog.get_logger(__name__)

# Weatherstack codes meaning "not available on this subscription plan"
TIER_RESTRICTED_CODES: FrozenSet[int] = frozenset({105, 603})

# Weatherstack reports missing or invalid keys in-body with HTTP 200
INVALID_KEY_CODES: FrozenSet[int] = frozenset({101})

AUTH_MESSAGE = "DENIED (401): API key is invalid/expired. Check your Weatherstack account."
MALFORMED_MESSAGE = "MALFORMED (400): The server rejected the request structure. Ensure the API key is active."
DIRECT_UNREACHABLE_MESSAGE = (
    "UPSTREAM_FAILURE: Weatherstack Free only supports HTTP. "
    "Ensure the client is served over http (not https) or route through the relay."
)
RELAYED_UNREACHABLE_MESSAGE = (
    "RELAY_FAILURE: The weather relay could not be reached. Check that the relay is deployed on this origin."
)
GENERIC_FAILURE_MESSAGE = "City not found or API error."


class ResponseClassifier:
    """Turns a raw response into a ClassifiedOutcome."""

    def __init__(self, tier_codes: Optional[FrozenSet[int]] = None):
        self.tier_codes = TIER_RESTRICTED_CODES if tier_codes is None else frozenset(tier_codes)

    def classify(self, response: Optional[RawResponse], request: WeatherRequest) -> ClassifiedOutcome:
        """
        Classify a response for the request that produced it.

        Args:
            response: Raw response, or None when the transport never got one
            request: Descriptor of the request that was issued

        Returns:
            Success, RecoverableError or TerminalError
        """
        if response is not None and response.status_code == 401:
            logger.warning("Credential rejected", status_code=401)
            return TerminalError(reason=AUTH_MESSAGE, category=ErrorCategory.AUTH, status=401)

        if response is None:
            return self.unreachable(request.route)

        body = response.body if isinstance(response.body, dict) else None

        if body is not None and body.get("success") is False:
            return self._classify_failure(body, response.status_code)

        if not 200 <= response.status_code < 300:
            if response.status_code == 400:
                reason = MALFORMED_MESSAGE
            else:
                reason = f"INTERFACE_ERROR: Upstream responded with HTTP {response.status_code}"
            logger.warning("Upstream request failed", status_code=response.status_code)
            return TerminalError(reason=reason, category=ErrorCategory.UPSTREAM, status=response.status_code)

        if body is None:
            return TerminalError(
                reason="STATION_RESPONSE: Upstream returned a non-JSON body.",
                category=ErrorCategory.UPSTREAM,
                status=response.status_code,
            )

        return self._classify_success(body, request, response.status_code)

    def unreachable(self, route: TransportRoute) -> TerminalError:
        """Terminal outcome for a request that never got a response."""
        reason = RELAYED_UNREACHABLE_MESSAGE if route == TransportRoute.RELAYED else DIRECT_UNREACHABLE_MESSAGE
        logger.warning("Transport unreachable", route=route.value)
        return TerminalError(reason=reason, category=ErrorCategory.TRANSPORT)

    def _classify_failure(self, body: dict, status_code: int) -> ClassifiedOutcome:
        error = body.get("error") or {}
        if not isinstance(error, dict):
            error = {}
        code = error.get("code")
        try:
            code = int(code) if code is not None else None
        except (TypeError, ValueError):
            code = None
        message = error.get("info") or error.get("type") or GENERIC_FAILURE_MESSAGE

        if code in self.tier_codes:
            logger.info("Tier restricted request", code=code, info=message)
            return RecoverableError(reason=message, code=code)

        if code in INVALID_KEY_CODES:
            logger.warning("Credential rejected in body", code=code)
            return TerminalError(reason=f"DENIED: {message}", category=ErrorCategory.AUTH, status=status_code)

        logger.warning("Upstream reported failure", code=code, info=message)
        return TerminalError(
            reason=f"STATION_RESPONSE: {message}",
            category=ErrorCategory.UPSTREAM,
            status=status_code,
        )

    def _classify_success(self, body: dict, request: WeatherRequest, status_code: int) -> ClassifiedOutcome:
        try:
            parsed = WeatherstackResponse(**body)
            if request.mode == RequestMode.HISTORICAL:
                report = WeatherReport.from_historical_response(parsed)
            else:
                report = WeatherReport.from_current_response(parsed)
        except (ValidationError, ValueError) as e:
            logger.error("Failed to parse weather data", query=request.query, error=str(e))
            return TerminalError(
                reason=f"STATION_RESPONSE: Invalid weather data received for {request.query}.",
                category=ErrorCategory.UPSTREAM,
                status=status_code,
            )

        return Success(report=report)


response_classifier = ResponseClassifier()
