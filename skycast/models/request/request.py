from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class RequestMode(str, Enum):
    """Upstream operation; the value is the Weatherstack path segment."""

    LIVE = "current"
    HISTORICAL = "historical"


class TransportRoute(str, Enum):
    """How a request reaches Weatherstack."""

    DIRECT = "direct"
    RELAYED = "relayed"


class WeatherRequest(BaseModel):
    """Fully-formed request descriptor produced by the transport selector."""

    url: str = Field(..., description="Target URL (upstream endpoint or same-origin relay)")
    params: Dict[str, Any] = Field(default_factory=dict, description="Query string parameters")
    route: TransportRoute = Field(..., description="Selected transport route")
    mode: RequestMode = Field(..., description="Requested upstream operation")
    query: str = Field(..., description="Normalized location query")
    historical_date: Optional[str] = Field(None, description="Target date for historical requests")


class RawResponse(BaseModel):
    """Transport-level view of an upstream or relay response."""

    status_code: int = Field(..., description="HTTP status code")
    body: Optional[Any] = Field(None, description="Decoded JSON body, None when not JSON")
    text: str = Field(default="", description="Raw response text")
