from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, Field

from skycast.exceptions.weather import (
    AuthError,
    InputError,
    LocationError,
    TierError,
    TransportError,
    UpstreamError,
    WeatherServiceError,
)
from skycast.models.weather.weather import WeatherReport


class ErrorCategory(str, Enum):
    """Error taxonomy of the weather pipeline."""

    INPUT = "input"
    AUTH = "auth"
    TRANSPORT = "transport"
    TIER = "tier"
    UPSTREAM = "upstream"
    LOCATION = "location"


ERROR_TYPES: Dict[ErrorCategory, Type[WeatherServiceError]] = {
    ErrorCategory.INPUT: InputError,
    ErrorCategory.AUTH: AuthError,
    ErrorCategory.TRANSPORT: TransportError,
    ErrorCategory.TIER: TierError,
    ErrorCategory.UPSTREAM: UpstreamError,
    ErrorCategory.LOCATION: LocationError,
}


class Success(BaseModel):
    """The upstream returned a usable report."""

    kind: Literal["success"] = "success"
    report: WeatherReport = Field(..., description="Normalized weather report")


class RecoverableError(BaseModel):
    """The upstream rejected the request for tier reasons; a LIVE retry may succeed."""

    kind: Literal["recoverable"] = "recoverable"
    reason: str = Field(..., description="Why the request was rejected")
    code: Optional[int] = Field(None, description="Upstream error code")


class TerminalError(BaseModel):
    """The request failed and will not be retried automatically."""

    kind: Literal["terminal"] = "terminal"
    reason: str = Field(..., description="Message surfaced to the caller")
    category: ErrorCategory = Field(..., description="Error taxonomy entry")
    status: Optional[int] = Field(None, description="Originating HTTP status, if any")

    def to_exception(self) -> WeatherServiceError:
        """Build the exception matching this error's category."""
        return ERROR_TYPES[self.category](self.reason)


ClassifiedOutcome = Annotated[
    Union[Success, RecoverableError, TerminalError],
    Field(discriminator="kind"),
]
