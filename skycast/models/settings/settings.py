from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class CredentialUpdateRequest(BaseModel):
    """Request model for storing a new access credential."""

    access_key: str = Field(..., min_length=1, description="Weatherstack access key")


class HistoricalModeRequest(BaseModel):
    """Request model for toggling historical mode."""

    enabled: bool = Field(..., description="Whether historical mode is active")
    historical_date: Optional[date] = Field(None, description="Target date (YYYY-MM-DD)")


class AutoRefreshRequest(BaseModel):
    """Request model for toggling auto refresh."""

    enabled: bool = Field(..., description="Whether auto refresh is active")
