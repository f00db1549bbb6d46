from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from skycast.models.weather.weather import WeatherReport


class OrchestratorState(BaseModel):
    """Snapshot of everything a consumer needs to render the weather view."""

    report: Optional[WeatherReport] = Field(None, description="Report currently held")
    error: Optional[str] = Field(None, description="Terminal error message of the last call")
    notice: Optional[str] = Field(None, description="Interim notice (e.g. tier downgrade retry)")
    loading: bool = Field(default=False, description="Whether an invocation is in flight")
    last_updated: Optional[datetime] = Field(None, description="Time of the last successful report")
    recent_searches: List[str] = Field(default_factory=list, description="Most-recent-first locations")
    use_historical: bool = Field(default=False, description="Historical mode toggle")
    historical_date: Optional[str] = Field(None, description="Target date for historical mode")
    auto_refresh: bool = Field(default=False, description="Auto refresh toggle")
    retry_pending: bool = Field(default=False, description="Whether a tier-downgrade retry is scheduled")
