from skycast.models.weather.weather import (
    WeatherReport,
    WeatherstackCurrent,
    WeatherstackErrorDetail,
    WeatherstackHistoricalDay,
    WeatherstackHourly,
    WeatherstackLocation,
    WeatherstackResponse,
)

__all__ = [
    "WeatherReport",
    "WeatherstackCurrent",
    "WeatherstackErrorDetail",
    "WeatherstackHistoricalDay",
    "WeatherstackHourly",
    "WeatherstackLocation",
    "WeatherstackResponse",
]
