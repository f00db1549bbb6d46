from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from skycast.models.request.request import RequestMode

HOT_THRESHOLD = 25
COOL_THRESHOLD = 15


class WeatherstackErrorDetail(BaseModel):
    """Error block of a failed Weatherstack response."""

    code: Optional[int] = Field(None, description="Weatherstack error code")
    type: Optional[str] = Field(None, description="Machine readable error type")
    info: Optional[str] = Field(None, description="Human readable error description")


class WeatherstackLocation(BaseModel):
    """Location block shared by current and historical responses."""

    name: str = Field(..., description="Resolved location name")
    country: Optional[str] = Field(None, description="Country name")
    region: Optional[str] = Field(None, description="Region or state")
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Latitude")
    lon: Optional[float] = Field(None, ge=-180, le=180, description="Longitude")
    timezone_id: Optional[str] = Field(None, description="IANA timezone id")
    localtime: Optional[str] = Field(None, description="Local time at the location")
    utc_offset: Optional[str] = Field(None, description="UTC offset in hours")


class WeatherstackMeasurements(BaseModel):
    """Measurements common to current observations and hourly historical entries."""

    temperature: Optional[float] = Field(None, description="Temperature")
    weather_code: Optional[int] = Field(None, description="Weatherstack condition code")
    weather_icons: List[str] = Field(default_factory=list, description="Condition icon URLs")
    weather_descriptions: List[str] = Field(default_factory=list, description="Condition texts")
    wind_speed: Optional[float] = Field(None, ge=0, description="Wind speed in km/h")
    wind_degree: Optional[int] = Field(None, ge=0, le=360, description="Wind direction in degrees")
    wind_dir: Optional[str] = Field(None, description="Compass wind direction")
    pressure: Optional[float] = Field(None, description="Pressure in mb")
    precip: Optional[float] = Field(None, ge=0, description="Precipitation in mm")
    humidity: Optional[int] = Field(None, ge=0, le=100, description="Humidity percentage")
    cloudcover: Optional[int] = Field(None, ge=0, le=100, description="Cloud cover percentage")
    feelslike: Optional[float] = Field(None, description="Feels like temperature")
    uv_index: Optional[float] = Field(None, ge=0, description="UV index")
    visibility: Optional[float] = Field(None, ge=0, description="Visibility in km")


class WeatherstackCurrent(WeatherstackMeasurements):
    """Current observation block."""

    observation_time: Optional[str] = Field(None, description="Observation time (UTC)")
    is_day: Optional[str] = Field(None, description="'yes' or 'no'")


class WeatherstackHourly(WeatherstackMeasurements):
    """One hourly entry of a historical day."""

    time: Optional[str] = Field(None, description="Time of day as HHMM")


class WeatherstackHistoricalDay(BaseModel):
    """A single date entry of the historical mapping."""

    date: str = Field(..., description="Date as YYYY-MM-DD")
    mintemp: Optional[float] = Field(None, description="Minimum temperature")
    maxtemp: Optional[float] = Field(None, description="Maximum temperature")
    avgtemp: Optional[float] = Field(None, description="Average temperature")
    totalsnow: Optional[float] = Field(None, description="Total snow in cm")
    sunhour: Optional[float] = Field(None, description="Hours of sun")
    uv_index: Optional[float] = Field(None, ge=0, description="UV index")
    hourly: List[WeatherstackHourly] = Field(default_factory=list, description="Hourly entries")


class WeatherstackResponse(BaseModel):
    """Complete Weatherstack API response model."""

    success: Optional[bool] = Field(None, description="False when the request failed")
    error: Optional[WeatherstackErrorDetail] = Field(None, description="Error details")
    location: Optional[WeatherstackLocation] = Field(None, description="Resolved location")
    current: Optional[WeatherstackCurrent] = Field(None, description="Current observation")
    historical: Optional[Dict[str, WeatherstackHistoricalDay]] = Field(
        None, description="Date-keyed historical entries"
    )

    @property
    def failed(self) -> bool:
        return self.success is False


class WeatherReport(BaseModel):
    """Normalized weather report handed to consumers."""

    # Location identity
    location_name: str = Field(..., description="Canonical location name")
    region: Optional[str] = Field(None, description="Region or state")
    country: Optional[str] = Field(None, description="Country name")
    local_time: Optional[str] = Field(None, description="Local time at the location")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude")
    timezone_id: Optional[str] = Field(None, description="IANA timezone id")

    # Measurements
    temperature: Optional[float] = Field(None, description="Temperature in Celsius")
    feels_like: Optional[float] = Field(None, description="Feels like temperature in Celsius")
    humidity: Optional[int] = Field(None, ge=0, le=100, description="Humidity percentage")
    wind_speed: Optional[float] = Field(None, description="Wind speed in km/h")
    wind_direction: Optional[str] = Field(None, description="Compass wind direction")
    wind_degree: Optional[int] = Field(None, description="Wind direction in degrees")
    pressure: Optional[float] = Field(None, description="Pressure in mb")
    uv_index: Optional[float] = Field(None, description="UV index")
    visibility: Optional[float] = Field(None, description="Visibility in km")
    cloud_cover: Optional[int] = Field(None, description="Cloud cover percentage")
    precipitation: Optional[float] = Field(None, description="Precipitation in mm")
    condition: str = Field(default="Unknown", description="Textual weather condition")
    icon_url: Optional[str] = Field(None, description="Condition icon reference")
    observation_time: Optional[str] = Field(None, description="Observation time")

    # Historical extras
    mode: RequestMode = Field(default=RequestMode.LIVE, description="Operation that produced the report")
    historical_date: Optional[str] = Field(None, description="Date of a historical report")
    min_temperature: Optional[float] = Field(None, description="Daily minimum (historical)")
    max_temperature: Optional[float] = Field(None, description="Daily maximum (historical)")

    advice: str = Field(default="", description="Short advice derived from the temperature")
    created_at: datetime = Field(default_factory=datetime.now, description="Report creation time")

    @staticmethod
    def advice_for(temperature: Optional[float]) -> str:
        """Return the advice line for a temperature."""
        if temperature is None:
            return "No temperature reading available."
        if temperature > HOT_THRESHOLD:
            return "Thermal levels elevated. Optimize hydration and seek cooling station."
        if temperature < COOL_THRESHOLD:
            return "Cooler atmospheric shift detected. External thermal layering advised."
        return "Optimal equilibrium maintained. External conditions are favorable."

    @classmethod
    def _build(
        cls,
        location: WeatherstackLocation,
        measurements: WeatherstackMeasurements,
        **extra,
    ) -> "WeatherReport":
        temperature = extra.pop("temperature", measurements.temperature)
        return cls(
            location_name=location.name,
            region=location.region,
            country=location.country,
            local_time=location.localtime,
            latitude=location.lat,
            longitude=location.lon,
            timezone_id=location.timezone_id,
            temperature=temperature,
            feels_like=measurements.feelslike,
            humidity=measurements.humidity,
            wind_speed=measurements.wind_speed,
            wind_direction=measurements.wind_dir,
            wind_degree=measurements.wind_degree,
            pressure=measurements.pressure,
            uv_index=extra.pop("uv_index", measurements.uv_index),
            visibility=measurements.visibility,
            cloud_cover=measurements.cloudcover,
            precipitation=measurements.precip,
            condition=measurements.weather_descriptions[0] if measurements.weather_descriptions else "Unknown",
            icon_url=measurements.weather_icons[0] if measurements.weather_icons else None,
            advice=cls.advice_for(temperature),
            **extra,
        )

    @classmethod
    def from_current_response(cls, response: WeatherstackResponse) -> "WeatherReport":
        """
        Create a WeatherReport from a live Weatherstack response.

        Args:
            response: Parsed Weatherstack response carrying location and current

        Returns:
            WeatherReport: Normalized report

        Raises:
            ValueError: If the location or current block is missing
        """
        if response.location is None or response.current is None:
            raise ValueError("response is missing the location or current block")

        return cls._build(
            response.location,
            response.current,
            observation_time=response.current.observation_time,
            mode=RequestMode.LIVE,
        )

    @classmethod
    def from_historical_response(cls, response: WeatherstackResponse) -> "WeatherReport":
        """
        Create a WeatherReport from a historical Weatherstack response.

        The historical mapping is keyed by date and holds exactly one entry for
        a single-date request. Daily aggregates supply the temperature, the
        first hourly entry supplies the remaining measurements.

        Raises:
            ValueError: If the location or the single historical entry is missing
        """
        if response.location is None or not response.historical:
            raise ValueError("response is missing the location or historical block")
        if len(response.historical) != 1:
            raise ValueError(f"expected one historical entry, got {len(response.historical)}")

        day = next(iter(response.historical.values()))
        measurements = day.hourly[0] if day.hourly else WeatherstackMeasurements()
        temperature = day.avgtemp if day.avgtemp is not None else measurements.temperature

        return cls._build(
            response.location,
            measurements,
            temperature=temperature,
            uv_index=day.uv_index if day.uv_index is not None else measurements.uv_index,
            mode=RequestMode.HISTORICAL,
            historical_date=day.date,
            observation_time=day.date,
            min_temperature=day.mintemp,
            max_temperature=day.maxtemp,
        )
