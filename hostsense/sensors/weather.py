"""Weather sensor backed by the wttr.in JSON API."""

import logging
from urllib.parse import quote

import httpx
import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseSensor, SensorError, SensorReport

logger = logging.getLogger("hostsense.sensors.weather")

MAX_FORECAST_DAYS = 3
HOURLY_STRIDE = 3


class _WttrModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TextValue(_WttrModel):
    value: str


class CurrentCondition(_WttrModel):
    temp_f: str = Field(alias="temp_F")
    temp_c: str = Field(alias="temp_C")
    feels_like_f: str = Field(alias="FeelsLikeF")
    feels_like_c: str = Field(alias="FeelsLikeC")
    humidity: str
    weather_desc: list[TextValue] = Field(default_factory=list, alias="weatherDesc")
    windspeed_miles: str = Field(alias="windspeedMiles")
    windspeed_kmph: str = Field(alias="windspeedKmph")
    winddir: str = Field(alias="winddir16Point")
    precip_mm: str = Field(alias="precipMM")
    visibility: str
    pressure: str
    uv_index: str = Field(alias="uvIndex")


class NearestArea(_WttrModel):
    area_name: list[TextValue] = Field(default_factory=list, alias="areaName")
    region: list[TextValue] = Field(default_factory=list)
    country: list[TextValue] = Field(default_factory=list)


class HourlyForecast(_WttrModel):
    time: str
    temp_f: str = Field(alias="tempF")
    temp_c: str = Field(alias="tempC")
    weather_desc: list[TextValue] = Field(default_factory=list, alias="weatherDesc")
    chance_of_rain: str = Field(alias="chanceofrain")

    @property
    def hour(self) -> int:
        """Hour of day from wttr's ``HMM`` time ("0", "300", "1200")."""
        try:
            return int(self.time) // 100
        except ValueError:
            return 0


class WeatherDay(_WttrModel):
    date: str
    max_temp_f: str = Field(alias="maxtempF")
    max_temp_c: str = Field(alias="maxtempC")
    min_temp_f: str = Field(alias="mintempF")
    min_temp_c: str = Field(alias="mintempC")
    hourly: list[HourlyForecast] = Field(default_factory=list)


class WttrResponse(_WttrModel):
    current_condition: list[CurrentCondition] = Field(default_factory=list)
    nearest_area: list[NearestArea] = Field(default_factory=list)
    weather: list[WeatherDay] = Field(default_factory=list)

    def area_label(self, fallback: str) -> str:
        if not self.nearest_area:
            return fallback
        area = self.nearest_area[0]
        name = area.area_name[0].value if area.area_name else "Unknown"
        region = area.region[0].value if area.region else ""
        return f"{name}, {region}"


def clamp_days(days: int | None) -> int:
    """Forecast days limited to 1..3, default 3."""
    if days is None:
        return MAX_FORECAST_DAYS
    return max(1, min(MAX_FORECAST_DAYS, days))


def sample_hourly(hourly: list[HourlyForecast]) -> list[HourlyForecast]:
    """Every third hourly record."""
    return hourly[::HOURLY_STRIDE]


def _first(values: list[TextValue], default: str) -> str:
    return values[0].value if values else default


def format_current(data: WttrResponse, location: str) -> SensorReport:
    if not data.current_condition:
        raise SensorError("No current conditions")
    current = data.current_condition[0]

    return SensorReport(title=f"Weather for {data.area_label(location)}").extend([
        f"Conditions: {_first(current.weather_desc, 'Unknown')}",
        f"Temperature: {current.temp_f}°F / {current.temp_c}°C",
        f"Feels like: {current.feels_like_f}°F / {current.feels_like_c}°C",
        f"Humidity: {current.humidity}%",
        f"Wind: {current.windspeed_miles} mph {current.winddir} ({current.windspeed_kmph} km/h)",
        f"Precipitation: {current.precip_mm} mm",
        f"Visibility: {current.visibility} miles",
        f"Pressure: {current.pressure} mb",
        f"UV Index: {current.uv_index}",
    ])


def format_forecast(data: WttrResponse, location: str, days: int | None) -> SensorReport:
    days = clamp_days(days)
    report = SensorReport(title=f"Forecast for {data.area_label(location)} ({days} days)")
    for day in data.weather[:days]:
        report.add(f"{day.date}:")
        report.add(
            f"  High: {day.max_temp_f}°F / {day.max_temp_c}°C | "
            f"Low: {day.min_temp_f}°F / {day.min_temp_c}°C"
        )
        for hour in sample_hourly(day.hourly):
            report.add(
                f"  {hour.hour:02}:00 - {hour.temp_f}°F, "
                f"{_first(hour.weather_desc, '?')}, {hour.chance_of_rain}% rain"
            )
        report.add()
    return report


class WeatherSensor(BaseSensor):
    """Fetch current conditions and forecasts from wttr.in."""

    name = "weather"
    description = "Weather conditions and forecast"

    def __init__(self, client: httpx.AsyncClient, base_url: str = "https://wttr.in"):
        super().__init__()
        self.client = client
        self.base_url = base_url.rstrip("/")

    async def fetch(self, location: str) -> WttrResponse:
        url = f"{self.base_url}/{quote(location, safe='')}"
        try:
            response = await self.client.get(url, params={"format": "j1"})
        except httpx.HTTPError as e:
            logger.error(f"Weather API error: {e}")
            raise SensorError(f"HTTP request failed: {e}") from e

        if not response.is_success:
            raise SensorError(f"Weather API returned status: {response.status_code}")

        try:
            return WttrResponse.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise SensorError(f"Failed to parse weather data: {e}") from e

    async def current(self, location: str) -> SensorReport:
        return format_current(await self.fetch(location), location)

    async def forecast(self, location: str, days: int | None = None) -> SensorReport:
        return format_forecast(await self.fetch(location), location, days)
