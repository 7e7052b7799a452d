"""Tests for the wttr.in weather sensor, served by httpx.MockTransport."""

import httpx
import pytest

from hostsense.sensors.base import SensorError
from hostsense.sensors.weather import (
    HourlyForecast,
    WeatherSensor,
    WttrResponse,
    clamp_days,
    sample_hourly,
)


def _hour(time: str, temp_f: str = "60") -> dict:
    return {
        "time": time,
        "tempF": temp_f,
        "tempC": "15",
        "weatherDesc": [{"value": "Cloudy"}],
        "chanceofrain": "20",
    }


def _day(date: str) -> dict:
    return {
        "date": date,
        "maxtempF": "70",
        "maxtempC": "21",
        "mintempF": "50",
        "mintempC": "10",
        "hourly": [_hour(str(h * 100)) for h in range(0, 24, 3)],
    }


WTTR_PAYLOAD = {
    "current_condition": [
        {
            "temp_F": "64",
            "temp_C": "18",
            "FeelsLikeF": "63",
            "FeelsLikeC": "17",
            "humidity": "55",
            "weatherDesc": [{"value": "Partly cloudy"}],
            "windspeedMiles": "8",
            "windspeedKmph": "13",
            "winddir16Point": "WSW",
            "precipMM": "0.0",
            "visibility": "6",
            "pressure": "1015",
            "uvIndex": "4",
        }
    ],
    "nearest_area": [
        {
            "areaName": [{"value": "Paris"}],
            "region": [{"value": "Ile-de-France"}],
            "country": [{"value": "France"}],
        }
    ],
    "weather": [_day("2026-10-18"), _day("2026-10-19"), _day("2026-10-20")],
}


def make_sensor(handler) -> WeatherSensor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WeatherSensor(client, base_url="https://wttr.test")


class TestHelpers:

    @pytest.mark.parametrize("days, expected", [(0, 1), (1, 1), (2, 2), (3, 3), (5, 3), (None, 3)])
    def test_clamp_days(self, days, expected):
        assert clamp_days(days) == expected

    def test_sample_hourly_every_third(self):
        hourly = [HourlyForecast.model_validate(_hour(str(h * 100))) for h in range(8)]
        assert [h.hour for h in sample_hourly(hourly)] == [0, 3, 6]

    def test_area_label_fallback(self):
        assert WttrResponse().area_label("somewhere") == "somewhere"


class TestWeatherSensor:

    @pytest.mark.asyncio
    async def test_current_conditions(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            return httpx.Response(200, json=WTTR_PAYLOAD)

        sensor = make_sensor(handler)
        text = (await sensor.current("New York")).to_text()

        assert seen["url"].raw_path.startswith(b"/New%20York?")
        assert seen["url"].params["format"] == "j1"
        assert text.startswith("Weather for Paris, Ile-de-France:")
        assert "Conditions: Partly cloudy" in text
        assert "Temperature: 64°F / 18°C" in text
        assert "Wind: 8 mph WSW (13 km/h)" in text

    @pytest.mark.asyncio
    async def test_forecast_clamped_to_three_days(self):
        sensor = make_sensor(lambda request: httpx.Response(200, json=WTTR_PAYLOAD))
        text = (await sensor.forecast("Paris", days=5)).to_text()

        assert "(3 days)" in text
        assert text.count("High: 70°F") == 3
        # 8 hourly records per day sampled every third
        assert text.count("°F, Cloudy") == 9

    @pytest.mark.asyncio
    async def test_forecast_one_day(self):
        sensor = make_sensor(lambda request: httpx.Response(200, json=WTTR_PAYLOAD))
        text = (await sensor.forecast("Paris", days=0)).to_text()

        assert "(1 days)" in text
        assert "2026-10-19" not in text
        assert "  00:00 - 60°F, Cloudy, 20% rain" in text

    @pytest.mark.asyncio
    async def test_http_status_error(self):
        sensor = make_sensor(lambda request: httpx.Response(503))
        with pytest.raises(SensorError, match="Weather API returned status: 503"):
            await sensor.current("Paris")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        sensor = make_sensor(handler)
        with pytest.raises(SensorError, match="HTTP request failed"):
            await sensor.current("Paris")

    @pytest.mark.asyncio
    async def test_unparseable_body(self):
        sensor = make_sensor(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(SensorError, match="Failed to parse weather data"):
            await sensor.current("Paris")

    @pytest.mark.asyncio
    async def test_missing_current_conditions(self):
        sensor = make_sensor(lambda request: httpx.Response(200, json={"weather": []}))
        with pytest.raises(SensorError, match="No current conditions"):
            await sensor.current("Paris")
