"""tests for open-meteo weather extraction."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest

from skitour_scout.extraction.weather import (
    map_weather_code,
    wind_direction_label,
    local_hour,
    parse_current_weather,
    parse_point_weather,
    round_half_up,
    fetch_current_weather,
    fetch_elevation_weather,
)
from skitour_scout.extraction import CancellationToken, FetchAborted
from skitour_scout.models import ConfidenceLevel, WeatherCondition, WeatherInput

NOW = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


def _forecast(**current_overrides):
    current = {
        "temperature_2m": -6.4,
        "apparent_temperature": -12.6,
        "weather_code": 2,
        "wind_speed_10m": 17.8,
        "wind_direction_10m": 350,
        "relative_humidity_2m": 81,
        "visibility": 24140,
        "snowfall": 0.0,
        "snow_depth": 0.85,
    }
    current.update(current_overrides)
    return {
        "utc_offset_seconds": 3600,
        "current": current,
        "daily": {"snowfall_sum": [12.34]},
        "hourly": {"freezing_level_height": [1000 + 10 * h for h in range(24)]},
    }


@pytest.mark.parametrize(
    "code, expected",
    [
        (0, WeatherCondition.CLEAR),
        (3, WeatherCondition.PARTLY_CLOUDY),
        (45, WeatherCondition.FOG),
        (61, WeatherCondition.RAIN),
        (73, WeatherCondition.SNOW),
        (81, WeatherCondition.RAIN),
        (86, WeatherCondition.HEAVY_SNOW),
        (90, WeatherCondition.CLOUDY),
        (99, WeatherCondition.RAIN),
    ],
)
def test_map_weather_code(code, expected):
    assert map_weather_code(code) == expected


@pytest.mark.parametrize("degrees, label", [(0, "N"), (350, "N"), (100, "E"), (225, "SW"), (292.5, "WNW")])
def test_wind_direction_label(degrees, label):
    assert wind_direction_label(degrees) == label


def test_local_hour_uses_utc_offset():
    assert local_hour({"utc_offset_seconds": 3600}, NOW) == 11
    assert local_hour({}, NOW) == 10


def test_parse_current_weather():
    snapshot = parse_current_weather(_forecast(), NOW)

    assert snapshot.temperature == -6
    assert snapshot.feels_like == -13
    assert snapshot.condition == WeatherCondition.PARTLY_CLOUDY
    assert snapshot.wind_speed == 18
    assert snapshot.wind_direction == "N"
    assert snapshot.visibility == 24
    assert snapshot.fresh_snow_24h == 12.3
    assert snapshot.snow_base == 85
    assert snapshot.freezing_level == 1110
    assert snapshot.source == "Open-Meteo"
    assert snapshot.confidence.level == ConfidenceLevel.HIGH


def test_parse_current_weather_defaults():
    data = _forecast(visibility=None, snow_depth=None)
    data.pop("daily")
    data.pop("hourly")
    snapshot = parse_current_weather(data, NOW)

    assert snapshot.visibility == 10
    assert snapshot.fresh_snow_24h == 0
    assert snapshot.snow_base == 0
    assert snapshot.freezing_level == 2500


def test_parse_current_weather_without_current_block_raises():
    with pytest.raises(KeyError):
        parse_current_weather({"daily": {}}, NOW)


@pytest.mark.asyncio
async def test_fetch_current_weather_sends_expected_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(200, json=_forecast(weather_code=0))

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        snapshot = await fetch_current_weather(
            client, WeatherInput(latitude=49.23, longitude=19.98), now=NOW
        )

    assert snapshot.condition == WeatherCondition.CLEAR
    assert seen["daily"] == "snowfall_sum"
    assert seen["hourly"] == "freezing_level_height"
    assert seen["timezone"] == "auto"
    assert "weather_code" in seen["current"]


@pytest.mark.asyncio
async def test_fetch_current_weather_http_error_propagates():
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_current_weather(client, WeatherInput(latitude=49.23, longitude=19.98), now=NOW)


@pytest.mark.asyncio
async def test_elevation_weather_skips_peak_with_failed_point_and_defaults_extras():
    # Beskid Żywiecki: Babia Góra valley fails, Pilsko extras fail
    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if params["latitude"] == "49.585" and params["longitude"] == "19.52":
            return httpx.Response(500)
        if "current" not in params:
            return httpx.Response(502)
        temp = 2.0 if params.get("elevation") == "700" else -4.0
        return httpx.Response(200, json=_forecast(temperature_2m=temp))

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        peaks = await fetch_elevation_weather(client, "Beskid Żywiecki", now=NOW)

    assert len(peaks) == 1
    pilsko = peaks[0]
    assert pilsko.valley.name == "Pilsko (valley)"
    assert pilsko.summit.altitude == 1557
    assert pilsko.temp_difference == -6
    assert pilsko.freezing_level == 1500
    assert pilsko.fresh_snow_24h == 0


@pytest.mark.asyncio
async def test_elevation_weather_uses_summit_extras():
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=_forecast()))) as client:
        peaks = await fetch_elevation_weather(client, "Tatry", now=NOW)

    assert [p.summit.altitude for p in peaks] == [1987, 2499, 2301]
    assert all(p.freezing_level == 1110 for p in peaks)
    assert all(p.fresh_snow_24h == 12.3 for p in peaks)


@pytest.mark.asyncio
async def test_elevation_weather_cancelled_raises():
    token = CancellationToken()
    token.cancel()
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=_forecast()))) as client:
        with pytest.raises(FetchAborted):
            await fetch_elevation_weather(client, "Tatry", token=token, now=NOW)


@pytest.mark.parametrize(
    "value, ndigits, expected",
    [(40.5, 0, 41), (2.5, 0, 3), (-2.5, 0, -2), (-6.4, 0, -6), (0.25, 1, 0.3), (12.34, 1, 12.3)],
)
def test_round_half_up(value, ndigits, expected):
    assert round_half_up(value, ndigits) == expected


def test_parse_current_weather_rounds_halves_up_at_thresholds():
    snapshot = parse_current_weather(_forecast(wind_speed_10m=40.5, visibility=2500), NOW)

    # 41 km/h is over the strong wind limit, 3 km is not poor visibility
    assert snapshot.wind_speed == 41
    assert snapshot.visibility == 3


def test_parse_point_weather_rounds_halves_up():
    point = parse_point_weather(_forecast(temperature_2m=0.5, wind_speed_10m=40.5), "Kasprowy (summit)", 1987)

    assert point.temperature == 1
    assert point.wind_speed == 41


@pytest.mark.asyncio
async def test_elevation_weather_reraises_cancelled_point_fetch():
    async def fake_point(client, point, name, **kwargs):
        if name.endswith("(summit)"):
            raise asyncio.CancelledError()
        return parse_point_weather(_forecast(), name, point.altitude)

    with patch("skitour_scout.extraction.weather.fetch_point_weather", side_effect=fake_point):
        async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=_forecast()))) as client:
            with pytest.raises(asyncio.CancelledError):
                await fetch_elevation_weather(client, "Tatry", now=NOW)
