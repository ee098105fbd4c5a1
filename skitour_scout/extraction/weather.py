"""
weather extraction from the Open-Meteo forecast api.

turns provider json into WeatherSnapshot / ElevationWeather facts. the
elevation mode fetches valley and summit points of every peak concurrently;
a peak is only reported when both points succeed.
"""

import asyncio
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx

from skitour_scout.config import settings
from skitour_scout.config.regions import ElevationPair, get_elevation_pairs
from skitour_scout.models import (
    ElevationWeather,
    ElevationWeatherPoint,
    WeatherCondition,
    WeatherInput,
    WeatherSnapshot,
    api_confidence,
)
from skitour_scout.observability.logger import get_logger, PipelineStep
from .cancellation import CancellationToken, FetchAborted
from .http import fetch_json, error_message

logger = get_logger(__name__, PipelineStep.WEATHER)


def round_half_up(value: float, ndigits: int = 0):
    """round with halves going up (2.5 -> 3, -2.5 -> -2); the built-in round() goes to even"""
    factor = 10 ** ndigits
    rounded = math.floor(value * factor + 0.5)
    return int(rounded) if ndigits == 0 else rounded / factor


def map_weather_code(code: int) -> WeatherCondition:
    """map a WMO weather interpretation code to a coarse condition"""
    if code == 0:
        return WeatherCondition.CLEAR
    if code <= 3:
        return WeatherCondition.PARTLY_CLOUDY
    if code <= 48:
        return WeatherCondition.FOG
    if code <= 67:
        return WeatherCondition.RAIN
    if code <= 77:
        return WeatherCondition.SNOW
    if code <= 82:
        return WeatherCondition.RAIN
    if code <= 86:
        return WeatherCondition.HEAVY_SNOW
    if code >= 95:
        # thunderstorm
        return WeatherCondition.RAIN
    return WeatherCondition.CLOUDY


def wind_direction_label(degrees: float) -> str:
    """16-point compass label for a wind direction in degrees"""
    index = round_half_up(degrees / 22.5) % 16
    return settings.COMPASS_POINTS[index]


def local_hour(data: Dict[str, Any], now: datetime) -> int:
    """
    current hour at the forecast location.

    open-meteo hourly series start at local midnight when timezone=auto, so
    the index of "now" is the local hour derived from utc_offset_seconds.
    """
    offset = data.get("utc_offset_seconds") or 0
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now.astimezone(timezone.utc) + timedelta(seconds=offset)).hour


def _series_value(data: Dict[str, Any], block: str, field: str, index: int) -> Optional[float]:
    series = (data.get(block) or {}).get(field) or []
    if 0 <= index < len(series) and series[index] is not None:
        return series[index]
    return None


def build_forecast_params(
    point: WeatherInput,
    *,
    current: Optional[List[str]] = None,
    daily: Optional[str] = None,
    hourly: Optional[str] = None,
    use_elevation: bool = False,
) -> Dict[str, str]:
    params = {
        "latitude": str(point.latitude),
        "longitude": str(point.longitude),
        "timezone": "auto",
    }
    if current:
        params["current"] = ",".join(current)
    if daily:
        params["daily"] = daily
    if hourly:
        params["hourly"] = hourly
    if daily or hourly:
        params["forecast_days"] = "1"
    # altitude-corrected temperatures
    if use_elevation and point.altitude:
        params["elevation"] = str(point.altitude)
    return params


def parse_current_weather(data: Dict[str, Any], now: Optional[datetime] = None) -> WeatherSnapshot:
    """
    build a WeatherSnapshot from a full forecast response.

    raises:
        KeyError: when the current block or a required field is missing
    """
    now = now or datetime.now(timezone.utc)
    current = data["current"]

    freezing_level = _series_value(data, "hourly", "freezing_level_height", local_hour(data, now))
    fresh_snow = _series_value(data, "daily", "snowfall_sum", 0)

    return WeatherSnapshot(
        temperature=round_half_up(current["temperature_2m"]),
        feels_like=round_half_up(current["apparent_temperature"]),
        condition=map_weather_code(current["weather_code"]),
        wind_speed=round_half_up(current["wind_speed_10m"]),
        wind_direction=wind_direction_label(current["wind_direction_10m"]),
        humidity=round_half_up(current.get("relative_humidity_2m") or 0),
        visibility=round_half_up((current.get("visibility") or settings.DEFAULT_VISIBILITY_M) / 1000),
        fresh_snow_24h=round_half_up(fresh_snow or 0, 1),
        snow_base=round_half_up((current.get("snow_depth") or 0) * 100),
        freezing_level=round_half_up(freezing_level if freezing_level is not None else settings.DEFAULT_FREEZING_LEVEL_M),
        timestamp=now,
        source=settings.WEATHER_SOURCE,
        confidence=api_confidence(settings.WEATHER_SOURCE, settings.WEATHER_API_URL, now=now),
    )


def parse_point_weather(data: Dict[str, Any], name: str, altitude: Optional[int]) -> ElevationWeatherPoint:
    current = data["current"]
    return ElevationWeatherPoint(
        name=name,
        altitude=altitude or 0,
        temperature=round_half_up(current["temperature_2m"]),
        feels_like=round_half_up(current["apparent_temperature"]),
        wind_speed=round_half_up(current["wind_speed_10m"]),
        wind_direction=wind_direction_label(current["wind_direction_10m"]),
        condition=map_weather_code(current["weather_code"]),
    )


async def fetch_current_weather(
    client: httpx.AsyncClient,
    point: WeatherInput,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> WeatherSnapshot:
    """fetch and parse current weather for one point"""
    params = build_forecast_params(
        point,
        current=settings.CURRENT_FIELDS,
        daily="snowfall_sum",
        hourly="freezing_level_height",
    )
    data = await fetch_json(client, settings.WEATHER_API_URL, params=params, timeout=timeout, token=token)
    return parse_current_weather(data, now)


async def fetch_point_weather(
    client: httpx.AsyncClient,
    point: WeatherInput,
    name: str,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
) -> ElevationWeatherPoint:
    params = build_forecast_params(point, current=settings.POINT_FIELDS, use_elevation=True)
    data = await fetch_json(client, settings.WEATHER_API_URL, params=params, timeout=timeout, token=token)
    return parse_point_weather(data, name, point.altitude)


async def fetch_summit_extras(
    client: httpx.AsyncClient,
    summit: WeatherInput,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> Tuple[int, float]:
    """
    best-effort freezing level and fresh snow at a summit.

    any failure other than cancellation falls back to fixed defaults.
    """
    now = now or datetime.now(timezone.utc)
    freezing_level: float = settings.ELEVATION_FREEZING_LEVEL_M
    fresh_snow: float = settings.ELEVATION_FRESH_SNOW_CM

    params = build_forecast_params(summit, daily="snowfall_sum", hourly="freezing_level_height")
    try:
        data = await fetch_json(client, settings.WEATHER_API_URL, params=params, timeout=timeout, token=token)
    except FetchAborted:
        raise
    except Exception as e:
        logger.debug(f"summit extras unavailable, using defaults: {error_message(e)}")
        return round_half_up(freezing_level), fresh_snow

    level = _series_value(data, "hourly", "freezing_level_height", local_hour(data, now))
    snow = _series_value(data, "daily", "snowfall_sum", 0)
    if level is not None:
        freezing_level = level
    if snow is not None:
        fresh_snow = snow
    return round_half_up(freezing_level), round_half_up(fresh_snow, 1)


async def fetch_elevation_pair(
    client: httpx.AsyncClient,
    pair: ElevationPair,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> Optional[ElevationWeather]:
    """
    fetch valley and summit weather of one peak.

    returns None (peak skipped) when either point fails; a partial pair is
    never returned.
    """
    now = now or datetime.now(timezone.utc)
    valley, summit = await asyncio.gather(
        fetch_point_weather(client, pair.valley, f"{pair.name} (valley)", timeout=timeout, token=token),
        fetch_point_weather(client, pair.summit, f"{pair.name} (summit)", timeout=timeout, token=token),
        return_exceptions=True,
    )

    for outcome in (valley, summit):
        if isinstance(outcome, (FetchAborted, asyncio.CancelledError)):
            raise outcome
    failures = [o for o in (valley, summit) if isinstance(o, BaseException)]
    if failures:
        logger.warning(f"skipping {pair.name}: {error_message(failures[0])}")
        return None

    freezing_level, fresh_snow = await fetch_summit_extras(
        client, pair.summit, timeout=timeout, token=token, now=now
    )
    logger.debug(f"{pair.name}: {valley.temperature}°C -> {summit.temperature}°C")

    return ElevationWeather(
        valley=valley,
        summit=summit,
        temp_difference=summit.temperature - valley.temperature,
        freezing_level=freezing_level,
        fresh_snow_24h=fresh_snow,
        timestamp=now,
        source=settings.WEATHER_SOURCE,
    )


async def fetch_elevation_weather(
    client: httpx.AsyncClient,
    region: str,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> List[ElevationWeather]:
    """valley/summit weather for every main peak of a region, in table order"""
    pairs = get_elevation_pairs(region)
    logger.info(f"fetching elevation weather for {region} ({len(pairs)} peaks)")

    results = await asyncio.gather(
        *(fetch_elevation_pair(client, pair, timeout=timeout, token=token, now=now) for pair in pairs),
        return_exceptions=True,
    )

    peaks: List[ElevationWeather] = []
    for pair, outcome in zip(pairs, results):
        if isinstance(outcome, (FetchAborted, asyncio.CancelledError)):
            raise outcome
        if isinstance(outcome, BaseException):
            logger.warning(f"failed to fetch {pair.name}: {error_message(outcome)}")
            continue
        if outcome is not None:
            peaks.append(outcome)

    logger.info(f"fetched elevation weather for {len(peaks)}/{len(pairs)} peaks")
    return peaks
