"""weather and elevation weather agents backed by Open-Meteo."""

from typing import Optional

from skitour_scout.config import settings
from skitour_scout.extraction import fetch_current_weather, fetch_elevation_weather, open_client
from skitour_scout.models import (
    ElevationInput,
    ElevationOutput,
    TimeoutConfig,
    WeatherInput,
    WeatherSnapshot,
)
from .base import Agent, AgentContext


class WeatherTask:
    id = "weather"
    name = "Weather"
    description = "Current weather, fresh snow and freezing level from Open-Meteo"
    cache_ttl_seconds = settings.WEATHER_CACHE_TTL_SECONDS

    def __init__(self, timeout_config: Optional[TimeoutConfig] = None):
        self.timeout_config = timeout_config or TimeoutConfig()

    async def execute(self, input: WeatherInput, context: AgentContext) -> WeatherSnapshot:
        async with open_client(context.http_client) as client:
            return await fetch_current_weather(
                client,
                input,
                timeout=self.timeout_config.weather_timeout,
                token=context.token,
            )


class ElevationWeatherTask:
    id = "elevation"
    name = "Elevation Weather"
    description = "Valley and summit weather for the main peaks of a region"
    cache_ttl_seconds = settings.WEATHER_CACHE_TTL_SECONDS

    def __init__(self, timeout_config: Optional[TimeoutConfig] = None):
        self.timeout_config = timeout_config or TimeoutConfig()

    async def execute(self, input: ElevationInput, context: AgentContext) -> ElevationOutput:
        async with open_client(context.http_client) as client:
            peaks = await fetch_elevation_weather(
                client,
                input.region,
                timeout=self.timeout_config.weather_timeout,
                token=context.token,
            )
        return ElevationOutput(region=input.region, peaks=peaks)


def create_weather_agent(timeout_config: Optional[TimeoutConfig] = None) -> Agent[WeatherInput, WeatherSnapshot]:
    return Agent(WeatherTask(timeout_config))


def create_elevation_agent(timeout_config: Optional[TimeoutConfig] = None) -> Agent[ElevationInput, ElevationOutput]:
    return Agent(ElevationWeatherTask(timeout_config))
