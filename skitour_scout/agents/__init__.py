from .base import Agent, AgentContext, AgentTask, LLM_CAPABILITY, run_task
from .weather import WeatherTask, ElevationWeatherTask, create_weather_agent, create_elevation_agent
from .hazard import HazardBulletinTask, create_hazard_agent
from .web_search import WebSearchTask, create_web_search_agent
from .resorts import ResortConditionsTask, create_resort_agent
from .orchestrator import Orchestrator, ROUTE_EVALUATION_TIMING

__all__ = [
    "Agent",
    "AgentContext",
    "AgentTask",
    "LLM_CAPABILITY",
    "run_task",
    "WeatherTask",
    "ElevationWeatherTask",
    "create_weather_agent",
    "create_elevation_agent",
    "HazardBulletinTask",
    "create_hazard_agent",
    "WebSearchTask",
    "create_web_search_agent",
    "ResortConditionsTask",
    "create_resort_agent",
    "Orchestrator",
    "ROUTE_EVALUATION_TIMING",
]
