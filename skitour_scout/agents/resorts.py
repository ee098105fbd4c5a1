"""ski resort conditions agent."""

from typing import Optional

from skitour_scout.config import settings
from skitour_scout.extraction import fetch_resort_conditions, open_client
from skitour_scout.models import ResortInput, ResortOutput, TimeoutConfig
from skitour_scout.observability.logger import get_logger, PipelineStep
from .base import Agent, AgentContext

logger = get_logger(__name__, PipelineStep.RESORTS)


class ResortConditionsTask:
    """
    snow depth, temperature and open status of the resorts in a region.

    with a route name only the resorts usable as its descent are fetched; a
    region without resorts yields an empty list, not a failure.
    """

    id = "resorts"
    name = "Resort Conditions"
    description = "Snow and lift status of nearby ski resorts, usable as descent options"
    cache_ttl_seconds = settings.RESORT_CACHE_TTL_SECONDS

    def __init__(self, timeout_config: Optional[TimeoutConfig] = None):
        self.timeout_config = timeout_config or TimeoutConfig()

    async def execute(self, input: ResortInput, context: AgentContext) -> ResortOutput:
        async with open_client(context.http_client) as client:
            resorts = await fetch_resort_conditions(
                client,
                input.region,
                timeout=self.timeout_config.resort_timeout,
                token=context.token,
                route_name=input.route_name,
            )
        if input.route_name:
            logger.info(f"{len(resorts)} descent option(s) for {input.route_name}")
        return ResortOutput(region=input.region, resorts=resorts)


def create_resort_agent(timeout_config: Optional[TimeoutConfig] = None) -> Agent[ResortInput, ResortOutput]:
    return Agent(ResortConditionsTask(timeout_config))
