"""avalanche bulletin agent."""

from typing import Optional

from skitour_scout.config import settings
from skitour_scout.extraction import fetch_bulletin, is_covered_region, open_client
from skitour_scout.models import HazardInput, HazardReport, TimeoutConfig
from skitour_scout.observability.logger import get_logger, PipelineStep
from .base import Agent, AgentContext

logger = get_logger(__name__, PipelineStep.HAZARD_BULLETIN)


class HazardBulletinTask:
    """
    fetches the official bulletin for a region.

    regions outside bulletin coverage return None without any network call;
    None is "no report", not a failure.
    """

    id = "hazard"
    name = "Hazard Bulletin"
    description = "Official avalanche bulletin (TOPR) for the Tatry region"
    cache_ttl_seconds = settings.HAZARD_CACHE_TTL_SECONDS

    def __init__(self, timeout_config: Optional[TimeoutConfig] = None, bulletin_url: Optional[str] = None):
        self.timeout_config = timeout_config or TimeoutConfig()
        self.bulletin_url = bulletin_url

    async def execute(self, input: HazardInput, context: AgentContext) -> Optional[HazardReport]:
        if not is_covered_region(input.region):
            logger.info(f"no bulletin coverage for {input.region}")
            return None

        async with open_client(context.http_client) as client:
            report = await fetch_bulletin(
                client,
                url=self.bulletin_url,
                timeout=self.timeout_config.hazard_timeout,
                token=context.token,
            )

        if report is not None:
            logger.info(f"bulletin for {input.region}: level {report.level}, {report.trend.value}")
        return report


def create_hazard_agent(timeout_config: Optional[TimeoutConfig] = None) -> Agent[HazardInput, Optional[HazardReport]]:
    return Agent(HazardBulletinTask(timeout_config))
