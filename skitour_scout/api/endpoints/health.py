"""source availability probes."""

import asyncio
from typing import Dict

from fastapi import APIRouter

from skitour_scout.api.dependencies import get_scout_config
from skitour_scout.config import settings
from skitour_scout.extraction import open_client, probe_source
from skitour_scout.models.api import HealthResponse, SourceHealth
from skitour_scout.observability.logger import get_logger, PipelineStep

router = APIRouter()
logger = get_logger(__name__, PipelineStep.API)


def _probe_urls() -> Dict[str, str]:
    return {
        "weather": f"{settings.WEATHER_API_URL}?latitude=49.23&longitude=19.98&current=temperature_2m",
        "hazard": settings.HAZARD_BULLETIN_URL,
        "search": f"{settings.SEARCH_URL}?q=skitury",
    }


@router.get("/health/sources", response_model=HealthResponse)
async def check_sources() -> HealthResponse:
    """probe every upstream source once; healthy only when all answer"""
    config = get_scout_config()
    urls = _probe_urls()

    async with open_client() as client:
        outcomes = await asyncio.gather(*(
            probe_source(client, url, timeout=config.timeout_config.health_check_timeout)
            for url in urls.values()
        ))

    sources = {
        name: SourceHealth.UP if ok else SourceHealth.DOWN
        for name, ok in zip(urls.keys(), outcomes)
    }
    status = "healthy" if all(outcomes) else "degraded"
    logger.info(f"source health: {status} {', '.join(f'{k}={v.value}' for k, v in sources.items())}")

    return HealthResponse(status=status, sources=sources, llm_configured=config.llm_config is not None)
