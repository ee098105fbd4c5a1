import traceback
import uuid

from fastapi import APIRouter, HTTPException, Request

from skitour_scout.api.dependencies import get_orchestrator, request_context
from skitour_scout.extraction import FetchAborted
from skitour_scout.models import ElevationInput, ElevationOutput
from skitour_scout.observability.logger import get_request_logger, PipelineStep

router = APIRouter()


@router.get("/elevation/{region}", response_model=ElevationOutput)
async def get_elevation_weather(region: str, request: Request) -> ElevationOutput:
    """valley vs summit weather for the main peaks of a region"""
    logger = get_request_logger(__name__, PipelineStep.API, str(uuid.uuid4()))
    logger.info(f"received /elevation request for {region}")

    agent = get_orchestrator().get_agent("elevation")
    try:
        async with request_context(request, region) as context:
            result = await agent.run(ElevationInput(region=region), context)
    except FetchAborted as e:
        raise HTTPException(status_code=503, detail="Request cancelled") from e
    except Exception as e:
        logger.error(f"request failed: {type(e).__name__}: {str(e)}")
        logger.error(f"traceback:\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=f"Error processing request: {str(e)}") from e

    if not result.success:
        raise HTTPException(status_code=502, detail=f"Elevation Weather: {result.error}")
    return result.data
