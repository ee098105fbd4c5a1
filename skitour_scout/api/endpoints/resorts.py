import traceback
import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from skitour_scout.api.dependencies import get_orchestrator, request_context
from skitour_scout.extraction import FetchAborted
from skitour_scout.models import ResortInput, ResortOutput
from skitour_scout.observability.logger import get_request_logger, PipelineStep

router = APIRouter()


@router.get("/resorts/{region}", response_model=ResortOutput)
async def get_resort_conditions(region: str, request: Request, route: Optional[str] = None) -> ResortOutput:
    """
    resort conditions of a region.

    with ?route=<name> only the resorts usable as a descent for that route
    are returned.
    """
    logger = get_request_logger(__name__, PipelineStep.API, str(uuid.uuid4()))
    logger.info(f"received /resorts request for {region}" + (f" (route: {route})" if route else ""))

    agent = get_orchestrator().get_agent("resorts")
    try:
        async with request_context(request, region) as context:
            result = await agent.run(ResortInput(region=region, route_name=route), context)
    except FetchAborted as e:
        raise HTTPException(status_code=503, detail="Request cancelled") from e
    except Exception as e:
        logger.error(f"request failed: {type(e).__name__}: {str(e)}")
        logger.error(f"traceback:\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=f"Error processing request: {str(e)}") from e

    if not result.success:
        raise HTTPException(status_code=502, detail=f"Resort Conditions: {result.error}")
    return result.data
