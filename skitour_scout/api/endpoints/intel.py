import time
import traceback
import uuid

from fastapi import APIRouter, HTTPException, Request

from skitour_scout.api.dependencies import get_orchestrator, request_context
from skitour_scout.extraction import FetchAborted
from skitour_scout.models import IntelBatch, WebSearchInput
from skitour_scout.models.api import IntelRequest
from skitour_scout.observability.logger import get_request_logger, PipelineStep

router = APIRouter()


@router.post("/intel", response_model=IntelBatch)
async def get_intel(body: IntelRequest, request: Request) -> IntelBatch:
    """recent web condition reports for a region, ranked by relevance"""
    start_time = time.time()
    msg_id = str(uuid.uuid4())
    logger = get_request_logger(__name__, PipelineStep.API, msg_id)
    logger.info(f"received /intel request for {body.region} ({len(body.locations)} location(s))")

    agent = get_orchestrator().get_agent("websearch")
    search_input = WebSearchInput(region=body.region, locations=body.locations, limit=body.limit)

    try:
        async with request_context(request, body.region) as context:
            result = await agent.run(search_input, context)
    except FetchAborted as e:
        logger.warning(f"request cancelled: {e}")
        raise HTTPException(status_code=503, detail="Request cancelled") from e
    except Exception as e:
        logger.error(f"request failed: {type(e).__name__}: {str(e)}")
        logger.error(f"traceback:\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=f"Error processing request: {str(e)}") from e

    if not result.success:
        logger.warning(f"web search failed: {result.error}")
        raise HTTPException(status_code=502, detail=f"Web Search: {result.error}")

    logger.info(f"returning {len(result.data.reports)} report(s) in {(time.time() - start_time) * 1000:.0f}ms")
    return result.data
