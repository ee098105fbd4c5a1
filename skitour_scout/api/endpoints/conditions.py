import time
import traceback
import uuid

from fastapi import APIRouter, HTTPException, Request

from skitour_scout.api.dependencies import get_orchestrator, request_context
from skitour_scout.extraction import FetchAborted
from skitour_scout.models import OrchestratorInput, OrchestratorOutput
from skitour_scout.models.api import ConditionsRequest
from skitour_scout.observability.logger import get_request_logger, PipelineStep

router = APIRouter()


@router.post("/conditions", response_model=OrchestratorOutput)
async def get_conditions(body: ConditionsRequest, request: Request) -> OrchestratorOutput:
    """
    run one condition cycle for a region.

    fetches weather at the given point, the region's avalanche bulletin and
    optional web reports concurrently, then scores the given routes. partial
    failures are listed in summary.errors and never fail the request.
    """
    start_time = time.time()
    msg_id = str(uuid.uuid4())
    logger = get_request_logger(__name__, PipelineStep.API, msg_id)
    logger.info(
        f"received /conditions request for {body.region} "
        f"(weather={'yes' if body.location else 'no'}, routes={len(body.routes or [])})"
    )

    orchestrator_input = OrchestratorInput(
        location=body.location,
        fetch_hazard=body.fetch_hazard,
        routes=body.routes,
        intel=body.intel,
    )

    try:
        async with request_context(request, body.region) as context:
            output = await get_orchestrator().run(orchestrator_input, context)
    except FetchAborted as e:
        logger.warning(f"request cancelled after {(time.time() - start_time) * 1000:.0f}ms: {e}")
        raise HTTPException(status_code=503, detail="Request cancelled") from e
    except Exception as e:
        total_duration = (time.time() - start_time) * 1000
        logger.error(f"request failed after {total_duration:.0f}ms: {type(e).__name__}: {str(e)}")
        logger.error(f"traceback:\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=f"Error processing request: {str(e)}") from e

    logger.info(f"request completed in {(time.time() - start_time) * 1000:.0f}ms with {len(output.summary.errors)} error(s)")
    return output
