"""
shared request plumbing for the api endpoints: the engine singleton, the
per-request AgentContext and client-disconnect cancellation.
"""

import asyncio
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator

from fastapi import Request

from skitour_scout.agents import AgentContext, LLM_CAPABILITY, Orchestrator
from skitour_scout.config import get_default_scout_config
from skitour_scout.extraction import CancellationToken, open_client
from skitour_scout.models import ScoutConfig

DISCONNECT_POLL_SECONDS = 0.5


@lru_cache(maxsize=1)
def get_scout_config() -> ScoutConfig:
    return get_default_scout_config()


@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    return Orchestrator(get_scout_config())


async def _cancel_on_disconnect(request: Request, token: CancellationToken) -> None:
    while not token.cancelled:
        if await request.is_disconnected():
            token.cancel("client disconnected")
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


@asynccontextmanager
async def request_context(request: Request, region: str) -> AsyncIterator[AgentContext]:
    """
    AgentContext for one request.

    one http client is shared by every agent of the request, and the
    cancellation token fires when the client goes away.
    """
    config = get_scout_config()
    token = CancellationToken()
    watcher = asyncio.create_task(_cancel_on_disconnect(request, token))
    try:
        async with open_client() as client:
            yield AgentContext(
                region=region,
                capabilities={LLM_CAPABILITY} if config.llm_config is not None else set(),
                token=token,
                llm_config=config.llm_config,
                http_client=client,
            )
    finally:
        watcher.cancel()
