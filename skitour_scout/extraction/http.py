"""
shared async http fetch layer.

every upstream call goes through fetch_text/fetch_json so that timeouts,
status checks and cancellation behave the same for all sources. transport
errors (httpx.HTTPError, including non-2xx via raise_for_status) propagate
to the agent boundary.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from skitour_scout.config import settings
from skitour_scout.observability.logger import get_logger, PipelineStep
from .cancellation import CancellationToken, FetchAborted, run_cancellable

logger = get_logger(__name__, PipelineStep.SYSTEM)

DEFAULT_HEADERS = {
    "User-Agent": settings.USER_AGENT,
    "Accept-Language": "pl,en;q=0.8",
}


class SourceUnavailableError(Exception):
    """raised when an upstream source cannot be used (bad config or unusable payload)"""
    pass


@asynccontextmanager
async def open_client(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """
    yield the injected client, or a short-lived one that is closed afterwards.

    injected clients are owned by the caller and never closed here.
    """
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(headers=DEFAULT_HEADERS, follow_redirects=True) as owned:
        yield owned


async def _get(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[Dict[str, Any]],
    timeout: float,
    token: Optional[CancellationToken],
) -> httpx.Response:
    if token is not None:
        token.raise_if_cancelled()

    response = await run_cancellable(client.get(url, params=params, timeout=timeout), token)
    response.raise_for_status()
    return response


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
) -> str:
    """GET a url and return the decoded body"""
    response = await _get(client, url, params=params, timeout=timeout, token=token)
    return response.text


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
) -> Dict[str, Any]:
    """
    GET a url and decode a json object body.

    raises:
        SourceUnavailableError: when the body is not a json object
    """
    response = await _get(client, url, params=params, timeout=timeout, token=token)
    try:
        data = response.json()
    except ValueError as e:
        raise SourceUnavailableError(f"invalid json from {url}: {e}") from e
    if not isinstance(data, dict):
        raise SourceUnavailableError(f"unexpected json payload from {url}")
    return data


async def probe_source(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout: float = 5.0,
    token: Optional[CancellationToken] = None,
) -> bool:
    """
    availability probe: true when the url answers with a non-error status.

    failures are reported as False, only cancellation propagates.
    """
    try:
        await _get(client, url, params=None, timeout=timeout, token=token)
        return True
    except FetchAborted:
        raise
    except httpx.HTTPError as e:
        logger.warning(f"probe failed for {url}: {type(e).__name__}: {e}")
        return False


def error_message(error: BaseException) -> str:
    """readable message for errors whose str() may be empty (e.g. httpx timeouts)"""
    message = str(error)
    return message if message else type(error).__name__
