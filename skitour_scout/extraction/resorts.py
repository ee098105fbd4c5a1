"""
ski resort conditions scraped from resort pages.

each value is read from the visible page text by an ordered list of
patterns; the first match inside the sanity bounds wins, otherwise None.
a resort whose page cannot be fetched is still reported (all values None)
since it remains a descent option.
"""

import asyncio
import re
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

import httpx
from bs4 import BeautifulSoup

from skitour_scout.config import settings
from skitour_scout.config.resorts import get_resort_configs
from skitour_scout.models import ResortConditions, ResortConfig, scraped_confidence
from skitour_scout.observability.logger import get_logger, PipelineStep
from .cancellation import CancellationToken, FetchAborted
from .http import SourceUnavailableError, error_message, fetch_text

logger = get_logger(__name__, PipelineStep.RESORTS)

_SNOW_DEPTH_PATTERNS = [re.compile(p, re.IGNORECASE) for p in settings.SNOW_DEPTH_PATTERNS]
_TEMPERATURE_PATTERNS = [re.compile(p, re.IGNORECASE) for p in settings.TEMPERATURE_PATTERNS]


def _first_in_bounds(
    text: str,
    patterns: List[re.Pattern],
    convert: Callable[[str], float],
    bounds: Tuple[float, float],
) -> Optional[float]:
    low, high = bounds
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = convert(match.group(1))
            if low < value < high:
                return value
    return None


def page_text(html: str) -> str:
    """visible text of a page, scripts and styles dropped"""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text(" ", strip=True)


def parse_snow_depth(text: str) -> Optional[int]:
    value = _first_in_bounds(text, _SNOW_DEPTH_PATTERNS, int, settings.SNOW_DEPTH_BOUNDS_CM)
    return int(value) if value is not None else None


def parse_temperature(text: str) -> Optional[float]:
    return _first_in_bounds(text, _TEMPERATURE_PATTERNS, float, settings.TEMPERATURE_BOUNDS_C)


def parse_open_status(text: str) -> Optional[bool]:
    """closed wins over open; None when the page says neither"""
    lowered = text.lower()
    if any(word in lowered for word in settings.RESORT_CLOSED_WORDS):
        return False
    if any(word in lowered for word in settings.RESORT_OPEN_WORDS):
        return True
    return None


def parse_resort_page(config: ResortConfig, html: Optional[str], now: datetime) -> ResortConditions:
    """build the conditions of one resort; html None means the page was unavailable"""
    text = page_text(html) if html else ""
    # resort pages give a single depth, used for base and summit alike
    snow_depth = parse_snow_depth(text) if text else None
    return ResortConditions(
        name=config.name,
        region=config.region,
        snow_depth_base=snow_depth,
        snow_depth_summit=snow_depth,
        temperature=parse_temperature(text) if text else None,
        is_open=parse_open_status(text) if text else None,
        last_update=now,
        source_url=config.source_url,
        nearby_routes=list(config.nearby_routes),
        confidence=scraped_confidence(config.name, None, config.source_url, now=now),
    )


async def fetch_resort_page(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
) -> Optional[str]:
    """resort page html, None when it cannot be fetched; cancellation propagates"""
    try:
        return await fetch_text(client, url, timeout=timeout, token=token)
    except FetchAborted:
        raise
    except (httpx.HTTPError, SourceUnavailableError) as e:
        logger.warning(f"resort page unavailable {url}: {type(e).__name__}: {error_message(e)}")
        return None


async def fetch_resort_conditions(
    client: httpx.AsyncClient,
    region: str,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
    route_name: Optional[str] = None,
) -> List[ResortConditions]:
    """
    fetch every resort of a region concurrently.

    with route_name only its descent alternatives are fetched. results keep
    the configured order. a resort whose parsing fails is skipped;
    cancellation re-raises.
    """
    now = now or datetime.now(timezone.utc)
    configs = find_descent_alternatives(route_name, region) if route_name else get_resort_configs(region)
    if not configs:
        logger.info(f"no resorts for {region}" + (f" near {route_name}" if route_name else ""))
        return []

    pages = await asyncio.gather(
        *(fetch_resort_page(client, c.source_url, timeout=timeout, token=token) for c in configs),
        return_exceptions=True,
    )

    resorts: List[ResortConditions] = []
    for config, page in zip(configs, pages):
        if isinstance(page, (FetchAborted, asyncio.CancelledError)):
            raise page
        if isinstance(page, BaseException):
            logger.warning(f"failed to fetch resort {config.name}: {error_message(page)}")
            continue
        try:
            resorts.append(parse_resort_page(config, page, now))
        except ValueError as e:
            logger.warning(f"failed to parse resort {config.name}: {error_message(e)}")

    logger.info(f"{len(resorts)}/{len(configs)} resort(s) reported for {region}")
    return resorts


def find_descent_alternatives(route_name: str, region: str) -> List[ResortConfig]:
    """resorts whose nearby routes match the route name (substring either way, case-insensitive)"""
    name = route_name.lower()
    return [
        config
        for config in get_resort_configs(region)
        if any(name in route.lower() or route.lower() in name for route in config.nearby_routes)
    ]
