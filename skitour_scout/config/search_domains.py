"""
utility to load trusted and denied domains for web search ranking.

reads from search_domains.json in the same directory.
fail-open: returns empty lists if the file doesn't exist or can't be parsed.
"""

import json
from pathlib import Path
from typing import List, NamedTuple

from skitour_scout.observability.logger import get_logger, PipelineStep

logger = get_logger(__name__, PipelineStep.WEB_SEARCH)

_JSON_PATH = Path(__file__).parent / "search_domains.json"


class SearchDomains(NamedTuple):
    trusted: List[str]
    denied: List[str]


def _clean(values) -> List[str]:
    if not isinstance(values, list):
        return []
    return [str(domain).lower() for domain in values if domain]


def get_search_domains(json_path: Path = _JSON_PATH) -> SearchDomains:
    """
    load trusted and denied domains from search_domains.json.

    returns:
        SearchDomains(trusted, denied), both empty if the file is missing or broken

    example:
        >>> domains = get_search_domains()
        >>> "topr.pl" in domains.trusted
        True
    """
    empty = SearchDomains(trusted=[], denied=[])
    try:
        if not json_path.exists():
            logger.warning(f"search_domains.json not found at {json_path}, returning empty lists")
            return empty

        with open(json_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            logger.warning(f"unexpected json structure in {json_path}, returning empty lists")
            return empty

        domains = SearchDomains(trusted=_clean(data.get("trusted")), denied=_clean(data.get("denied")))
        logger.debug(
            f"loaded {len(domains.trusted)} trusted and {len(domains.denied)} denied domain(s) from {json_path}"
        )
        return domains

    except json.JSONDecodeError as e:
        logger.error(f"failed to parse search_domains.json: {e}, returning empty lists")
        return empty
    except OSError as e:
        logger.error(f"failed to read search_domains.json: {e}, returning empty lists")
        return empty


def domain_matches(host: str, domains: List[str]) -> bool:
    """true when host equals a listed domain or is a subdomain of one"""
    host = host.lower()
    return any(host == d or host.endswith("." + d) for d in domains)
