"""
filtering and relevance ranking of web search hits.

filtering is two-sided: denied domains are always dropped, commercial or
lift-operation hits are dropped unless they also talk about touring. the
survivors are scored with weighted keyword tables and ranked.
"""

from typing import List, Optional

from skitour_scout.config import settings
from skitour_scout.config.search_domains import SearchDomains, domain_matches
from skitour_scout.models import SearchResult
from skitour_scout.observability.logger import get_logger, PipelineStep

logger = get_logger(__name__, PipelineStep.WEB_SEARCH)


def _text(result: SearchResult) -> str:
    return f"{result.title} {result.snippet}".lower()


def contains_any(text: str, terms: List[str]) -> bool:
    return any(term in text for term in terms)


def is_denied_domain(result: SearchResult, domains: SearchDomains) -> bool:
    return bool(result.source) and domain_matches(result.source, domains.denied)


def is_commercial(result: SearchResult) -> bool:
    """commercial/lift text without any touring context"""
    text = _text(result)
    return contains_any(text, settings.COMMERCIAL_TERMS) and not contains_any(text, settings.TOURING_TERMS)


def filter_results(results: List[SearchResult], domains: SearchDomains) -> List[SearchResult]:
    kept: List[SearchResult] = []
    for result in results:
        if is_denied_domain(result, domains):
            logger.debug(f"dropping denied domain {result.source}")
            continue
        if is_commercial(result):
            logger.debug(f"dropping commercial hit {result.url or result.title}")
            continue
        kept.append(result)
    return kept


def relevance_score(result: SearchResult, domains: SearchDomains, year: int) -> int:
    """
    weighted keyword score of a hit.

    each table counts once: touring +3, trip report +2, snow +1,
    trusted domain +2, current year +1, lodging -3.
    """
    weights = settings.RELEVANCE_WEIGHTS
    text = _text(result)
    score = 0
    if contains_any(text, settings.TOURING_TERMS):
        score += weights["touring"]
    if contains_any(text, settings.TRIP_REPORT_TERMS):
        score += weights["trip_report"]
    if contains_any(text, settings.SNOW_TERMS):
        score += weights["snow"]
    if result.source and domain_matches(result.source, domains.trusted):
        score += weights["trusted_domain"]
    if str(year) in text:
        score += weights["current_year"]
    if contains_any(text, settings.LODGING_TERMS):
        score += weights["lodging"]
    return score


def rank_results(
    results: List[SearchResult],
    domains: SearchDomains,
    *,
    year: int,
    min_score: int,
    limit: Optional[int] = None,
) -> List[SearchResult]:
    """drop hits below min_score, stable sort by score descending, truncate to limit"""
    scored = [(relevance_score(r, domains, year), r) for r in results]
    kept = [(score, r) for score, r in scored if score >= min_score]
    # sorted() is stable, equal scores keep their search order
    ranked = [r for _, r in sorted(kept, key=lambda pair: pair[0], reverse=True)]
    logger.debug(f"ranked {len(ranked)}/{len(results)} hit(s) at min score {min_score}")
    return ranked[:limit] if limit is not None else ranked
