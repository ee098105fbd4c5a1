"""
web search intel agent.

queries -> concurrent searches (each allowed to fail) -> dedupe -> filter
-> rank -> per-result extraction. an empty outcome is a valid low
confidence batch, not a failure.
"""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

import httpx

from skitour_scout.config import settings
from skitour_scout.config.search_domains import SearchDomains, get_search_domains
from skitour_scout.extraction import (
    FetchAborted,
    build_search_queries,
    dedupe_results,
    error_message,
    extract_reports,
    filter_results,
    open_client,
    rank_results,
    search,
)
from skitour_scout.models import (
    ConfidenceLevel,
    DataSourceType,
    IntelBatch,
    SearchConfig,
    SearchResult,
    TimeoutConfig,
    WebSearchInput,
    batch_confidence,
)
from skitour_scout.observability.logger import get_logger, PipelineStep
from .base import Agent, AgentContext

logger = get_logger(__name__, PipelineStep.WEB_SEARCH)


class WebSearchTask:
    id = "websearch"
    name = "Web Search"
    description = "Recent ski touring condition reports found on the web"
    cache_ttl_seconds = settings.SEARCH_CACHE_TTL_SECONDS

    def __init__(
        self,
        timeout_config: Optional[TimeoutConfig] = None,
        search_config: Optional[SearchConfig] = None,
        domains: Optional[SearchDomains] = None,
    ):
        self.timeout_config = timeout_config or TimeoutConfig()
        self.search_config = search_config or SearchConfig()
        self.domains = domains if domains is not None else get_search_domains()

    async def _search_all(
        self,
        client: httpx.AsyncClient,
        queries: List[str],
        context: AgentContext,
    ) -> List[SearchResult]:
        outcomes = await asyncio.gather(
            *(
                search(
                    client,
                    query,
                    timeout=self.timeout_config.search_timeout_per_query,
                    token=context.token,
                    max_results=self.search_config.max_results_per_page,
                )
                for query in queries
            ),
            return_exceptions=True,
        )

        results: List[SearchResult] = []
        for query, outcome in zip(queries, outcomes):
            if isinstance(outcome, (FetchAborted, asyncio.CancelledError)):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.warning(f"query '{query}' failed: {type(outcome).__name__}: {error_message(outcome)}")
                continue
            results.extend(outcome)
        return results

    async def execute(self, input: WebSearchInput, context: AgentContext) -> IntelBatch:
        now = datetime.now(timezone.utc)
        queries = build_search_queries(
            input.region,
            input.locations,
            year=now.year,
            max_queries=input.max_queries or self.search_config.max_queries,
        )
        logger.info(f"running {len(queries)} search queries for {input.region}")

        async with open_client(context.http_client) as client:
            raw_results = await self._search_all(client, queries, context)

        unique = dedupe_results(raw_results)
        filtered = filter_results(unique, self.domains)
        ranked = rank_results(
            filtered,
            self.domains,
            year=now.year,
            min_score=self.search_config.min_relevance_score,
            limit=input.limit,
        )
        logger.info(
            f"search hits: {len(raw_results)} raw, {len(unique)} unique, "
            f"{len(filtered)} after filters, {len(ranked)} ranked"
        )

        if not ranked:
            return IntelBatch(
                reports=[],
                confidence=batch_confidence(
                    ConfidenceLevel.LOW,
                    DataSourceType.SEARCH,
                    settings.SEARCH_SOURCE,
                    notes=f"No results found. Queries tried: {', '.join(queries[:3])}",
                    now=now,
                ),
            )

        return await extract_reports(
            ranked,
            llm_config=context.llm_config,
            use_llm=context.llm_enabled,
            min_llm_snippet_length=self.search_config.min_llm_snippet_length,
            timeout=self.timeout_config.llm_timeout,
            token=context.token,
            now=now,
        )


def create_web_search_agent(
    timeout_config: Optional[TimeoutConfig] = None,
    search_config: Optional[SearchConfig] = None,
    domains: Optional[SearchDomains] = None,
) -> Agent[WebSearchInput, IntelBatch]:
    return Agent(WebSearchTask(timeout_config, search_config, domains))
