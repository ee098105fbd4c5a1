"""
web search result parsing for the DuckDuckGo html endpoint.

the result markup is not stable, so the page is parsed by an ordered list
of strategies; the first one producing results wins:

1. container based: one .result block per hit (BeautifulSoup)
2. class based: result__a / result-link anchors paired with snippets by position
3. redirect-link regex: any anchor carrying a uddg= redirect parameter
"""

import html as html_lib
import re
from typing import Callable, Dict, List, Optional
from urllib.parse import unquote, urlparse

import httpx
from bs4 import BeautifulSoup

from skitour_scout.config import settings
from skitour_scout.models import SearchResult
from skitour_scout.observability.logger import get_logger, PipelineStep
from .cancellation import CancellationToken
from .http import fetch_text

logger = get_logger(__name__, PipelineStep.WEB_SEARCH)

MAX_RESULTS_PER_PAGE = 10

_LINK_SELECTOR = "a.result__a, a.result-link"
_SNIPPET_SELECTOR = ".result__snippet, .result-snippet"
_REDIRECT_LINK_PATTERN = re.compile(r'<a[^>]*href="[^"]*uddg=([^"&]*)[^"]*"[^>]*>([\s\S]*?)</a>', re.IGNORECASE)
_REGEX_SNIPPET_PATTERN = re.compile(
    r'<(a|span|div)[^>]*class="[^"]*result__snippet[^"]*"[^>]*>([\s\S]*?)</\1>', re.IGNORECASE
)
_UDDG_PARAM_PATTERN = re.compile(r"[?&]uddg=([^&]*)")
_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE_PATTERN = re.compile(r"\s+")

SearchStrategy = Callable[[str], List[SearchResult]]


# ---------------------------------------------------------------------------
# shared helpers
# ---------------------------------------------------------------------------

def decode_redirect_url(raw: Optional[str]) -> Optional[str]:
    """
    resolve a search engine link to the target url.

    handles //duckduckgo.com/l/?uddg=<encoded> redirects, absolute urls and
    protocol-relative urls. anything else is None.
    """
    if not raw:
        return None
    raw = raw.strip()
    match = _UDDG_PARAM_PATTERN.search(raw)
    if match:
        target = unquote(match.group(1))
        return target if target.startswith("http") else None
    if raw.startswith("http"):
        return raw
    if raw.startswith("//"):
        return "https:" + raw
    return None


def host_of(url: str) -> str:
    """hostname without a leading www."""
    host = urlparse(url).hostname or ""
    return host[4:] if host.startswith("www.") else host


def clean_text(text: str) -> str:
    """unescape entities, strip tags and collapse whitespace"""
    text = _TAG_PATTERN.sub("", html_lib.unescape(text or ""))
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def build_result(title: str, href: Optional[str], snippet: str) -> Optional[SearchResult]:
    """
    build a SearchResult or None when the hit carries nothing usable.

    links back into the search engine are treated as missing; a hit without
    both a usable link and a snippet is dropped.
    """
    url = decode_redirect_url(href)
    if url and (settings.SEARCH_ENGINE_HOST in host_of(url) or not host_of(url)):
        url = None
    snippet = clean_text(snippet)
    if not url and not snippet:
        return None
    return SearchResult(
        title=clean_text(title) or "Unknown",
        snippet=snippet,
        url=url or "",
        source=host_of(url) if url else "",
    )


# ---------------------------------------------------------------------------
# strategies
# ---------------------------------------------------------------------------

def parse_result_containers(html: str) -> List[SearchResult]:
    """strategy 1: one .result container per hit"""
    soup = BeautifulSoup(html, "lxml")
    results: List[SearchResult] = []
    for container in soup.select("div.result, div.web-result"):
        classes = container.get("class") or []
        if "result--ad" in classes:
            continue
        link = container.select_one(_LINK_SELECTOR) or container.select_one('a[href*="uddg="]')
        snippet = container.select_one(_SNIPPET_SELECTOR)
        result = build_result(
            link.get_text(" ", strip=True) if link else "",
            link.get("href") if link else None,
            snippet.get_text(" ", strip=True) if snippet else "",
        )
        if result is not None:
            results.append(result)
    return results


def parse_result_links(html: str) -> List[SearchResult]:
    """strategy 2: result anchors and snippets paired by position"""
    soup = BeautifulSoup(html, "lxml")
    links = soup.select(_LINK_SELECTOR)
    snippets = [s.get_text(" ", strip=True) for s in soup.select(_SNIPPET_SELECTOR)]
    results: List[SearchResult] = []
    for index, link in enumerate(links):
        snippet = snippets[index] if index < len(snippets) else ""
        result = build_result(link.get_text(" ", strip=True), link.get("href"), snippet)
        if result is not None:
            results.append(result)
    return results


def parse_redirect_links(html: str) -> List[SearchResult]:
    """strategy 3: raw uddg= redirect anchors, tolerant of broken markup"""
    snippets = [m.group(2) for m in _REGEX_SNIPPET_PATTERN.finditer(html)]
    results: List[SearchResult] = []
    for index, match in enumerate(_REDIRECT_LINK_PATTERN.finditer(html)):
        target = unquote(match.group(1))
        if not target.startswith("http"):
            continue
        snippet = snippets[index] if index < len(snippets) else ""
        result = build_result(match.group(2), target, snippet)
        if result is not None:
            results.append(result)
    return results


SEARCH_STRATEGIES: List[SearchStrategy] = [
    parse_result_containers,
    parse_result_links,
    parse_redirect_links,
]


def parse_search_results(html: str, max_results: int = MAX_RESULTS_PER_PAGE) -> List[SearchResult]:
    """parse a results page with the first strategy that yields hits"""
    for strategy in SEARCH_STRATEGIES:
        results = strategy(html)
        if results:
            logger.debug(f"{strategy.__name__} parsed {len(results)} result(s) from {len(html)} chars")
            return results[:max_results]
    logger.debug(f"no results parsed from {len(html)} chars")
    return []


def dedupe_results(results: List[SearchResult]) -> List[SearchResult]:
    """
    drop repeated urls, first occurrence wins.

    hits without a url have no identity and are all kept. idempotent.
    """
    seen: Dict[str, bool] = {}
    unique: List[SearchResult] = []
    for result in results:
        if result.url:
            if result.url in seen:
                continue
            seen[result.url] = True
        unique.append(result)
    return unique


async def search(
    client: httpx.AsyncClient,
    query: str,
    *,
    timeout: float = 15.0,
    token: Optional[CancellationToken] = None,
    max_results: int = MAX_RESULTS_PER_PAGE,
) -> List[SearchResult]:
    """run one search query and parse the results page"""
    html = await fetch_text(client, settings.SEARCH_URL, params={"q": query}, timeout=timeout, token=token)
    return parse_search_results(html, max_results)
