"""
condition report extraction from web search hits.

each hit is processed independently. when a generative model is available
and the snippet is long enough, the llm path extracts structured facts
through the model's structured output; any failure there falls back to the
deterministic keyword/regex path, which always produces a report.
"""

import asyncio
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field
from langchain_core.runnables import Runnable

from skitour_scout.config import settings
from skitour_scout.models import (
    ConditionReport,
    ConfidenceLevel,
    DataSourceType,
    IntelBatch,
    LLMConfig,
    SearchResult,
    Sentiment,
    ai_confidence,
    batch_confidence,
    search_confidence,
)
from skitour_scout.observability.logger import get_logger, PipelineStep
from .cancellation import CancellationToken, FetchAborted, run_cancellable
from .http import error_message
from .prompts import get_intel_extraction_prompt

logger = get_logger(__name__, PipelineStep.INTEL_EXTRACTION)

UNKNOWN_LOCATION = "Unknown"

_DATE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})"), "dmy"),
    (re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})"), "dmy"),
    (re.compile(r"(\d{4})-(\d{2})-(\d{2})"), "ymd"),
]

_PREAMBLE_PATTERNS = [
    re.compile(r"^(here is|here's|based on|according to|the text|i |let me|summary:?\s*)", re.IGNORECASE),
    re.compile(r"^(ski touring conditions?|current conditions?|conditions in)[^:]*:\s*", re.IGNORECASE),
    re.compile(r"^(unfortunately|however|note:?)\s*,?\s*", re.IGNORECASE),
    re.compile(r"^[\"']?summary[\"']?:?\s*", re.IGNORECASE),
    re.compile(r"^in (1-2|one|two) sentences?:?\s*", re.IGNORECASE),
]

_UNKNOWN_LLM_VALUES = {"", "unknown", "nieznane", "nieznana", "null", "none", "n/a"}


# ===== INTERNAL LLM SCHEMA =====
# what the llm returns, validated before it becomes a ConditionReport

class _LLMIntel(BaseModel):
    summary: str = Field(..., min_length=1)
    location: Optional[str] = None
    snow_type: Optional[str] = None
    hazards: List[str] = Field(default_factory=list)
    report_date: Optional[str] = None
    conditions_rating: Optional[str] = None
    observations: List[str] = Field(default_factory=list)


# ===== DETERMINISTIC EXTRACTION =====

def _first_label(text: str, patterns: List[Tuple[str, str]]) -> Optional[str]:
    for pattern, label in patterns:
        if re.search(pattern, text, re.IGNORECASE):
            return label
    return None


def _all_labels(text: str, patterns: List[Tuple[str, str]]) -> List[str]:
    labels: List[str] = []
    for pattern, label in patterns:
        if re.search(pattern, text, re.IGNORECASE) and label not in labels:
            labels.append(label)
    return labels


def extract_snow_type(text: str) -> Optional[str]:
    return _first_label(text, settings.SNOW_TYPE_PATTERNS)


def extract_hazards(text: str) -> List[str]:
    return _all_labels(text, settings.HAZARD_PATTERNS)


def extract_conditions(text: str) -> List[str]:
    return _all_labels(text, settings.CONDITION_PATTERNS)


def extract_location(text: str) -> str:
    """first known place name mentioned, or Unknown"""
    lowered = text.lower()
    for location in settings.KNOWN_LOCATIONS:
        if location.lower() in lowered:
            return location
    return UNKNOWN_LOCATION


def analyze_sentiment(text: str) -> Sentiment:
    """positive minus negative word count"""
    lowered = text.lower()
    score = sum(1 for word in settings.POSITIVE_WORDS if word in lowered)
    score -= sum(1 for word in settings.NEGATIVE_WORDS if word in lowered)
    if score > 0:
        return Sentiment.POSITIVE
    if score < 0:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def extract_report_date(text: str, now: datetime) -> Optional[datetime]:
    """
    date a report refers to: explicit dates first, then today/yesterday words.

    returns None when the text cannot be dated.
    """
    for pattern, order in _DATE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        a, b, c = (int(g) for g in match.groups())
        year, month, day = (c, b, a) if order == "dmy" else (a, b, c)
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            continue

    lowered = text.lower()
    if any(word in lowered for word in settings.TODAY_WORDS):
        return now
    if any(word in lowered for word in settings.YESTERDAY_WORDS):
        return now - timedelta(days=1)
    return None


def extract_deterministic(result: SearchResult, now: datetime) -> ConditionReport:
    """keyword/regex extraction, never fails"""
    text = f"{result.title} {result.snippet}"
    report_date = extract_report_date(text, now)
    source_name = result.source or settings.SEARCH_SOURCE

    return ConditionReport(
        summary=(result.snippet or result.title)[:settings.SUMMARY_MAX_CHARS],
        location=extract_location(text),
        report_date=report_date,
        source_url=result.url,
        source_name=source_name,
        conditions=extract_conditions(text),
        snow_type=extract_snow_type(text),
        hazards=extract_hazards(text),
        sentiment=analyze_sentiment(text),
        confidence=search_confidence(source_name, report_date, result.url or None, now=now),
    )


# ===== LLM EXTRACTION =====

def clean_llm_summary(text: str) -> str:
    """strip preambles and trailing fragments, capitalise, cap the length"""
    cleaned = text.strip()
    for pattern in _PREAMBLE_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    cleaned = cleaned.strip()

    # drop a trailing incomplete sentence
    last_period = cleaned.rfind(".")
    if 20 < last_period < len(cleaned) - 1:
        tail = cleaned[last_period + 1:].strip()
        if len(tail) > 5 and not tail.endswith((".", "!", "?")):
            cleaned = cleaned[:last_period + 1]

    if cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]

    limit = settings.LLM_SUMMARY_MAX_CHARS
    if len(cleaned) > limit:
        cut = cleaned.rfind(".", 0, limit)
        cleaned = cleaned[:cut + 1] if cut > 50 else cleaned[:limit - 3] + "..."
    return cleaned


def _rating_to_sentiment(rating: Optional[str]) -> Sentiment:
    rating = (rating or "").strip().lower()
    if rating == "good":
        return Sentiment.POSITIVE
    if rating in ("poor", "bad"):
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def _known(value: Optional[str]) -> Optional[str]:
    if value is None or value.strip().lower() in _UNKNOWN_LLM_VALUES:
        return None
    return value.strip()


def _parse_llm_date(value: Optional[str]) -> Optional[datetime]:
    value = _known(value)
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def build_intel_extraction_chain(llm_config: LLMConfig) -> Runnable:
    """
    builds the LCEL chain for condition extraction.

        prompt | model.with_structured_output() -> _LLMIntel
    """
    structured_model = llm_config.llm.with_structured_output(_LLMIntel, method="json_mode")
    return get_intel_extraction_prompt() | structured_model


async def extract_with_llm(
    result: SearchResult,
    llm_config: LLMConfig,
    *,
    timeout: float = 30.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> ConditionReport:
    """
    structured extraction through the generative model.

    raises on any failure (timeout, unparsable json, schema mismatch); the
    caller falls back to the deterministic path.
    """
    now = now or datetime.now(timezone.utc)
    chain = build_intel_extraction_chain(llm_config)
    intel: _LLMIntel = await run_cancellable(
        asyncio.wait_for(chain.ainvoke({"title": result.title, "snippet": result.snippet}), timeout),
        token,
    )
    summary = clean_llm_summary(intel.summary)
    if len(summary) <= 10:
        raise ValueError(f"llm summary too short: {summary!r}")

    text = f"{result.title} {result.snippet}"
    snow_type = _known(intel.snow_type)
    report_date = _parse_llm_date(intel.report_date) or extract_report_date(text, now)
    observations = [o.strip() for o in intel.observations if o and o.strip()]

    return ConditionReport(
        summary=summary,
        location=_known(intel.location) or extract_location(text),
        report_date=report_date,
        source_url=result.url,
        source_name=result.source or settings.SEARCH_SOURCE,
        conditions=observations[:settings.MAX_LLM_OBSERVATIONS] or extract_conditions(text),
        snow_type=(settings.LLM_SNOW_TYPES.get(snow_type.lower()) if snow_type else None) or extract_snow_type(text),
        hazards=[h.strip() for h in intel.hazards if h and h.strip()] or extract_hazards(text),
        sentiment=_rating_to_sentiment(intel.conditions_rating),
        confidence=ai_confidence(llm_config.model_name, based_on=result.source, source_url=result.url or None, now=now),
    )


# ===== PER RESULT / BATCH =====

async def extract_report(
    result: SearchResult,
    *,
    llm_config: Optional[LLMConfig] = None,
    use_llm: bool = False,
    min_llm_snippet_length: int = 30,
    timeout: float = 30.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> Tuple[ConditionReport, bool]:
    """
    extract one report; returns (report, used_llm).

    only cancellation propagates, every other llm failure falls back.
    """
    now = now or datetime.now(timezone.utc)
    if use_llm and llm_config is not None and len(result.snippet) > min_llm_snippet_length:
        try:
            return await extract_with_llm(result, llm_config, timeout=timeout, token=token, now=now), True
        except FetchAborted:
            raise
        except Exception as e:
            logger.warning(f"llm extraction failed for {result.source or result.title}, falling back: {type(e).__name__}: {error_message(e)}")
    return extract_deterministic(result, now), False


async def extract_reports(
    results: List[SearchResult],
    *,
    llm_config: Optional[LLMConfig] = None,
    use_llm: bool = False,
    min_llm_snippet_length: int = 30,
    timeout: float = 30.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> IntelBatch:
    """
    extract all reports concurrently, keeping the ranked order.

    batch confidence is medium when at least one report came from the llm
    path and low when only the deterministic path ran.
    """
    now = now or datetime.now(timezone.utc)
    outcomes = await asyncio.gather(*(
        extract_report(
            result,
            llm_config=llm_config,
            use_llm=use_llm,
            min_llm_snippet_length=min_llm_snippet_length,
            timeout=timeout,
            token=token,
            now=now,
        )
        for result in results
    ))

    reports = [report for report, _ in outcomes]
    llm_count = sum(1 for _, used_llm in outcomes if used_llm)
    enhanced = llm_count > 0

    confidence = batch_confidence(
        ConfidenceLevel.MEDIUM if enhanced else ConfidenceLevel.LOW,
        DataSourceType.AI_GENERATED if enhanced else DataSourceType.SEARCH,
        f"{settings.SEARCH_SOURCE} ({'LLM-enhanced' if enhanced else 'keyword-based'})",
        notes=f"{len(reports)} report(s), {llm_count} LLM-enhanced",
        now=now,
    )
    logger.info(f"extracted {len(reports)} report(s), {llm_count} via llm")
    return IntelBatch(reports=reports, confidence=confidence)
