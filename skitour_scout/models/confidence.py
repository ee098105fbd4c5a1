"""
data confidence model.

every datum carries where it came from and how old it is. the level is
derived from (source_type, age_hours) and is never set by hand: build
Confidence values through the constructor functions below.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ConfidenceLevel(str, Enum):
    """coarse reliability label."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


class DataSourceType(str, Enum):
    """provenance of a datum."""
    API = "api"
    SCRAPED = "scraped"
    USER_REPORT = "user_report"
    AI_GENERATED = "ai_generated"
    CALCULATED = "calculated"
    STATIC = "static"
    SEARCH = "search"
    CACHED = "cached"


class Confidence(BaseModel):
    """provenance and reliability metadata attached to a datum"""
    model_config = ConfigDict(frozen=True)

    level: ConfidenceLevel = Field(..., description="derived reliability label")
    source_type: DataSourceType = Field(..., description="kind of source")
    source_name: str = Field(..., description="human-readable source name")
    fetched_at: datetime = Field(..., description="when the datum was fetched")
    source_date: Optional[datetime] = Field(None, description="when the source created/updated the datum")
    age_hours: Optional[float] = Field(None, description="age of the datum in hours")
    notes: Optional[str] = Field(None, description="free-text reliability notes")
    source_url: Optional[str] = Field(None, description="url of the original source")


# age thresholds in hours, (high_below, medium_below): anything older is the tail level
_AGE_BANDS: dict[DataSourceType, tuple[list[tuple[float, ConfidenceLevel]], ConfidenceLevel]] = {
    DataSourceType.API: (
        [(1, ConfidenceLevel.HIGH), (6, ConfidenceLevel.MEDIUM)],
        ConfidenceLevel.LOW,
    ),
    DataSourceType.SEARCH: (
        [(24, ConfidenceLevel.MEDIUM), (72, ConfidenceLevel.LOW)],
        ConfidenceLevel.UNKNOWN,
    ),
    DataSourceType.SCRAPED: (
        [(24, ConfidenceLevel.MEDIUM), (72, ConfidenceLevel.LOW)],
        ConfidenceLevel.UNKNOWN,
    ),
    DataSourceType.USER_REPORT: (
        [(12, ConfidenceLevel.HIGH), (48, ConfidenceLevel.MEDIUM)],
        ConfidenceLevel.LOW,
    ),
}

_FIXED_LEVELS: dict[DataSourceType, ConfidenceLevel] = {
    DataSourceType.STATIC: ConfidenceLevel.UNKNOWN,
    DataSourceType.AI_GENERATED: ConfidenceLevel.LOW,
    DataSourceType.CALCULATED: ConfidenceLevel.MEDIUM,
}

_LABELS = {
    ConfidenceLevel.HIGH: "Verified",
    ConfidenceLevel.MEDIUM: "Recent",
    ConfidenceLevel.LOW: "Uncertain",
    ConfidenceLevel.UNKNOWN: "Unverified",
}


def calculate_confidence(
    source_type: DataSourceType,
    age_hours: Optional[float],
) -> ConfidenceLevel:
    """
    derive the confidence level from source type and data age.

    static and ai_generated data have fixed levels. age-dependent sources
    without a known age, and cached data, are unknown.

    example:
        >>> calculate_confidence(DataSourceType.API, 0.5)
        <ConfidenceLevel.HIGH: 'high'>
        >>> calculate_confidence(DataSourceType.SEARCH, 30)
        <ConfidenceLevel.LOW: 'low'>
    """
    if source_type in _FIXED_LEVELS:
        return _FIXED_LEVELS[source_type]

    if source_type not in _AGE_BANDS or age_hours is None:
        return ConfidenceLevel.UNKNOWN

    bands, tail = _AGE_BANDS[source_type]
    for upper, level in bands:
        if age_hours < upper:
            return level
    return tail


def confidence_label(level: ConfidenceLevel) -> str:
    """short display label for a confidence level"""
    return _LABELS[level]


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _age_hours(source_date: Optional[datetime], now: datetime) -> Optional[float]:
    if source_date is None:
        return None
    if source_date.tzinfo is None:
        source_date = source_date.replace(tzinfo=timezone.utc)
    return max(0.0, (now - source_date).total_seconds() / 3600)


def _aged(
    source_type: DataSourceType,
    source_name: str,
    source_date: Optional[datetime],
    source_url: Optional[str],
    notes: Optional[str],
    now: Optional[datetime],
) -> Confidence:
    fetched_at = _now(now)
    age = _age_hours(source_date, fetched_at)
    return Confidence(
        level=calculate_confidence(source_type, age),
        source_type=source_type,
        source_name=source_name,
        fetched_at=fetched_at,
        source_date=source_date,
        age_hours=round(age) if age is not None else None,
        notes=notes,
        source_url=source_url,
    )


def api_confidence(
    source_name: str,
    source_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Confidence:
    """confidence for data fetched live from an official api"""
    return _aged(DataSourceType.API, source_name, _now(now), source_url, None, now)


def scraped_confidence(
    source_name: str,
    source_date: Optional[datetime],
    source_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Confidence:
    """confidence for data parsed out of an html page"""
    return _aged(DataSourceType.SCRAPED, source_name, source_date, source_url, None, now)


def search_confidence(
    source_name: str,
    source_date: Optional[datetime],
    source_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Confidence:
    """confidence for a web search snippet; undated snippets are unknown"""
    notes = None if source_date else "report date unknown"
    return _aged(DataSourceType.SEARCH, source_name, source_date, source_url, notes, now)


def user_report_confidence(
    source_name: str,
    source_date: datetime,
    now: Optional[datetime] = None,
) -> Confidence:
    """confidence for a report submitted by a user"""
    return _aged(DataSourceType.USER_REPORT, source_name, source_date, None, None, now)


def cached_confidence(
    source_name: str,
    cached_at: datetime,
    now: Optional[datetime] = None,
) -> Confidence:
    """confidence for data served from a cache"""
    return _aged(DataSourceType.CACHED, source_name, cached_at, None, "served from cache", now)


def ai_confidence(
    model: str,
    based_on: Optional[str] = None,
    source_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Confidence:
    """confidence for llm-generated or llm-summarised content"""
    return Confidence(
        level=calculate_confidence(DataSourceType.AI_GENERATED, None),
        source_type=DataSourceType.AI_GENERATED,
        source_name=f"AI ({model})",
        fetched_at=_now(now),
        notes=f"Generated based on: {based_on}" if based_on else "AI-generated content",
        source_url=source_url,
    )


def calculated_confidence(
    source_name: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Confidence:
    """confidence for values derived from other data"""
    return Confidence(
        level=calculate_confidence(DataSourceType.CALCULATED, None),
        source_type=DataSourceType.CALCULATED,
        source_name=source_name,
        fetched_at=_now(now),
        notes=notes,
    )


def static_confidence(notes: Optional[str] = None, now: Optional[datetime] = None) -> Confidence:
    """confidence for hardcoded placeholder data"""
    return Confidence(
        level=calculate_confidence(DataSourceType.STATIC, None),
        source_type=DataSourceType.STATIC,
        source_name="Static Data",
        fetched_at=_now(now),
        notes=notes or "placeholder data, not from a real source",
    )


def batch_confidence(
    level: ConfidenceLevel,
    source_type: DataSourceType,
    source_name: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Confidence:
    """
    confidence for an aggregate of several items.

    the level here is a property of the pipeline that produced the batch
    (e.g. whether llm enhancement ran), not of a single datum.
    """
    return Confidence(
        level=level,
        source_type=source_type,
        source_name=source_name,
        fetched_at=_now(now),
        notes=notes,
    )
