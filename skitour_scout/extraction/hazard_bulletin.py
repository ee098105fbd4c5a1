"""
avalanche bulletin extraction from the TOPR bulletin page.

the page is parsed by an ordered list of extractor strategies; the first
one returning a report wins and None means "no match":

1. the embedded oLawReport object (structured json)
2. a coarse law0N level marker with a date
3. otherwise no report; a level is never invented

bulletin dates are local wall-clock times and are kept naive.
"""

import json
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from skitour_scout.config import settings
from skitour_scout.models import (
    ASPECT_ORDER,
    AltitudeRange,
    Aspect,
    HazardReport,
    HazardTrend,
    scraped_confidence,
)
from skitour_scout.observability.logger import get_logger, PipelineStep
from .cancellation import CancellationToken
from .http import fetch_text

logger = get_logger(__name__, PipelineStep.HAZARD_BULLETIN)

STRUCTURED_REPORT_PATTERN = re.compile(r"(?:var|const)\s+oLawReport\s*=\s*(\{[\s\S]*?\});")
LEVEL_MARKER_PATTERN = re.compile(r"law0(\d)")
BULLETIN_DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2})")

DEFAULT_ASPECTS: List[Aspect] = [Aspect.N, Aspect.NE, Aspect.NW]

BulletinExtractor = Callable[[str, datetime], Optional[HazardReport]]


class BulletinParseError(ValueError):
    """raised inside an extractor when the bulletin payload has an unexpected shape"""
    pass


# ===== HELPERS =====

def is_covered_region(region: str) -> bool:
    """only the Tatry region family has an official bulletin"""
    return settings.HAZARD_COVERAGE_MARKER in region.lower()


def default_expiry(now: datetime) -> datetime:
    """next day at 20:00 local time"""
    tomorrow = now + timedelta(days=1)
    return tomorrow.replace(
        hour=settings.DEFAULT_EXPIRY_HOUR, minute=0, second=0, microsecond=0, tzinfo=None
    )


def parse_bulletin_date(value: Optional[str]) -> Optional[datetime]:
    """parse "2025-01-31 18:01" style timestamps, None when absent or malformed"""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip().replace(" ", "T"))
    except ValueError:
        return None


def _period(report: Dict[str, Any], name: str) -> Dict[str, Any]:
    period = report.get(name)
    return period if isinstance(period, dict) else {}


def _period_obj(report: Dict[str, Any], name: str) -> Dict[str, Any]:
    obj = _period(report, name).get("obj")
    return obj if isinstance(obj, dict) else {}


def _exposure(report: Dict[str, Any], name: str) -> Optional[str]:
    upper = _period_obj(report, name).get("upper")
    if isinstance(upper, dict):
        return upper.get("exp")
    return None


def _trend_from_history(history: Any) -> HazardTrend:
    if not isinstance(history, list) or len(history) < 2:
        return HazardTrend.STABLE
    try:
        previous = history[-2]["lev"]
        last = history[-1]["lev"]
    except (KeyError, TypeError) as e:
        raise BulletinParseError(f"malformed history entry: {e}") from e
    if last > previous:
        return HazardTrend.INCREASING
    if last < previous:
        return HazardTrend.DECREASING
    return HazardTrend.STABLE


def extract_trend(report: Dict[str, Any]) -> HazardTrend:
    """explicit tendency (mst.tnd: -1/0/1) when present, else the last two history levels"""
    tendency = (report.get("mst") or {}).get("tnd")
    if tendency is not None:
        if tendency > 0:
            return HazardTrend.INCREASING
        if tendency < 0:
            return HazardTrend.DECREASING
        return HazardTrend.STABLE
    return _trend_from_history(report.get("history"))


def extract_aspects(report: Dict[str, Any]) -> List[Aspect]:
    """aspects from the 8-char exposure bitstring (am, else pm) in N..NW order"""
    exposure = _exposure(report, "am") or _exposure(report, "pm")
    aspects: List[Aspect] = []
    if isinstance(exposure, str) and len(exposure) == 8:
        aspects = [aspect for aspect, bit in zip(ASPECT_ORDER, exposure) if bit == "1"]
    return aspects or list(DEFAULT_ASPECTS)


def extract_problems(report: Dict[str, Any]) -> List[str]:
    am = _period(report, "am")
    pm = _period(report, "pm")
    am_code = am.get("prb")
    pm_code = pm.get("prb")

    problems: List[str] = []
    if am_code in settings.PROBLEM_CODES:
        problems.append(settings.PROBLEM_CODES[am_code])
    if pm_code != am_code and pm_code in settings.PROBLEM_CODES:
        problems.append(settings.PROBLEM_CODES[pm_code])

    if pm and (pm.get("lev") or 0) > (am.get("lev") or 0):
        problems.append(settings.AFTERNOON_INCREASE_PROBLEM)

    if not problems:
        problems.append(settings.NO_PROBLEMS_PLACEHOLDER)

    comment = report.get("comment")
    if isinstance(comment, str) and comment.strip():
        comment = comment.strip()
        if len(comment) > settings.COMMENT_MAX_CHARS:
            comment = comment[:settings.COMMENT_MAX_CHARS] + "..."
        problems.insert(0, comment)
    return problems


def extract_altitude_range(report: Dict[str, Any]) -> AltitudeRange:
    height = _period_obj(report, "am").get("height") or _period_obj(report, "pm").get("height")
    if not height or height == settings.TREELINE_HEIGHT_SENTINEL:
        low, high = settings.DEFAULT_ALTITUDE_BAND
        return AltitudeRange(from_=low, to=high)
    height = int(height)
    return AltitudeRange(from_=height, to=max(height, settings.ALTITUDE_BAND_TOP))


# ===== EXTRACTOR STRATEGIES =====

def _build_structured_report(raw: str, now: datetime) -> HazardReport:
    report = json.loads(raw)
    if not isinstance(report, dict):
        raise BulletinParseError("oLawReport is not an object")

    mst = report.get("mst")
    if not isinstance(mst, dict):
        raise BulletinParseError("oLawReport has no mst block")

    level = min(5, max(1, int(mst.get("lev") or 1)))
    level_name = mst.get("desc0") or ""
    issued_at = parse_bulletin_date(report.get("iat"))
    valid_until = parse_bulletin_date(report.get("exp")) or default_expiry(now)
    source = f"{settings.HAZARD_SOURCE_PREFIX} - {level_name}" if level_name else settings.HAZARD_SOURCE_PREFIX

    logger.debug(f"parsed bulletin id={report.get('id')} issued by {report.get('iby')}")

    return HazardReport(
        level=level,
        trend=extract_trend(report),
        problem_aspects=extract_aspects(report),
        altitude_range=extract_altitude_range(report),
        problems=extract_problems(report),
        valid_until=valid_until,
        issued_at=issued_at,
        source=source,
        report_url=settings.HAZARD_BULLETIN_URL,
        confidence=scraped_confidence(source, issued_at, settings.HAZARD_BULLETIN_URL, now=now),
    )


def parse_structured_report(html: str, now: datetime) -> Optional[HazardReport]:
    """strategy 1: the embedded oLawReport json object"""
    match = STRUCTURED_REPORT_PATTERN.search(html)
    if not match:
        logger.debug("no oLawReport object in bulletin page")
        return None
    try:
        return _build_structured_report(match.group(1), now)
    except (json.JSONDecodeError, BulletinParseError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"failed to parse oLawReport: {type(e).__name__}: {e}")
        return None


def parse_level_marker_report(html: str, now: datetime) -> Optional[HazardReport]:
    """strategy 2: a law0N marker (class or image name) plus the second date on the page"""
    level = None
    for match in LEVEL_MARKER_PATTERN.finditer(html):
        candidate = int(match.group(1))
        if 1 <= candidate <= 5:
            level = candidate
            break
    if level is None:
        return None

    dates = BULLETIN_DATE_PATTERN.findall(html)
    valid_until = parse_bulletin_date(dates[1]) if len(dates) > 1 else None
    low, high = settings.DEFAULT_ALTITUDE_BAND

    return HazardReport(
        level=level,
        trend=HazardTrend.STABLE,
        problem_aspects=list(DEFAULT_ASPECTS),
        altitude_range=AltitudeRange(from_=low, to=high),
        problems=[settings.FALLBACK_PROBLEMS_PLACEHOLDER],
        valid_until=valid_until or default_expiry(now),
        source=settings.HAZARD_FALLBACK_SOURCE,
        report_url=settings.HAZARD_BULLETIN_URL,
        confidence=scraped_confidence(settings.HAZARD_FALLBACK_SOURCE, None, settings.HAZARD_BULLETIN_URL, now=now),
    )


BULLETIN_EXTRACTORS: List[BulletinExtractor] = [
    parse_structured_report,
    parse_level_marker_report,
]


def parse_bulletin(html: str, now: Optional[datetime] = None) -> Optional[HazardReport]:
    """run the extractor strategies in order, None when none matches"""
    now = now or datetime.now(timezone.utc)
    for extractor in BULLETIN_EXTRACTORS:
        report = extractor(html, now)
        if report is not None:
            logger.debug(f"bulletin parsed by {extractor.__name__}")
            return report
    logger.warning("no hazard level found in bulletin page")
    return None


async def fetch_bulletin(
    client: httpx.AsyncClient,
    *,
    url: Optional[str] = None,
    timeout: float = 20.0,
    token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> Optional[HazardReport]:
    """
    fetch and parse the bulletin page.

    transport errors propagate; an unparsable page yields None.
    """
    html = await fetch_text(client, url or settings.HAZARD_BULLETIN_URL, timeout=timeout, token=token)
    return parse_bulletin(html, now)


# ===== STATIC TABLES =====

def danger_description(level: int) -> str:
    return settings.DANGER_DESCRIPTIONS[level]


def danger_recommendations(level: int) -> List[str]:
    return list(settings.DANGER_RECOMMENDATIONS[level])
