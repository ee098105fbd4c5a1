"""tests for the avalanche bulletin extractor chain."""

from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from skitour_scout.extraction.hazard_bulletin import (
    parse_bulletin,
    parse_structured_report,
    parse_level_marker_report,
    fetch_bulletin,
    is_covered_region,
    default_expiry,
    danger_description,
    danger_recommendations,
)
from skitour_scout.models import Aspect, ConfidenceLevel, HazardTrend

FIXTURES = Path(__file__).parent / "fixtures"
NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def _page(report_json: str) -> str:
    return f"<html><script>const oLawReport = {report_json};</script></html>"


# ===== structured strategy =====

def test_structured_report_from_fixture():
    html = (FIXTURES / "bulletin_structured.html").read_text(encoding="utf-8")
    report = parse_bulletin(html, NOW)

    assert report is not None
    assert report.level == 3
    assert report.trend == HazardTrend.INCREASING
    assert report.problem_aspects == [Aspect.N, Aspect.NE, Aspect.NW]
    assert report.altitude_range.from_ == 1600
    assert report.altitude_range.to == 2500
    assert report.problems == [
        "Opady nowego śniegu i silny wiatr tworzą nawisy.",
        "Wind-drifted snow",
        "New snow",
        "Increasing danger in afternoon",
    ]
    assert report.issued_at == datetime(2025, 1, 15, 7, 30)
    assert report.valid_until == datetime(2025, 1, 16, 20, 0)
    assert report.source == "TOPR - znaczne"
    assert report.confidence.level == ConfidenceLevel.MEDIUM


def test_level_is_clamped():
    assert parse_bulletin(_page('{"mst": {"lev": 7}}'), NOW).level == 5
    assert parse_bulletin(_page('{"mst": {"lev": 0}}'), NOW).level == 1


def test_trend_falls_back_to_history():
    html = _page('{"mst": {"lev": 2}, "history": [{"lev": 3}, {"lev": 3}, {"lev": 2}]}')
    assert parse_bulletin(html, NOW).trend == HazardTrend.DECREASING


def test_trend_stable_without_tendency_or_history():
    assert parse_bulletin(_page('{"mst": {"lev": 2}}'), NOW).trend == HazardTrend.STABLE


def test_pm_exposure_used_when_am_missing():
    html = _page('{"mst": {"lev": 2}, "pm": {"lev": 2, "obj": {"upper": {"exp": "00001000"}}}}')
    assert parse_bulletin(html, NOW).problem_aspects == [Aspect.S]


def test_bad_exposure_defaults_to_north_aspects():
    html = _page('{"mst": {"lev": 2}, "am": {"lev": 2, "obj": {"upper": {"exp": "101"}}}}')
    assert parse_bulletin(html, NOW).problem_aspects == [Aspect.N, Aspect.NE, Aspect.NW]


def test_unknown_problem_codes_dropped_and_placeholder_used():
    html = _page('{"mst": {"lev": 2}, "am": {"lev": 2, "prb": "prxx"}}')
    assert parse_bulletin(html, NOW).problems == ["Check report for details"]


def test_duplicate_pm_problem_skipped():
    html = _page('{"mst": {"lev": 2}, "am": {"lev": 2, "prb": "prps"}, "pm": {"lev": 2, "prb": "prps"}}')
    assert parse_bulletin(html, NOW).problems == ["Persistent weak layers"]


def test_long_comment_truncated():
    comment = "x" * 200
    html = _page('{"mst": {"lev": 2}, "comment": "%s"}' % comment)
    first = parse_bulletin(html, NOW).problems[0]
    assert first == "x" * 150 + "..."


def test_treeline_height_sentinel_maps_to_default_band():
    html = _page('{"mst": {"lev": 2}, "am": {"lev": 2, "obj": {"height": 999}}}')
    band = parse_bulletin(html, NOW).altitude_range
    assert (band.from_, band.to) == (1800, 2500)


def test_missing_expiry_defaults_to_next_day_evening():
    report = parse_bulletin(_page('{"mst": {"lev": 2}}'), NOW)
    assert report.valid_until == datetime(2025, 1, 16, 20, 0)
    assert report.issued_at is None
    assert report.confidence.level == ConfidenceLevel.UNKNOWN


def test_structured_strategy_returns_none_on_broken_json():
    assert parse_structured_report(_page('{"mst": {"lev": 2,,}}'), NOW) is None


# ===== level marker strategy =====

def test_level_marker_fallback():
    html = '<div class="law02"></div><p>wydano 2025-01-15 07:30, ważny do 2025-01-16 20:00</p>'
    report = parse_bulletin(html, NOW)
    assert report is not None
    assert report.level == 2
    assert report.problem_aspects == [Aspect.N, Aspect.NE, Aspect.NW]
    assert (report.altitude_range.from_, report.altitude_range.to) == (1800, 2500)
    assert report.trend == HazardTrend.STABLE
    assert report.valid_until == datetime(2025, 1, 16, 20, 0)


def test_broken_structured_object_falls_back_to_marker():
    html = _page('{"mst": broken}') + '<img src="law04.png">'
    assert parse_bulletin(html, NOW).level == 4


def test_level_marker_out_of_range_ignored():
    assert parse_level_marker_report('<div class="law07"></div>', NOW) is None


def test_no_marker_means_no_report():
    assert parse_bulletin("<html><body>brak komunikatu</body></html>", NOW) is None


# ===== coverage and fetch =====

def test_region_coverage():
    assert is_covered_region("Tatry")
    assert is_covered_region("Tatry Wysokie")
    assert not is_covered_region("Beskid Śląski")


@pytest.mark.asyncio
async def test_fetch_bulletin_parses_page():
    html = (FIXTURES / "bulletin_structured.html").read_text(encoding="utf-8")

    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=html))) as client:
        report = await fetch_bulletin(client, now=NOW)

    assert report.level == 3


@pytest.mark.asyncio
async def test_fetch_bulletin_transport_error_propagates():
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(503))) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_bulletin(client, now=NOW)


# ===== static tables =====

def test_default_expiry_is_naive_next_evening():
    assert default_expiry(NOW) == datetime(2025, 1, 16, 20, 0)


def test_static_tables_cover_all_levels():
    for level in range(1, 6):
        assert danger_description(level)
        assert len(danger_recommendations(level)) >= 3
    assert danger_description(3).startswith("Considerable")
