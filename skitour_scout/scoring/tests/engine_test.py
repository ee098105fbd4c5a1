"""tests for route condition scoring.

covers:
- sub-score rules and clamping, including the all-absent case
- risk factor ordering and sentinels
- recommendation tiers and optimal time heuristic
"""

from datetime import datetime, timezone
from typing import List, Optional

import pytest

from skitour_scout.models import (
    AltitudeRange,
    Aspect,
    GeoPoint,
    HazardReport,
    RecommendationTier,
    Route,
    RouteDifficulty,
    ScoringConfig,
    WeatherCondition,
    WeatherSnapshot,
)
from skitour_scout.scoring import (
    NO_HAZARD_DATA,
    NO_WEATHER_DATA,
    evaluate_route,
    evaluate_routes,
    score_hazard,
    score_snow,
    score_weather,
)

NOW = datetime(2025, 1, 15, 8, 0, tzinfo=timezone.utc)


# ---- helpers ----

def _make_route(aspects: Optional[List[Aspect]] = None, summit_altitude: int = 1987) -> Route:
    return Route(
        id="kasprowy-goryczkowa",
        name="Kasprowy Wierch via Goryczkowa",
        region="Tatry",
        start_point=GeoPoint(lat=49.27, lng=19.98, altitude=1010),
        summit=GeoPoint(lat=49.2317, lng=19.9817, altitude=summit_altitude),
        elevation=977,
        distance=6.5,
        difficulty=RouteDifficulty.MODERATE,
        aspects=aspects if aspects is not None else [Aspect.E],
        duration=3.5,
    )


def _make_weather(
    condition: WeatherCondition = WeatherCondition.CLEAR,
    wind_speed: int = 10,
    visibility: float = 15,
    temperature: int = -5,
    fresh_snow_24h: float = 0,
    snow_base: int = 40,
) -> WeatherSnapshot:
    return WeatherSnapshot(
        temperature=temperature,
        feels_like=temperature - 4,
        condition=condition,
        wind_speed=wind_speed,
        wind_direction="NW",
        humidity=70,
        visibility=visibility,
        fresh_snow_24h=fresh_snow_24h,
        snow_base=snow_base,
        freezing_level=1200,
        timestamp=NOW,
        source="Open-Meteo",
    )


def _make_hazard(
    level: int = 2,
    aspects: Optional[List[Aspect]] = None,
    band: tuple = (1800, 2500),
    problems: Optional[List[str]] = None,
) -> HazardReport:
    return HazardReport(
        level=level,
        problem_aspects=aspects if aspects is not None else [Aspect.N, Aspect.NE, Aspect.NW],
        altitude_range=AltitudeRange(from_=band[0], to=band[1]),
        problems=problems if problems is not None else ["Wind-drifted snow"],
        valid_until=datetime(2025, 1, 16, 20, 0),
        source="TOPR - umiarkowane",
        report_url="https://lawiny.topr.pl/",
    )


# ---- scenarios ----

def test_scenario_clear_weather_without_hazard_data():
    evaluated = evaluate_route(_make_route(), _make_weather(), None, now=NOW)

    assert evaluated.score_breakdown.weather >= 90
    assert evaluated.score_breakdown.hazard == 50
    assert evaluated.recommendation_tier.rank <= RecommendationTier.MODERATE.rank
    assert evaluated.risk_factors[0] == NO_HAZARD_DATA


def test_scenario_high_hazard_on_route_aspect_and_altitude():
    route = _make_route(aspects=[Aspect.N], summit_altitude=2000)
    hazard = _make_hazard(level=4, aspects=[Aspect.N, Aspect.NE])

    assert score_hazard(route, hazard) == 0
    evaluated = evaluate_route(route, None, hazard, now=NOW)
    assert evaluated.score_breakdown.hazard == 0
    assert evaluated.risk_factors[:3] == [
        "Avalanche danger level 4",
        "Route crosses problematic aspects",
        "Wind-drifted snow",
    ]


def test_all_inputs_absent_scores_neutral():
    evaluated = evaluate_route(_make_route(), now=NOW)

    assert evaluated.score_breakdown.weather == 50
    assert evaluated.score_breakdown.hazard == 50
    assert evaluated.score_breakdown.snow_conditions == 50
    assert evaluated.condition_score == 50
    assert evaluated.risk_factors == [NO_HAZARD_DATA, NO_WEATHER_DATA]
    assert evaluated.recommendation_tier == RecommendationTier.CAUTION
    assert evaluated.recommendation == f"Proceed with caution. {NO_HAZARD_DATA}, {NO_WEATHER_DATA}."
    assert evaluated.optimal_time == "Normal start time is fine"


# ---- sub-scores ----

def test_weather_score_bounds_on_extremes():
    best = _make_weather(WeatherCondition.CLEAR, wind_speed=0, visibility=50)
    worst = _make_weather(WeatherCondition.HEAVY_SNOW, wind_speed=90, visibility=0.5)

    assert score_weather(best) == 100
    assert score_weather(worst) == 0


@pytest.mark.parametrize(
    "condition, wind, visibility, expected",
    [
        (WeatherCondition.PARTLY_CLOUDY, 25, 5, 80),
        (WeatherCondition.CLOUDY, 25, 5, 70),
        (WeatherCondition.FOG, 25, 1, 30),
        (WeatherCondition.RAIN, 45, 10, 50),
    ],
)
def test_weather_score_rules(condition, wind, visibility, expected):
    assert score_weather(_make_weather(condition, wind, visibility)) == expected


@pytest.mark.parametrize(
    "fresh, base, expected",
    [(0, 40, 60), (12, 40, 90), (30, 40, 70), (45, 80, 80), (5, 80, 100)],
)
def test_snow_score_rules(fresh, base, expected):
    assert score_snow(_make_weather(fresh_snow_24h=fresh, snow_base=base)) == expected


def test_hazard_score_level_steps():
    route = _make_route(aspects=[Aspect.S], summit_altitude=1500)
    assert [score_hazard(route, _make_hazard(level=lvl)) for lvl in range(1, 6)] == [100, 75, 50, 25, 0]


def test_scores_always_within_bounds():
    route = _make_route(aspects=[Aspect.N])
    for level in range(1, 6):
        for condition in WeatherCondition:
            evaluated = evaluate_route(route, _make_weather(condition, 60, 0), _make_hazard(level=level), now=NOW)
            for value in (
                evaluated.condition_score,
                evaluated.score_breakdown.weather,
                evaluated.score_breakdown.hazard,
                evaluated.score_breakdown.snow_conditions,
            ):
                assert 0 <= value <= 100


def test_custom_scoring_config():
    config = ScoringConfig(neutral_score=40)
    assert evaluate_route(_make_route(), config=config, now=NOW).condition_score == 40


# ---- risk factors, recommendation, timing ----

def test_weather_risk_flags():
    route = _make_route(summit_altitude=1500)
    weather = _make_weather(WeatherCondition.CLOUDY, wind_speed=50, visibility=1, temperature=8)
    risks = evaluate_route(route, weather, _make_hazard(level=1, problems=[]), now=NOW).risk_factors

    assert risks == ["Strong wind", "Poor visibility", "Warm temperatures - wet avalanche risk"]


def test_warm_flag_skipped_on_high_summits():
    weather = _make_weather(temperature=8)
    risks = evaluate_route(_make_route(summit_altitude=2300), weather, _make_hazard(level=1, problems=[]), now=NOW).risk_factors
    assert risks == []


def test_favorable_recommendation():
    hazard = _make_hazard(level=1, aspects=[Aspect.N], band=(2200, 2500), problems=[])
    evaluated = evaluate_route(_make_route(aspects=[Aspect.E]), _make_weather(fresh_snow_24h=10), hazard, now=NOW)

    assert evaluated.recommendation_tier == RecommendationTier.FAVORABLE
    assert evaluated.recommendation == "Conditions look favorable for Kasprowy Wierch via Goryczkowa."


def test_discouraged_recommendation_quotes_three_risks():
    route = _make_route(aspects=[Aspect.N])
    hazard = _make_hazard(level=5, problems=["New snow", "Wet snow"])
    weather = _make_weather(WeatherCondition.HEAVY_SNOW, wind_speed=70, visibility=0.5)
    evaluated = evaluate_route(route, weather, hazard, now=NOW)

    assert evaluated.recommendation_tier == RecommendationTier.DISCOURAGED
    assert evaluated.recommendation == (
        "Not recommended. Risks: Avalanche danger level 5, Route crosses problematic aspects, New snow."
    )


@pytest.mark.parametrize(
    "aspects, level, condition, expected",
    [
        ([Aspect.SE], 2, WeatherCondition.CLEAR, "Very early start (before 6:00) - descend before noon"),
        ([Aspect.N], 3, WeatherCondition.CLEAR, "Early start recommended (6:00-7:00)"),
        ([Aspect.S], 1, WeatherCondition.CLEAR, "Morning start - best conditions and views"),
        ([Aspect.S], 1, WeatherCondition.CLOUDY, "Normal start time is fine"),
    ],
)
def test_optimal_time(aspects, level, condition, expected):
    evaluated = evaluate_route(_make_route(aspects=aspects), _make_weather(condition), _make_hazard(level=level), now=NOW)
    assert evaluated.optimal_time == expected


def test_evaluate_routes_shares_timestamp():
    routes = [_make_route(), _make_route(aspects=[Aspect.N])]
    evaluated = evaluate_routes(routes, _make_weather(), None, now=NOW)

    assert [r.id for r in evaluated] == ["kasprowy-goryczkowa"] * 2
    assert all(r.evaluated_at == NOW for r in evaluated)
