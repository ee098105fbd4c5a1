"""
route condition scoring.

pure functions: weather, hazard and snow facts in, EvaluatedRoute out. each
sub-score is clamped to [0, 100] and starts at the neutral score when its
input is missing, so a route can always be scored. all thresholds come from
ScoringConfig.
"""

from datetime import datetime, timezone
from typing import List, Optional

from skitour_scout.models import (
    Aspect,
    EvaluatedRoute,
    HazardReport,
    RecommendationTier,
    Route,
    ScoreBreakdown,
    ScoringConfig,
    WeatherCondition,
    WeatherSnapshot,
)
from skitour_scout.observability.logger import get_logger, PipelineStep, time_profile

logger = get_logger(__name__, PipelineStep.SCORING)

NO_HAZARD_DATA = "No avalanche data - check local conditions"
NO_WEATHER_DATA = "No weather data"

_POOR_CONDITIONS = {WeatherCondition.SNOW, WeatherCondition.HEAVY_SNOW, WeatherCondition.FOG}
_SOUTH_ASPECTS = {Aspect.S, Aspect.SE, Aspect.SW}

_DEFAULT_CONFIG = ScoringConfig()


def _clamp(score: float) -> int:
    return int(max(0, min(100, round(score))))


def _aspects_overlap(route: Route, hazard: HazardReport) -> bool:
    return bool(set(route.aspects) & set(hazard.problem_aspects))


# ===== SUB-SCORES =====

def score_weather(weather: Optional[WeatherSnapshot], config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    if weather is None:
        return config.neutral_score

    score = config.weather_base
    if weather.condition == WeatherCondition.CLEAR:
        score += config.clear_bonus
    elif weather.condition == WeatherCondition.PARTLY_CLOUDY:
        score += config.partly_cloudy_bonus
    elif weather.condition in _POOR_CONDITIONS:
        score -= config.poor_condition_penalty

    if weather.wind_speed < config.calm_wind_below:
        score += config.calm_wind_bonus
    elif weather.wind_speed > config.high_wind_above:
        score -= config.high_wind_penalty

    if weather.visibility >= config.good_visibility_from:
        score += config.good_visibility_bonus
    elif weather.visibility < config.low_visibility_below:
        score -= config.low_visibility_penalty

    return _clamp(score)


def score_hazard(
    route: Route,
    hazard: Optional[HazardReport],
    config: ScoringConfig = _DEFAULT_CONFIG,
) -> int:
    if hazard is None:
        return config.neutral_score

    score = max(0, 100 - (hazard.level - 1) * config.hazard_step_penalty)
    if _aspects_overlap(route, hazard):
        score -= config.aspect_overlap_penalty
    if hazard.altitude_range.contains(route.summit.altitude):
        score -= config.altitude_band_penalty
    return _clamp(score)


def score_snow(weather: Optional[WeatherSnapshot], config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    """fresh snow helps up to a point; deep fresh snow only a little (instability)"""
    if weather is None:
        return config.neutral_score

    score = config.snow_base_score
    if 0 < weather.fresh_snow_24h < config.fresh_snow_limit:
        score += config.moderate_fresh_bonus
    elif weather.fresh_snow_24h >= config.fresh_snow_limit:
        score += config.heavy_fresh_bonus
    if weather.snow_base > config.deep_base_above:
        score += config.deep_base_bonus
    return _clamp(score)


# ===== RISK, RECOMMENDATION, TIMING =====

def identify_risk_factors(
    route: Route,
    weather: Optional[WeatherSnapshot],
    hazard: Optional[HazardReport],
    config: ScoringConfig = _DEFAULT_CONFIG,
) -> List[str]:
    """ordered risk flags: hazard first, then weather"""
    risks: List[str] = []

    if hazard is None:
        risks.append(NO_HAZARD_DATA)
    else:
        if hazard.level >= config.considerable_level:
            risks.append(f"Avalanche danger level {hazard.level}")
        if _aspects_overlap(route, hazard):
            risks.append("Route crosses problematic aspects")
        risks.extend(hazard.problems)

    if weather is None:
        risks.append(NO_WEATHER_DATA)
    else:
        if weather.wind_speed > config.high_wind_above:
            risks.append("Strong wind")
        if weather.visibility < config.low_visibility_below:
            risks.append("Poor visibility")
        if weather.temperature > config.warm_temperature_above and route.summit.altitude < config.low_summit_below:
            risks.append("Warm temperatures - wet avalanche risk")

    return risks


def recommendation_tier(score: int, config: ScoringConfig = _DEFAULT_CONFIG) -> RecommendationTier:
    if score >= config.favorable_from:
        return RecommendationTier.FAVORABLE
    if score >= config.moderate_from:
        return RecommendationTier.MODERATE
    if score >= config.caution_from:
        return RecommendationTier.CAUTION
    return RecommendationTier.DISCOURAGED


def build_recommendation(route: Route, tier: RecommendationTier, risks: List[str]) -> str:
    """recommendation text; worse tiers quote more of the risk list"""
    if tier == RecommendationTier.FAVORABLE:
        return f"Conditions look favorable for {route.name}."
    if tier == RecommendationTier.MODERATE:
        return f"Moderate conditions. Watch out for: {risks[0]}." if risks else "Moderate conditions."
    if tier == RecommendationTier.CAUTION:
        return f"Proceed with caution. {', '.join(risks[:2])}." if risks else "Proceed with caution."
    return f"Not recommended. Risks: {', '.join(risks[:3])}." if risks else "Not recommended."


def suggest_optimal_time(
    route: Route,
    weather: Optional[WeatherSnapshot],
    hazard: Optional[HazardReport],
    config: ScoringConfig = _DEFAULT_CONFIG,
) -> str:
    if hazard is not None and hazard.level >= config.elevated_level:
        # sun-exposed slopes warm up by midday
        if _SOUTH_ASPECTS & set(route.aspects):
            return "Very early start (before 6:00) - descend before noon"
        return "Early start recommended (6:00-7:00)"
    if weather is not None and weather.condition == WeatherCondition.CLEAR:
        return "Morning start - best conditions and views"
    return "Normal start time is fine"


# ===== ROUTE EVALUATION =====

def evaluate_route(
    route: Route,
    weather: Optional[WeatherSnapshot] = None,
    hazard: Optional[HazardReport] = None,
    config: Optional[ScoringConfig] = None,
    now: Optional[datetime] = None,
) -> EvaluatedRoute:
    """
    score one route against the current facts.

    args:
        route: static route definition
        weather: current weather, None scores the weather and snow parts neutral
        hazard: avalanche bulletin, None scores the hazard part neutral
        config: scoring thresholds, defaults to ScoringConfig()
        now: evaluation timestamp

    returns:
        EvaluatedRoute with overall score = round(mean of the three sub-scores)
    """
    config = config or _DEFAULT_CONFIG
    breakdown = ScoreBreakdown(
        weather=score_weather(weather, config),
        hazard=score_hazard(route, hazard, config),
        snow_conditions=score_snow(weather, config),
    )
    overall = _clamp((breakdown.weather + breakdown.hazard + breakdown.snow_conditions) / 3)
    risks = identify_risk_factors(route, weather, hazard, config)
    tier = recommendation_tier(overall, config)

    return EvaluatedRoute(
        **route.model_dump(),
        condition_score=overall,
        score_breakdown=breakdown,
        recommendation=build_recommendation(route, tier, risks),
        recommendation_tier=tier,
        risk_factors=risks,
        optimal_time=suggest_optimal_time(route, weather, hazard, config),
        evaluated_at=now or datetime.now(timezone.utc),
    )


@time_profile(PipelineStep.SCORING)
def evaluate_routes(
    routes: List[Route],
    weather: Optional[WeatherSnapshot] = None,
    hazard: Optional[HazardReport] = None,
    config: Optional[ScoringConfig] = None,
    now: Optional[datetime] = None,
) -> List[EvaluatedRoute]:
    """evaluate every route with the same facts and timestamp"""
    now = now or datetime.now(timezone.utc)
    evaluated = [evaluate_route(route, weather, hazard, config, now) for route in routes]
    logger.info(
        f"evaluated {len(evaluated)} route(s) "
        f"(weather={'yes' if weather else 'no'}, hazard={'yes' if hazard else 'no'})"
    )
    return evaluated
