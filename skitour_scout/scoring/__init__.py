from .engine import (
    NO_HAZARD_DATA,
    NO_WEATHER_DATA,
    score_weather,
    score_hazard,
    score_snow,
    identify_risk_factors,
    recommendation_tier,
    build_recommendation,
    suggest_optimal_time,
    evaluate_route,
    evaluate_routes,
)

__all__ = [
    "NO_HAZARD_DATA",
    "NO_WEATHER_DATA",
    "score_weather",
    "score_hazard",
    "score_snow",
    "identify_risk_factors",
    "recommendation_tier",
    "build_recommendation",
    "suggest_optimal_time",
    "evaluate_route",
    "evaluate_routes",
]
