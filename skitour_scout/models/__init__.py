from .confidence import (
    ConfidenceLevel,
    DataSourceType,
    Confidence,
    calculate_confidence,
    confidence_label,
    api_confidence,
    scraped_confidence,
    search_confidence,
    user_report_confidence,
    cached_confidence,
    ai_confidence,
    calculated_confidence,
    static_confidence,
    batch_confidence,
)
from .conditions import (
    Aspect,
    ASPECT_ORDER,
    WeatherCondition,
    HazardTrend,
    RouteDifficulty,
    Sentiment,
    RecommendationTier,
    WeatherSnapshot,
    ElevationWeatherPoint,
    ElevationWeather,
    AltitudeRange,
    HazardReport,
    GeoPoint,
    Route,
    ScoreBreakdown,
    EvaluatedRoute,
    SearchResult,
    ConditionReport,
    IntelBatch,
    ResortConfig,
    ResortConditions,
)
from .agents import (
    AgentStatus,
    AgentInfo,
    AgentResult,
    WeatherInput,
    HazardInput,
    ElevationInput,
    WebSearchInput,
    OrchestratorInput,
    OrchestratorOutput,
    RunSummary,
    ElevationOutput,
    ResortInput,
    ResortOutput,
)
from .config import (
    LLMConfig,
    TimeoutConfig,
    ScoringConfig,
    SearchConfig,
    ScoutConfig,
)

__all__ = [
    "ConfidenceLevel",
    "DataSourceType",
    "Confidence",
    "calculate_confidence",
    "confidence_label",
    "api_confidence",
    "scraped_confidence",
    "search_confidence",
    "user_report_confidence",
    "cached_confidence",
    "ai_confidence",
    "calculated_confidence",
    "static_confidence",
    "batch_confidence",
    "Aspect",
    "ASPECT_ORDER",
    "WeatherCondition",
    "HazardTrend",
    "RouteDifficulty",
    "Sentiment",
    "RecommendationTier",
    "WeatherSnapshot",
    "ElevationWeatherPoint",
    "ElevationWeather",
    "AltitudeRange",
    "HazardReport",
    "GeoPoint",
    "Route",
    "ScoreBreakdown",
    "EvaluatedRoute",
    "SearchResult",
    "ConditionReport",
    "IntelBatch",
    "ResortConfig",
    "ResortConditions",
    "AgentStatus",
    "AgentInfo",
    "AgentResult",
    "WeatherInput",
    "HazardInput",
    "ElevationInput",
    "WebSearchInput",
    "OrchestratorInput",
    "OrchestratorOutput",
    "RunSummary",
    "ElevationOutput",
    "ResortInput",
    "ResortOutput",
    "LLMConfig",
    "TimeoutConfig",
    "ScoringConfig",
    "SearchConfig",
    "ScoutConfig",
]
