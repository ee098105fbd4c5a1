from .cancellation import CancellationToken, FetchAborted, run_cancellable
from .http import (
    SourceUnavailableError,
    open_client,
    fetch_text,
    fetch_json,
    probe_source,
    error_message,
)
from .weather import (
    map_weather_code,
    wind_direction_label,
    parse_current_weather,
    fetch_current_weather,
    fetch_elevation_weather,
)
from .hazard_bulletin import (
    BulletinParseError,
    is_covered_region,
    parse_bulletin,
    fetch_bulletin,
    danger_description,
    danger_recommendations,
)
from .search_results import parse_search_results, dedupe_results, search
from .queries import build_search_queries
from .relevance import filter_results, relevance_score, rank_results
from .intel import extract_deterministic, extract_with_llm, extract_report, extract_reports, clean_llm_summary
from .resorts import (
    parse_snow_depth,
    parse_temperature,
    parse_open_status,
    fetch_resort_conditions,
    find_descent_alternatives,
)

__all__ = [
    "CancellationToken",
    "FetchAborted",
    "run_cancellable",
    "SourceUnavailableError",
    "open_client",
    "fetch_text",
    "fetch_json",
    "probe_source",
    "error_message",
    "map_weather_code",
    "wind_direction_label",
    "parse_current_weather",
    "fetch_current_weather",
    "fetch_elevation_weather",
    "BulletinParseError",
    "is_covered_region",
    "parse_bulletin",
    "fetch_bulletin",
    "danger_description",
    "danger_recommendations",
    "parse_search_results",
    "dedupe_results",
    "search",
    "build_search_queries",
    "filter_results",
    "relevance_score",
    "rank_results",
    "extract_deterministic",
    "extract_with_llm",
    "extract_report",
    "extract_reports",
    "clean_llm_summary",
    "parse_snow_depth",
    "parse_temperature",
    "parse_open_status",
    "fetch_resort_conditions",
    "find_descent_alternatives",
]
