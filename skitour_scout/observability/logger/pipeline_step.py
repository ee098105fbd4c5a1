"""
pipeline step enumeration for logging context.

tags every log record with the stage of the condition engine it came from.
"""

from enum import Enum


class PipelineStep(str, Enum):
    """stages of the condition engine, used to route and filter log records."""

    # data sources
    WEATHER = "weather"
    HAZARD_BULLETIN = "hazard_bulletin"
    WEB_SEARCH = "web_search"
    INTEL_EXTRACTION = "intel_extraction"
    RESORTS = "resorts"

    # aggregation
    ORCHESTRATION = "orchestration"
    SCORING = "scoring"

    # http surface
    API = "api"

    # system level
    SYSTEM = "system"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value
