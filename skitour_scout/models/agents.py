from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, ConfigDict

from .conditions import (
    ElevationWeather,
    EvaluatedRoute,
    HazardReport,
    IntelBatch,
    ResortConditions,
    Route,
    WeatherSnapshot,
)

# This file defines the agent execution envelope (status, info snapshot, result) and the
# per-agent input models plus the orchestrator's input/output contract

T = TypeVar("T")


class AgentStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    ERROR = "error"
    DISABLED = "disabled"


class AgentInfo(BaseModel):
    """immutable snapshot of an agent's state"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    status: AgentStatus = AgentStatus.IDLE
    last_run: Optional[datetime] = None
    last_error: Optional[str] = None
    cache_ttl_seconds: int = Field(0, ge=0, description="declared cache lifetime, enforced by callers")


class AgentResult(BaseModel, Generic[T]):
    """
    outcome of exactly one agent invocation.

    failures are carried in the result (success=False plus error) instead of
    raised, so fan-in over several agents never has to catch.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    duration_ms: int = Field(..., ge=0)
    timestamp: datetime
    agent_id: str
    info: AgentInfo = Field(..., description="agent state snapshot taken when the result was produced")


# ===== AGENT INPUTS =====
class WeatherInput(BaseModel):
    """coordinates of the point to fetch weather for"""
    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {"latitude": 49.2319, "longitude": 19.9817, "altitude": 1987}
    })

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude: Optional[int] = Field(None, description="altitude in meters, improves downscaling")


class HazardInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    region: str = Field(..., description="region name, e.g. Tatry")
    zone: Optional[str] = None


class ElevationInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    region: str


class WebSearchInput(BaseModel):
    """what to look for in web condition reports"""
    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {"region": "Tatry", "locations": ["Kasprowy Wierch"], "limit": 5}
    })

    region: str
    locations: List[str] = Field(default_factory=list)
    limit: int = Field(5, ge=1, le=20, description="max reports to return")
    max_queries: Optional[int] = Field(None, ge=1, description="override for the configured query cap")


# ===== ORCHESTRATOR =====
class OrchestratorInput(BaseModel):
    """which facts a condition cycle should produce"""
    location: Optional[WeatherInput] = None
    fetch_hazard: bool = True
    routes: Optional[List[Route]] = None
    intel: Optional[WebSearchInput] = None


class RunSummary(BaseModel):
    total_duration_ms: int = 0
    per_agent_timings: Dict[str, int] = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list, description="namespaced '<Agent>: <message>' errors")


class OrchestratorOutput(BaseModel):
    """
    aggregate of one condition cycle. always renderable: missing facets are
    None and the reason is listed in summary.errors
    """
    weather: Optional[WeatherSnapshot] = None
    hazard: Optional[HazardReport] = None
    routes: Optional[List[EvaluatedRoute]] = None
    intel: Optional[IntelBatch] = None
    summary: RunSummary = Field(default_factory=RunSummary)


class ElevationOutput(BaseModel):
    region: str
    peaks: List[ElevationWeather] = Field(default_factory=list)


class ResortInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    region: str
    route_name: Optional[str] = Field(None, description="only resorts usable as a descent for this route")


class ResortOutput(BaseModel):
    region: str
    resorts: List[ResortConditions] = Field(default_factory=list)
