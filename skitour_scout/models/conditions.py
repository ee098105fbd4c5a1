from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .confidence import Confidence

# This file defines the facts flowing through a condition cycle: raw source facts (weather, hazard
# bulletin, web intel), the static route input and the evaluated route output


class Aspect(str, Enum):
    """compass octant describing slope orientation"""
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


# fixed octant order used by exposure bitstrings
ASPECT_ORDER: List[Aspect] = [
    Aspect.N, Aspect.NE, Aspect.E, Aspect.SE, Aspect.S, Aspect.SW, Aspect.W, Aspect.NW,
]


class WeatherCondition(str, Enum):
    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    SNOW = "snow"
    HEAVY_SNOW = "heavy_snow"
    RAIN = "rain"
    FOG = "fog"
    WIND = "wind"


class HazardTrend(str, Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class RouteDifficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    EXPERT = "expert"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class RecommendationTier(str, Enum):
    """score band of an evaluated route, best first"""
    FAVORABLE = "favorable"
    MODERATE = "moderate"
    CAUTION = "caution"
    DISCOURAGED = "discouraged"

    @property
    def rank(self) -> int:
        """0 for the best tier, 3 for the worst"""
        return list(RecommendationTier).index(self)


# ===== WEATHER =====
class WeatherSnapshot(BaseModel):
    """current weather at one location, one per (location, fetch)"""
    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "temperature": -6,
            "feels_like": -12,
            "condition": "partly_cloudy",
            "wind_speed": 18,
            "wind_direction": "NW",
            "humidity": 80,
            "visibility": 12.0,
            "fresh_snow_24h": 4.5,
            "snow_base": 85,
            "freezing_level": 1200,
            "timestamp": "2025-01-15T08:00:00Z",
            "source": "Open-Meteo",
        }
    })

    temperature: int = Field(..., description="air temperature in celsius")
    feels_like: int = Field(..., description="apparent temperature in celsius")
    condition: WeatherCondition = Field(..., description="coarse weather condition")
    wind_speed: int = Field(..., ge=0, description="wind speed in km/h")
    wind_direction: str = Field(..., description="16-point compass label")
    humidity: int = Field(..., ge=0, le=100, description="relative humidity in percent")
    visibility: float = Field(..., ge=0, description="visibility in km")
    fresh_snow_24h: float = Field(0, ge=0, description="fresh snow in the last 24h (cm)")
    snow_base: int = Field(0, ge=0, description="snow depth (cm)")
    freezing_level: int = Field(..., description="freezing level altitude (m)")
    timestamp: datetime = Field(..., description="when the snapshot was produced")
    source: str = Field(..., description="provider label")
    confidence: Optional[Confidence] = Field(None, description="reliability of the snapshot")


class ElevationWeatherPoint(BaseModel):
    """weather at a single named altitude"""
    model_config = ConfigDict(frozen=True)

    name: str
    altitude: int = Field(..., description="altitude in meters")
    temperature: int
    feels_like: int
    wind_speed: int
    wind_direction: str
    condition: WeatherCondition


class ElevationWeather(BaseModel):
    """valley/summit weather pair for one named peak"""
    model_config = ConfigDict(frozen=True)

    valley: ElevationWeatherPoint
    summit: ElevationWeatherPoint
    temp_difference: int = Field(..., description="summit minus valley temperature")
    freezing_level: int = Field(..., description="freezing level (m)")
    fresh_snow_24h: float = Field(..., description="fresh snow at the summit (cm)")
    timestamp: datetime
    source: str


# ===== HAZARD BULLETIN =====
class AltitudeRange(BaseModel):
    """altitude band in meters where a danger applies"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int = Field(..., alias="from", description="lower bound (m)")
    to: int = Field(..., description="upper bound (m)")

    def contains(self, altitude: float) -> bool:
        return self.from_ <= altitude <= self.to


class HazardReport(BaseModel):
    """
    official avalanche bulletin for one region.

    at most one authoritative report exists per region per fetch. a missing
    report (None) means no coverage or nothing published and is distinct from
    a failed fetch.
    """
    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "level": 3,
            "trend": "stable",
            "problem_aspects": ["N", "NE", "NW"],
            "altitude_range": {"from": 1800, "to": 2500},
            "problems": ["Wind-drifted snow"],
            "valid_until": "2025-01-16T20:00:00",
            "issued_at": "2025-01-15T07:30:00",
            "source": "TOPR - znaczne",
            "report_url": "https://lawiny.topr.pl/",
        }
    })

    level: int = Field(..., ge=1, le=5, description="danger level on the european 1-5 scale")
    trend: HazardTrend = Field(HazardTrend.STABLE, description="danger trend")
    problem_aspects: List[Aspect] = Field(default_factory=list, description="aspects where problems apply")
    altitude_range: AltitudeRange = Field(..., description="altitude band of the danger")
    problems: List[str] = Field(default_factory=list, description="avalanche problems in plain text")
    valid_until: datetime = Field(..., description="end of the validity window")
    issued_at: Optional[datetime] = Field(None, description="issuance time")
    source: str = Field(..., description="issuing organisation")
    report_url: str = Field(..., description="url of the full bulletin")
    confidence: Optional[Confidence] = Field(None, description="reliability of the report")


# ===== ROUTES =====
class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    altitude: int = Field(..., description="altitude in meters")


class Route(BaseModel):
    """static ski touring route definition"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="unique route identifier")
    name: str
    region: str
    start_point: GeoPoint
    summit: GeoPoint
    elevation: int = Field(..., description="vertical gain in meters")
    distance: float = Field(..., description="distance in km")
    difficulty: RouteDifficulty
    aspects: List[Aspect] = Field(default_factory=list, description="main aspects of the route")
    duration: float = Field(..., description="estimated duration in hours")
    description: Optional[str] = None


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    weather: int = Field(..., ge=0, le=100)
    hazard: int = Field(..., ge=0, le=100)
    snow_conditions: int = Field(..., ge=0, le=100)


class EvaluatedRoute(Route):
    """route plus its condition evaluation, recomputed wholesale every cycle"""

    condition_score: int = Field(..., ge=0, le=100, description="overall condition score")
    score_breakdown: ScoreBreakdown
    recommendation: str
    recommendation_tier: RecommendationTier
    risk_factors: List[str] = Field(default_factory=list)
    optimal_time: Optional[str] = None
    evaluated_at: datetime


# ===== WEB INTEL =====
class SearchResult(BaseModel):
    """single parsed web search hit"""
    model_config = ConfigDict(frozen=True)

    title: str
    snippet: str
    url: str = Field("", description="target url, empty when the hit had no usable link")
    source: str = Field("", description="host of the url without www.")


class ConditionReport(BaseModel):
    """condition facts extracted from one web search hit"""
    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "summary": "Great powder on Kasprowy, 30cm fresh snow, wind slab on NE slopes",
            "location": "Kasprowy Wierch",
            "report_date": "2025-01-15T00:00:00Z",
            "source_url": "https://example.com/trip-report",
            "source_name": "example.com",
            "conditions": ["Powder", "30cm fresh"],
            "snow_type": "Powder",
            "hazards": ["Wind slab"],
            "sentiment": "positive",
        }
    })

    summary: str
    location: str = Field("Unknown", description="mentioned location or Unknown")
    report_date: Optional[datetime] = Field(None, description="date the report refers to, None when undatable")
    source_url: str
    source_name: str
    conditions: List[str] = Field(default_factory=list)
    snow_type: Optional[str] = None
    hazards: List[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: Confidence


class IntelBatch(BaseModel):
    """ranked condition reports from one web search run"""
    model_config = ConfigDict(frozen=True)

    reports: List[ConditionReport] = Field(default_factory=list)
    confidence: Confidence = Field(..., description="batch level reliability")


# ===== SKI RESORTS =====
class ResortConfig(BaseModel):
    """a lift-served resort near touring routes, usable as a descent option"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    region: str
    source_url: str
    nearby_routes: List[str] = Field(default_factory=list, description="touring routes that can descend here")


class ResortConditions(BaseModel):
    """
    conditions scraped from a resort page.

    every measured field is None when the page could not be fetched or the
    value was not found; the resort is still listed as a descent option.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    region: str
    snow_depth_base: Optional[int] = Field(None, description="snow depth at the base (cm)")
    snow_depth_summit: Optional[int] = Field(None, description="snow depth at the summit (cm)")
    temperature: Optional[float] = Field(None, description="temperature (°C)")
    wind_speed: Optional[int] = Field(None, description="wind speed (km/h), not extracted from pages")
    is_open: Optional[bool] = None
    open_trails: Optional[int] = None
    last_update: datetime
    source_url: str
    can_use_for_descent: bool = True
    nearby_routes: List[str] = Field(default_factory=list)
    confidence: Confidence
