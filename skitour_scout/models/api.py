from typing import Dict, List, Optional
from enum import Enum

from pydantic import BaseModel, Field, ConfigDict

from .agents import WeatherInput, WebSearchInput
from .conditions import Route


class SourceHealth(str, Enum):
    UP = "up"
    DOWN = "down"


# ===== API REQUEST/RESPONSE MODELS =====
class ConditionsRequest(BaseModel):
    """one condition cycle: weather at a point, the region bulletin and routes to score"""
    region: str = Field(..., description="region the cycle runs for, e.g. Tatry")
    location: Optional[WeatherInput] = Field(None, description="point for current weather")
    fetch_hazard: bool = Field(True, description="whether to fetch the avalanche bulletin")
    routes: Optional[List[Route]] = Field(None, description="routes to evaluate")
    intel: Optional[WebSearchInput] = Field(None, description="web condition reports to gather")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "region": "Tatry",
                "location": {"latitude": 49.2319, "longitude": 19.9817, "altitude": 1987},
                "fetch_hazard": True,
                "routes": [],
            }
        }
    )


class IntelRequest(BaseModel):
    region: str
    locations: List[str] = Field(default_factory=list)
    limit: int = Field(5, ge=1, le=20)


class HealthResponse(BaseModel):
    status: str = Field(..., description="healthy when every probed source answered")
    sources: Dict[str, SourceHealth] = Field(default_factory=dict)
    llm_configured: bool = False
