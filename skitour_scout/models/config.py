from typing import Optional

from pydantic import BaseModel, Field, ConfigDict
from langchain_core.language_models.chat_models import BaseChatModel


class LLMConfig(BaseModel):
    """configuration for LLM model calls using langchain chat models"""
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        json_schema_extra={
            "example": {
                "llm": "ChatOpenAI(model='meta-llama/llama-3.3-70b-instruct', temperature=0.0)",
                "model_name": "meta-llama/llama-3.3-70b-instruct",
            }
        }
    )

    llm: BaseChatModel = Field(
        ...,
        description="langchain BaseChatModel instance (ChatOpenAI against OpenRouter, fake models in tests, etc.)"
    )
    model_name: str = Field(default="unknown", description="model label used in confidence notes")


class TimeoutConfig(BaseModel):
    """per-source fetch timeouts (all in seconds)"""
    model_config = ConfigDict(frozen=True)

    weather_timeout: float = Field(default=15.0, gt=0, description="timeout for one weather api call")
    hazard_timeout: float = Field(default=20.0, gt=0, description="timeout for the bulletin page")
    search_timeout_per_query: float = Field(default=15.0, gt=0, description="timeout for one search query")
    llm_timeout: float = Field(default=30.0, gt=0, description="timeout for one extraction llm call")
    resort_timeout: float = Field(default=15.0, gt=0, description="timeout for one resort page")
    health_check_timeout: float = Field(default=5.0, gt=0, description="timeout for availability probes")


class ScoringConfig(BaseModel):
    """
    thresholds and weights of the route condition score.

    the fresh snow bands encode an instability heuristic (more snow is not
    strictly better), not a validated physical model.
    """
    model_config = ConfigDict(frozen=True)

    neutral_score: int = 50

    # weather
    weather_base: int = 70
    clear_bonus: int = 20
    partly_cloudy_bonus: int = 10
    poor_condition_penalty: int = 20
    calm_wind_below: float = 20
    calm_wind_bonus: int = 10
    high_wind_above: float = 40
    high_wind_penalty: int = 30
    good_visibility_from: float = 10
    good_visibility_bonus: int = 10
    low_visibility_below: float = 2
    low_visibility_penalty: int = 20

    # hazard
    hazard_step_penalty: int = 25
    aspect_overlap_penalty: int = 20
    altitude_band_penalty: int = 15
    considerable_level: int = 3
    elevated_level: int = 2

    # snow
    snow_base_score: int = 60
    fresh_snow_limit: float = 30
    moderate_fresh_bonus: int = 30
    heavy_fresh_bonus: int = 10
    deep_base_above: float = 50
    deep_base_bonus: int = 10

    # risk flags
    warm_temperature_above: float = 5
    low_summit_below: int = 2000

    # recommendation bands
    favorable_from: int = 80
    moderate_from: int = 60
    caution_from: int = 40


class SearchConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_queries: int = Field(default=4, ge=1, description="max search queries per run")
    max_results_per_page: int = Field(default=10, ge=1, description="max hits parsed from one results page")
    min_relevance_score: int = Field(default=1, description="hits scoring below this are dropped")
    min_llm_snippet_length: int = Field(default=30, ge=0, description="shorter snippets skip the llm path")


class ScoutConfig(BaseModel):
    """top level configuration of a condition engine instance"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    timeout_config: TimeoutConfig = Field(default_factory=TimeoutConfig)
    scoring_config: ScoringConfig = Field(default_factory=ScoringConfig)
    search_config: SearchConfig = Field(default_factory=SearchConfig)
    llm_config: Optional[LLMConfig] = Field(
        default=None,
        description="generative text model, None disables llm extraction"
    )
    default_region: str = Field(default="Tatry")
