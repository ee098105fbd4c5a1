"""
default configuration factory for the condition engine.

provides a centralized location for creating ScoutConfig instances with
production defaults.
"""

from skitour_scout.models import ScoutConfig, LLMConfig, TimeoutConfig, ScoringConfig, SearchConfig
from skitour_scout.llms import openrouter
from skitour_scout.config import settings


def get_default_scout_config() -> ScoutConfig:
    """
    create and return a ScoutConfig with default values.

    the llm config is only populated when OPENROUTER_API_KEY is set;
    without it intel extraction runs on the deterministic path.

    example:
        >>> from skitour_scout.config.default import get_default_scout_config
        >>> config = get_default_scout_config()
        >>> config.timeout_config.hazard_timeout
        20.0
    """
    timeout_config = TimeoutConfig()

    llm_config = None
    if openrouter.is_openrouter_configured():
        llm_config = LLMConfig(
            llm=openrouter.get_openrouter_chat_model(timeout=timeout_config.llm_timeout),
            model_name=settings.OPENROUTER_MODEL,
        )

    return ScoutConfig(
        timeout_config=timeout_config,
        scoring_config=ScoringConfig(),
        search_config=SearchConfig(),
        llm_config=llm_config,
    )


def get_fast_scout_config() -> ScoutConfig:
    """
    create a ScoutConfig with short timeouts and a single search query.

    useful for development and health dashboards where a quick answer
    matters more than breadth. never enables the llm.
    """
    return ScoutConfig(
        timeout_config=TimeoutConfig(
            weather_timeout=5.0,
            hazard_timeout=8.0,
            search_timeout_per_query=5.0,
            llm_timeout=10.0,
            health_check_timeout=3.0,
        ),
        search_config=SearchConfig(max_queries=1),
        llm_config=None,
    )
