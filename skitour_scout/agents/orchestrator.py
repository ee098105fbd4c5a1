"""
condition cycle orchestration.

fans out to the weather, hazard bulletin and web search agents, waits for
all of them, then scores the requested routes with whatever facts arrived.
a failing agent never aborts its siblings: its facet is None and the
failure is listed in summary.errors as "<Agent>: <message>". a cancelled
cycle raises FetchAborted instead of returning a partial aggregate.
"""

import asyncio
import time
from typing import Any, Coroutine, Dict, List, Optional

from skitour_scout.extraction import FetchAborted
from skitour_scout.models import (
    AgentResult,
    HazardInput,
    OrchestratorInput,
    OrchestratorOutput,
    RunSummary,
    ScoutConfig,
)
from skitour_scout.observability.logger import get_logger, PipelineStep
from skitour_scout.scoring import evaluate_routes
from .base import Agent, AgentContext
from .hazard import create_hazard_agent
from .resorts import create_resort_agent
from .weather import create_elevation_agent, create_weather_agent
from .web_search import create_web_search_agent

logger = get_logger(__name__, PipelineStep.ORCHESTRATION)

ROUTE_EVALUATION_TIMING = "route_evaluation"


class Orchestrator:
    """
    coordinates all agents of one engine instance.

    agents can be injected (tests, custom sources); defaults are built from
    the ScoutConfig.
    """

    def __init__(
        self,
        config: Optional[ScoutConfig] = None,
        weather_agent: Optional[Agent] = None,
        hazard_agent: Optional[Agent] = None,
        web_search_agent: Optional[Agent] = None,
        elevation_agent: Optional[Agent] = None,
        resort_agent: Optional[Agent] = None,
    ):
        self.config = config or ScoutConfig()
        timeouts = self.config.timeout_config
        self.weather_agent = weather_agent or create_weather_agent(timeouts)
        self.hazard_agent = hazard_agent or create_hazard_agent(timeouts)
        self.web_search_agent = web_search_agent or create_web_search_agent(timeouts, self.config.search_config)
        self.elevation_agent = elevation_agent or create_elevation_agent(timeouts)
        self.resort_agent = resort_agent or create_resort_agent(timeouts)

    def get_agents(self) -> List[Agent]:
        return [
            self.weather_agent,
            self.hazard_agent,
            self.web_search_agent,
            self.elevation_agent,
            self.resort_agent,
        ]

    def get_agent(self, agent_id: str) -> Optional[Agent]:
        for agent in self.get_agents():
            if agent.id == agent_id:
                return agent
        return None

    async def _run_tracked(
        self,
        agent: Agent,
        agent_input: Any,
        context: AgentContext,
        summary: RunSummary,
    ) -> AgentResult:
        result = await agent.run(agent_input, context)
        summary.per_agent_timings[agent.id] = result.duration_ms
        if not result.success:
            summary.errors.append(f"{agent.name}: {result.error}")
        return result

    async def run(self, input: OrchestratorInput, context: AgentContext) -> OrchestratorOutput:
        """
        run one condition cycle.

        args:
            input: which facets to produce
            context: per-cycle dependencies (region, token, llm, http client)

        returns:
            OrchestratorOutput, always renderable

        raises:
            FetchAborted: when the cycle was cancelled
        """
        start_time = time.perf_counter()
        summary = RunSummary()
        logger.info(f"starting condition cycle for {context.region}")

        jobs: Dict[str, Coroutine[Any, Any, AgentResult]] = {}
        if input.location is not None:
            jobs["weather"] = self._run_tracked(self.weather_agent, input.location, context, summary)
        if input.fetch_hazard:
            jobs["hazard"] = self._run_tracked(
                self.hazard_agent, HazardInput(region=context.region), context, summary
            )
        if input.intel is not None:
            jobs["intel"] = self._run_tracked(self.web_search_agent, input.intel, context, summary)

        outcomes = await asyncio.gather(*jobs.values(), return_exceptions=True)

        results: Dict[str, AgentResult] = {}
        for key, outcome in zip(jobs.keys(), outcomes):
            if isinstance(outcome, BaseException):
                raise outcome
            results[key] = outcome

        if context.token is not None:
            context.token.raise_if_cancelled()

        def data_of(key: str) -> Any:
            result = results.get(key)
            return result.data if result is not None and result.success else None

        weather = data_of("weather")
        hazard = data_of("hazard")

        routes = None
        if input.routes is not None:
            eval_start = time.perf_counter()
            routes = evaluate_routes(input.routes, weather, hazard, self.config.scoring_config)
            summary.per_agent_timings[ROUTE_EVALUATION_TIMING] = int((time.perf_counter() - eval_start) * 1000)

        summary.total_duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"condition cycle complete in {summary.total_duration_ms}ms "
            f"with {len(summary.errors)} error(s)"
        )

        return OrchestratorOutput(
            weather=weather,
            hazard=hazard,
            routes=routes,
            intel=data_of("intel"),
            summary=summary,
        )
