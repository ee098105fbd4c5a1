"""
Agent contract and execution envelope.

Architecture:
- AgentTask: Protocol for the actual work of an agent (id, name, execute)
- Agent: envelope around a task holding enablement and the latest AgentInfo snapshot
- run_task: higher-order coroutine applying timing, status tracking, logging
  and error capture to any task
- AgentContext: per-cycle dependencies (region, capabilities, cancellation
  token, llm and http client) injected into every task
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, Optional, Protocol, Set, TypeVar

import httpx

from skitour_scout.extraction import CancellationToken, FetchAborted, error_message
from skitour_scout.models import AgentInfo, AgentResult, AgentStatus, LLMConfig
from skitour_scout.observability.logger import get_logger, PipelineStep

logger = get_logger(__name__, PipelineStep.ORCHESTRATION)

InputT = TypeVar("InputT", contravariant=True)
OutputT = TypeVar("OutputT", covariant=True)
TIn = TypeVar("TIn")
TOut = TypeVar("TOut")

LLM_CAPABILITY = "llm"


@dataclass
class AgentContext:
    """dependencies shared by all agents of one condition cycle"""
    region: str
    capabilities: Set[str] = field(default_factory=set)
    token: Optional[CancellationToken] = None
    llm_config: Optional[LLMConfig] = None
    http_client: Optional[httpx.AsyncClient] = None

    @property
    def llm_enabled(self) -> bool:
        return LLM_CAPABILITY in self.capabilities and self.llm_config is not None


class AgentTask(Protocol[InputT, OutputT]):
    """
    Protocol for the work an agent performs.

    execute() may raise freely: the Agent envelope turns exceptions into
    failed results. FetchAborted must not be swallowed by implementations.
    """

    id: str
    name: str
    description: str
    cache_ttl_seconds: int

    async def execute(self, input: InputT, context: AgentContext) -> OutputT:
        ...


class Agent(Generic[TIn, TOut]):
    """
    envelope around an AgentTask.

    holds only the latest immutable AgentInfo snapshot; every result carries
    the snapshot taken when it was produced.
    """

    def __init__(self, task: AgentTask[TIn, TOut], enabled: bool = True):
        self.task = task
        self._enabled = enabled
        self._info = AgentInfo(
            id=task.id,
            name=task.name,
            description=task.description,
            status=AgentStatus.IDLE if enabled else AgentStatus.DISABLED,
            cache_ttl_seconds=task.cache_ttl_seconds,
        )

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def name(self) -> str:
        return self.task.name

    def get_info(self) -> AgentInfo:
        return self._info

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self._update_info(status=AgentStatus.DISABLED)
        elif self._info.status == AgentStatus.DISABLED:
            self._update_info(status=AgentStatus.IDLE)

    def _update_info(self, **changes) -> AgentInfo:
        self._info = self._info.model_copy(update=changes)
        return self._info

    async def run(self, input: TIn, context: AgentContext) -> AgentResult[TOut]:
        return await run_task(self, input, context)


async def run_task(agent: Agent[TIn, TOut], input: TIn, context: AgentContext) -> AgentResult[TOut]:
    """
    run an agent's task inside the envelope.

    - disabled agents short-circuit to a failed result with zero duration
    - success: status idle, last_run recorded
    - failure: status error, last_error recorded, failed result returned
    - cancellation (FetchAborted, asyncio.CancelledError) propagates

    exactly one log line is written per invocation.
    """
    if not agent.is_enabled():
        logger.info(f"agent={agent.id} status=disabled duration_ms=0")
        return AgentResult(
            success=False,
            error=f"Agent {agent.id} is disabled",
            duration_ms=0,
            timestamp=datetime.now(timezone.utc),
            agent_id=agent.id,
            info=agent.get_info(),
        )

    # returned snapshots come from this run only, agent._info is publish-only
    baseline = agent.get_info().model_copy(update={"status": AgentStatus.RUNNING, "last_error": None})
    agent._update_info(status=AgentStatus.RUNNING, last_error=None)
    start_time = time.perf_counter()

    try:
        data = await agent.task.execute(input, context)
    except (FetchAborted, asyncio.CancelledError):
        duration_ms = int((time.perf_counter() - start_time) * 1000)
        agent._update_info(status=AgentStatus.IDLE)
        logger.info(f"agent={agent.id} status=cancelled duration_ms={duration_ms}")
        raise
    except Exception as e:
        duration_ms = int((time.perf_counter() - start_time) * 1000)
        message = error_message(e)
        now = datetime.now(timezone.utc)
        info = baseline.model_copy(update={"status": AgentStatus.ERROR, "last_error": message, "last_run": now})
        agent._update_info(status=AgentStatus.ERROR, last_error=message, last_run=now)
        logger.warning(
            f"agent={agent.id} status=error duration_ms={duration_ms} "
            f"error={type(e).__name__}: {message}"
        )
        return AgentResult(
            success=False,
            error=message,
            duration_ms=duration_ms,
            timestamp=now,
            agent_id=agent.id,
            info=info,
        )

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    now = datetime.now(timezone.utc)
    info = baseline.model_copy(update={"status": AgentStatus.IDLE, "last_run": now})
    agent._update_info(status=AgentStatus.IDLE, last_error=None, last_run=now)
    logger.info(f"agent={agent.id} status=ok duration_ms={duration_ms}")
    return AgentResult(
        success=True,
        data=data,
        duration_ms=duration_ms,
        timestamp=now,
        agent_id=agent.id,
        info=info,
    )
