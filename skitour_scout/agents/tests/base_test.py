"""tests for the agent envelope (skitour_scout.agents.base)."""

import asyncio

import pytest

from skitour_scout.agents.base import Agent, AgentContext, run_task
from skitour_scout.extraction import CancellationToken, FetchAborted
from skitour_scout.models import AgentStatus


class _EchoTask:
    id = "echo"
    name = "Echo"
    description = "returns its input"
    cache_ttl_seconds = 60

    def __init__(self, error: Exception = None):
        self.error = error
        self.calls = 0

    async def execute(self, input, context):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return input


@pytest.fixture
def context():
    return AgentContext(region="Tatry")


@pytest.mark.asyncio
async def test_success_result_and_snapshot(context):
    agent = Agent(_EchoTask())
    result = await agent.run(42, context)

    assert result.success
    assert result.data == 42
    assert result.agent_id == "echo"
    assert result.duration_ms >= 0
    assert result.info.status == AgentStatus.IDLE
    assert result.info.last_run is not None
    assert result.info.cache_ttl_seconds == 60
    assert agent.get_info() == result.info


@pytest.mark.asyncio
async def test_failure_is_captured_not_raised(context):
    agent = Agent(_EchoTask(error=ValueError("upstream payload broken")))
    result = await run_task(agent, 1, context)

    assert not result.success
    assert result.data is None
    assert result.error == "upstream payload broken"
    assert result.info.status == AgentStatus.ERROR
    assert agent.get_info().last_error == "upstream payload broken"


@pytest.mark.asyncio
async def test_error_without_message_uses_type_name(context):
    result = await Agent(_EchoTask(error=TimeoutError())).run(1, context)
    assert result.error == "TimeoutError"


@pytest.mark.asyncio
async def test_disabled_agent_short_circuits(context):
    task = _EchoTask()
    agent = Agent(task)
    agent.set_enabled(False)
    before = agent.get_info()

    result = await agent.run(1, context)

    assert not result.success
    assert result.error == "Agent echo is disabled"
    assert result.duration_ms == 0
    assert task.calls == 0
    assert agent.get_info() == before
    assert before.status == AgentStatus.DISABLED


def test_reenabling_restores_idle():
    agent = Agent(_EchoTask(), enabled=False)
    assert agent.get_info().status == AgentStatus.DISABLED
    agent.set_enabled(True)
    assert agent.is_enabled()
    assert agent.get_info().status == AgentStatus.IDLE


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [FetchAborted("cancelled"), asyncio.CancelledError()])
async def test_cancellation_propagates(context, error):
    agent = Agent(_EchoTask(error=error))
    with pytest.raises(type(error)):
        await agent.run(1, context)
    assert agent.get_info().status == AgentStatus.IDLE


@pytest.mark.asyncio
async def test_snapshots_are_immutable_per_result(context):
    task = _EchoTask()
    agent = Agent(task)
    ok = await agent.run(1, context)
    task.error = RuntimeError("boom")
    failed = await agent.run(2, context)

    assert ok.info.status == AgentStatus.IDLE
    assert failed.info.status == AgentStatus.ERROR


class _DelayedTask(_EchoTask):
    """input is (delay_seconds, error_or_None)"""

    async def execute(self, input, context):
        delay, error = input
        await asyncio.sleep(delay)
        if error is not None:
            raise error
        return delay


@pytest.mark.asyncio
async def test_concurrent_runs_do_not_share_snapshots(context):
    agent = Agent(_DelayedTask())
    ok, failed = await asyncio.gather(
        agent.run((0.05, None), context),
        agent.run((0.01, RuntimeError("boom")), context),
    )

    assert ok.success
    assert ok.info.status == AgentStatus.IDLE
    assert ok.info.last_error is None
    assert failed.info.status == AgentStatus.ERROR
    assert failed.info.last_error == "boom"
    # the slower successful run published last
    assert agent.get_info().status == AgentStatus.IDLE
    assert agent.get_info().last_error is None


def test_llm_capability_requires_config():
    assert not AgentContext(region="Tatry", capabilities={"llm"}).llm_enabled
    token = CancellationToken()
    assert AgentContext(region="Tatry", token=token).token is token
