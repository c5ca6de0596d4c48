import asyncio
from dataclasses import dataclass

import pytest

from yart.tools.errors import IsolationFailure
from yart.tools.isolation import _in_flight, wrap_unsafe


class AbortTask(BaseException):
    """Stands in for a task dying outside normal error handling."""


@pytest.mark.asyncio
async def test_wrap_unsafe_success():
    async def sample_async():
        return "Success"

    assert await wrap_unsafe(sample_async) == "Success"


@pytest.mark.asyncio
async def test_wrap_unsafe_error():
    async def sample_async():
        raise RuntimeError("Test error")

    with pytest.raises(RuntimeError, match="Test error"):
        await wrap_unsafe(sample_async)


@pytest.mark.asyncio
async def test_wrap_unsafe_with_context():
    @dataclass
    class Context:
        value: str

    async def sample_async(ctx: Context):
        return ctx.value

    ctx = Context("Context")
    assert await wrap_unsafe(lambda: sample_async(ctx)) == "Context"


@pytest.mark.asyncio
async def test_wrap_unsafe_plain_callable():
    assert await wrap_unsafe(lambda: 42) == 42


@pytest.mark.asyncio
async def test_work_runs_in_a_separate_task():
    caller = asyncio.current_task()

    async def which_task():
        return asyncio.current_task()

    worker = await wrap_unsafe(which_task)
    assert worker is not caller


@pytest.mark.asyncio
async def test_cancelled_work_yields_channel_closed():
    async def cancels_itself():
        asyncio.current_task().cancel()
        await asyncio.sleep(0)
        return "unreachable"

    with pytest.raises(IsolationFailure, match="Channel closed"):
        await asyncio.wait_for(wrap_unsafe(cancels_itself), timeout=5.0)


@pytest.mark.asyncio
async def test_abnormal_termination_does_not_reach_caller():
    async def aborts():
        raise AbortTask()

    with pytest.raises(IsolationFailure) as exc_info:
        await asyncio.wait_for(wrap_unsafe(aborts), timeout=5.0)

    assert str(exc_info.value) == "Channel closed"


@pytest.mark.asyncio
async def test_cancelled_caller_leaves_work_running():
    finished = asyncio.Event()

    async def slow():
        await asyncio.sleep(0.05)
        finished.set()
        return "done"

    caller = asyncio.create_task(wrap_unsafe(slow))
    await asyncio.sleep(0.01)
    caller.cancel()

    with pytest.raises(asyncio.CancelledError):
        await caller

    await asyncio.wait_for(finished.wait(), timeout=5.0)


@pytest.mark.asyncio
async def test_finished_tasks_are_released():
    async def quick():
        return 1

    before = set(_in_flight)
    await wrap_unsafe(quick)
    await asyncio.sleep(0)

    assert _in_flight <= before
