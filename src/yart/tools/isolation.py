"""
Isolation wrapper - run tool logic in a detached task.

The work is launched with ``asyncio.create_task`` and its outcome is handed
back through a single-slot channel. If the task ends without sending (it was
cancelled, or died on a BaseException) the channel is closed and the caller
gets an ``IsolationFailure`` instead of the fault itself.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Set, TypeVar, Union

from loguru import logger

from yart.tools.errors import IsolationFailure

T = TypeVar("T")

WorkFactory = Callable[[], Union[Awaitable[T], T]]

# The event loop only keeps weak references to tasks.
_in_flight: Set[asyncio.Task] = set()


def _send(channel: asyncio.Future, value: Any = None, error: BaseException = None) -> None:
    # Receiver may be gone (caller cancelled); drop the value then.
    if channel.done():
        return
    if error is not None:
        channel.set_exception(error)
    else:
        channel.set_result(value)


def _close(channel: asyncio.Future, task: asyncio.Task) -> None:
    _in_flight.discard(task)

    if task.cancelled():
        reason = "cancelled"
    else:
        exc = task.exception()
        reason = repr(exc) if exc is not None else None

    if not channel.done():
        logger.warning(f"Isolated task {task.get_name()} ended without a result ({reason})")
        channel.set_exception(IsolationFailure("Channel closed"))


async def wrap_unsafe(factory: WorkFactory) -> T:
    """
    Run ``factory()`` in a detached task and return its outcome.

    Args:
        factory: Zero-argument callable returning an awaitable (or a plain value)

    Returns:
        Whatever the awaited work returned

    Raises:
        Exception: Any exception raised by the work, unchanged
        IsolationFailure: The task terminated before delivering a result
    """
    loop = asyncio.get_running_loop()
    channel: asyncio.Future = loop.create_future()

    async def _run() -> None:
        try:
            outcome = factory()
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as e:
            _send(channel, error=e)
        else:
            _send(channel, outcome)

    task = loop.create_task(_run())
    _in_flight.add(task)
    task.add_done_callback(lambda t: _close(channel, t))

    return await channel
