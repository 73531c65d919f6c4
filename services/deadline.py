import asyncio
import logging
from typing import Awaitable, Callable, TypeVar
from services.errors import ProcessingTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def await_with_deadline(awaitable: Awaitable[T], timeout: float, label: str) -> T:
    """
    Race ``awaitable`` against a wall-clock deadline.

    ``asyncio.wait_for`` cancels the timer when the work wins and cancels the
    awaited task when the deadline wins. Work already handed to a thread keeps
    running in the background but is no longer awaited.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{label} exceeded its {timeout:g}s deadline")
        raise ProcessingTimeout() from None


async def run_with_deadline(func: Callable[..., T], *args, timeout: float, label: str) -> T:
    """Run a blocking callable in a worker thread, bounded by ``timeout`` seconds."""
    return await await_with_deadline(asyncio.to_thread(func, *args), timeout, label)
