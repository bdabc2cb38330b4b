"""
Helper functions shared by the system_utils modules.
"""
from __future__ import annotations

import asyncio

from logging_config import get_logger
from . import state

logger = get_logger(__name__)


def create_tracked_task(coro):
    """
    Create a background task with automatic cleanup and error logging.
    Prevents silent failures and ensures tasks complete even if references are lost.
    """
    task = asyncio.create_task(coro)
    state._background_tasks.add(task)

    def cleanup(t):
        state._background_tasks.discard(t)
        try:
            t.result()
        except asyncio.CancelledError:
            pass  # Expected during shutdown
        except Exception as e:
            logger.error(f"Background task failed: {e}", exc_info=True)

    task.add_done_callback(cleanup)
    return task


async def cancel_background_tasks(timeout: float = 0.5) -> None:
    """Cancel every tracked task except the caller's own."""
    for task in list(state._background_tasks):
        if task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await asyncio.wait_for(task, timeout=timeout)
            except (asyncio.CancelledError, asyncio.TimeoutError):
                pass


def clamp(value, low, high):
    return max(low, min(value, high))
