"""
One-shot timers bound to the asyncio event loop.

A TimerSlot owns at most one pending callback: arming it again cancels the
previous one first. Tests pass their own call_later to drive time manually.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from logging_config import get_logger

logger = get_logger(__name__)

# Same shape as loop.call_later(delay_seconds, callback, *args) -> handle with .cancel()
CallLater = Callable[..., Any]


class TimerSlot:
    def __init__(self, name: str, call_later: Optional[CallLater] = None) -> None:
        self.name = name
        self._call_later = call_later
        self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Schedule callback after delay_ms, replacing any pending one."""
        self.cancel()
        schedule = self._call_later or asyncio.get_running_loop().call_later
        self._handle = schedule(delay_ms / 1000, self._fire, callback)
        logger.debug(f"{self.name} timer armed ({delay_ms}ms)")

    def cancel(self) -> bool:
        """Cancel the pending callback. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        logger.debug(f"{self.name} timer cancelled")
        return True

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()
