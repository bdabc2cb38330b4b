"""
User-tunable timing offset.

The offset is added to every elapsed time before estimation, so a positive
value makes lyrics advance earlier. Each change is echoed to the display as a
transient indicator that clears itself after a short delay.
"""
from __future__ import annotations

from typing import Callable, Optional

from config import SYNC
from logging_config import get_logger
from .helpers import clamp
from .timers import CallLater, TimerSlot

logger = get_logger(__name__)


class OffsetController:
    def __init__(
        self,
        on_feedback: Optional[Callable[[int], None]] = None,
        on_feedback_cleared: Optional[Callable[[], None]] = None,
        call_later: Optional[CallLater] = None,
        step_ms: int = SYNC["offset_step_ms"],
        min_ms: int = SYNC["offset_min_ms"],
        max_ms: int = SYNC["offset_max_ms"],
        feedback_clear_ms: int = SYNC["feedback_clear_ms"],
        initial_ms: int = 0,
    ) -> None:
        self.step_ms = step_ms
        self.min_ms = min_ms
        self.max_ms = max_ms
        self.feedback_clear_ms = feedback_clear_ms
        self._on_feedback = on_feedback
        self._on_feedback_cleared = on_feedback_cleared
        self.feedback_timer = TimerSlot("offset-feedback", call_later)
        self.offset_ms = clamp(initial_ms, min_ms, max_ms)

    def apply(self, elapsed_ms: int) -> int:
        return max(0, elapsed_ms + self.offset_ms)

    def increase(self) -> int:
        return self.set_offset(self.offset_ms + self.step_ms)

    def decrease(self) -> int:
        return self.set_offset(self.offset_ms - self.step_ms)

    def set_offset(self, offset_ms: int) -> int:
        """Set the offset (saturating at the bounds) and show feedback."""
        previous = self.offset_ms
        self.offset_ms = clamp(offset_ms, self.min_ms, self.max_ms)
        if self.offset_ms != previous:
            logger.info(f"Offset changed: {previous}ms -> {self.offset_ms}ms")
        self._show_feedback()
        return self.offset_ms

    def _show_feedback(self) -> None:
        if self._on_feedback:
            self._on_feedback(self.offset_ms)
        # a newer press supersedes the pending clear
        self.feedback_timer.arm(self.feedback_clear_ms, self._clear_feedback)

    def _clear_feedback(self) -> None:
        if self._on_feedback_cleared:
            self._on_feedback_cleared()
