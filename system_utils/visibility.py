"""
Display visibility scheduling.

The lyrics surface appears when playback starts and disappears some time
after it pauses. Only the playing -> paused edge arms the hide timer, so a
stream of "paused" samples does not keep pushing the hide back. A manual hide
wins over automatic re-show until the user shows the surface again.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from config import SYNC
from logging_config import get_logger
from .timers import CallLater, TimerSlot

logger = get_logger(__name__)


class Visibility(Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


class VisibilityScheduler:
    def __init__(
        self,
        on_change: Optional[Callable[[bool], None]] = None,
        call_later: Optional[CallLater] = None,
        hide_delay_ms: int = SYNC["hide_delay_ms"],
    ) -> None:
        self.state = Visibility.HIDDEN
        self.manually_overridden = False
        self.hide_delay_ms = hide_delay_ms
        self.hide_timer = TimerSlot("auto-hide", call_later)
        self._on_change = on_change
        self._is_playing = False

    @property
    def visible(self) -> bool:
        return self.state is Visibility.VISIBLE

    def on_sample(self, is_playing: bool) -> None:
        was_playing = self._is_playing
        self._is_playing = is_playing

        if is_playing:
            self.hide_timer.cancel()
            if self.state is Visibility.HIDDEN and not self.manually_overridden:
                self._set_state(Visibility.VISIBLE, "playback started")
        elif was_playing and self.state is Visibility.VISIBLE:
            self.hide_timer.arm(self.hide_delay_ms, self._auto_hide)

    def show(self) -> None:
        self.hide_timer.cancel()
        self.manually_overridden = False
        self._set_state(Visibility.VISIBLE, "manual show")

    def hide(self) -> None:
        self.hide_timer.cancel()
        self.manually_overridden = True
        self._set_state(Visibility.HIDDEN, "manual hide")

    def toggle(self) -> None:
        if self.visible:
            self.hide()
        else:
            self.show()

    def reset_override(self) -> None:
        if self.manually_overridden:
            logger.debug("Manual visibility override cleared")
        self.manually_overridden = False

    def interaction(self) -> None:
        """Drag/click on the surface: counts as activity, postpones nothing else."""
        self.hide_timer.cancel()

    def _auto_hide(self) -> None:
        if self._is_playing:
            return
        self._set_state(Visibility.HIDDEN, f"paused for {self.hide_delay_ms}ms")

    def _set_state(self, new_state: Visibility, reason: str) -> None:
        if new_state is self.state:
            return
        self.state = new_state
        logger.info(f"Lyrics display {new_state.value} ({reason})")
        if self._on_change:
            self._on_change(self.visible)
