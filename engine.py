"""
Lyrics positioning engine.

One LyricsEngine exists per display surface and owns every piece of timing
state for it: the active lyric set, the current line, the user offset, the
latency window and the visibility schedule. All mutation happens on the event
loop in response to a playback sample, a user action or a timer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from config import SYNC
from logging_config import get_logger
from lyrics import (
    LyricLine,
    estimate_line_index,
    has_timestamps,
    parse_plain_lyrics,
    parse_synced_lyrics,
)
from render import LyricsPayload, RenderTarget
from system_utils.latency import PlaybackSample, SampleSmoother
from system_utils.offset import OffsetController
from system_utils.timers import CallLater
from system_utils.visibility import VisibilityScheduler

logger = get_logger(__name__)


@dataclass
class TimingState:
    offset_ms: int = 0
    current_line_index: int = 0
    is_synchronized: bool = False


class LyricsEngine:
    def __init__(
        self,
        render: Optional[RenderTarget] = None,
        call_later: Optional[CallLater] = None,
        initial_offset_ms: int = SYNC["initial_offset_ms"],
        latency_window_size: int = SYNC["latency_window_size"],
        hide_delay_ms: int = SYNC["hide_delay_ms"],
    ) -> None:
        self.render = render or RenderTarget()
        self.lines: List[LyricLine] = []
        self.song_label = ""
        self.source_label = ""
        self.duration_ms = 0
        self.sync_enabled = True  # auto-scroll
        self.smoother = SampleSmoother(latency_window_size)
        self.offset = OffsetController(
            on_feedback=self._offset_feedback,
            on_feedback_cleared=self.render.offset_feedback_cleared,
            call_later=call_later,
            initial_ms=initial_offset_ms,
        )
        self.visibility = VisibilityScheduler(
            on_change=self.render.visibility_changed,
            call_later=call_later,
            hide_delay_ms=hide_delay_ms,
        )
        self.timing = TimingState(offset_ms=self.offset.offset_ms)
        self._last_elapsed_ms: Optional[int] = None
        self._is_playing = False

    # ==========================================
    # Lyric set
    # ==========================================

    def set_lyrics(
        self,
        song_label: str,
        raw_text: Optional[str],
        source_label: str = "",
        synchronized: Optional[bool] = None,
        duration_ms: int = 0,
        position_ms: Optional[int] = None,
    ) -> None:
        """
        Replace the active lyric set (new track).

        synchronized=None detects timestamped text automatically. position_ms,
        when given, is the already-compensated elapsed time of the new track
        and positions the display right away.
        """
        if synchronized is None:
            synchronized = has_timestamps(raw_text)

        lines = parse_synced_lyrics(raw_text) if synchronized else parse_plain_lyrics(raw_text)
        if synchronized and not lines:
            # timestamp markers without usable lines: show whatever text there is
            lines = parse_plain_lyrics(raw_text)
            synchronized = False

        self._replace_lines(song_label, lines, source_label, synchronized, duration_ms, position_ms)

        if not lines:
            logger.info(f"No lyrics for {song_label}")
            self.render.no_lyrics(song_label)
            return

        mode = "synced" if self.timing.is_synchronized else "plain"
        logger.info(f"Loaded {len(lines)} {mode} lines for {song_label} ({source_label or 'unknown source'})")
        self.render.lyrics_changed(LyricsPayload(
            song_label=song_label,
            lines=[line.text for line in lines],
            is_synchronized=self.timing.is_synchronized,
            source_label=source_label,
        ))

        if position_ms is not None and self.sync_enabled:
            self._update_position(position_ms)

    def clear(self, song_label: str = "") -> None:
        """Nothing is playing: drop the lyric set and show the placeholder."""
        self.set_lyrics(song_label, None)

    def loading(self, song_label: str) -> None:
        """A new track started and its lyrics are still being fetched."""
        self._replace_lines(song_label, [], "", False, 0, None)
        logger.info(f"Loading lyrics for {song_label}")
        self.render.loading(song_label)

    def _replace_lines(
        self,
        song_label: str,
        lines: List[LyricLine],
        source_label: str,
        synchronized: bool,
        duration_ms: int,
        position_ms: Optional[int],
    ) -> None:
        self.lines = lines
        self.song_label = song_label
        self.source_label = source_label
        if duration_ms > 0:
            self.duration_ms = duration_ms
        self.timing = TimingState(
            offset_ms=self.offset.offset_ms,
            current_line_index=0,
            is_synchronized=synchronized and bool(lines),
        )
        self._last_elapsed_ms = position_ms

    # ==========================================
    # Playback samples
    # ==========================================

    def on_sample(self, sample: PlaybackSample) -> None:
        elapsed_ms = self.smoother.ingest(sample)
        if elapsed_ms is None:
            return  # stale, a newer sample was already applied

        self._is_playing = sample.is_playing
        self._last_elapsed_ms = elapsed_ms
        if sample.duration_ms > 0:
            self.duration_ms = sample.duration_ms

        self.visibility.on_sample(sample.is_playing)

        if self.sync_enabled and sample.is_playing:
            self._update_position(elapsed_ms)

    def on_missing_sample(self) -> None:
        """The playback source failed this tick; keep showing what we have."""
        logger.debug("No playback sample this tick, keeping current position")

    @property
    def latency_estimate_ms(self) -> float:
        return self.smoother.latency_estimate_ms

    @property
    def last_elapsed_ms(self) -> Optional[int]:
        """Latest compensated elapsed time, None until a sample arrives for this track."""
        return self._last_elapsed_ms

    def _update_position(self, elapsed_ms: int) -> None:
        adjusted_ms = self.offset.apply(elapsed_ms)
        index = estimate_line_index(self.lines, adjusted_ms, self.duration_ms, self.timing.is_synchronized)
        self._set_current_line(index)

    def _set_current_line(self, index: int) -> None:
        if index == self.timing.current_line_index:
            return
        self.timing.current_line_index = index
        self.render.line_changed(index)

    # ==========================================
    # User input
    # ==========================================

    def step_line(self, delta: int) -> int:
        """Move the highlighted line by delta, staying inside the lyric set."""
        if self.lines:
            target = self.timing.current_line_index + delta
            self._set_current_line(max(0, min(target, len(self.lines) - 1)))
        return self.timing.current_line_index

    def jump_to_line(self, index: int) -> int:
        if self.lines and 0 <= index < len(self.lines):
            self._set_current_line(index)
        return self.timing.current_line_index

    def set_sync(self, enabled: bool) -> bool:
        self.sync_enabled = enabled
        logger.info(f"Auto-scroll {'enabled' if enabled else 'disabled'}")
        if enabled and self._is_playing and self._last_elapsed_ms is not None:
            self._update_position(self._last_elapsed_ms)
        return self.sync_enabled

    def toggle_sync(self) -> bool:
        return self.set_sync(not self.sync_enabled)

    def increase_offset(self) -> int:
        self.offset.increase()
        return self._offset_changed()

    def decrease_offset(self) -> int:
        self.offset.decrease()
        return self._offset_changed()

    def show(self) -> None:
        self.visibility.show()

    def hide(self) -> None:
        self.visibility.hide()

    def toggle_visibility(self) -> None:
        self.visibility.toggle()

    def reset_visibility_override(self) -> None:
        self.visibility.reset_override()

    def interaction(self) -> None:
        self.visibility.interaction()

    def _offset_feedback(self, offset_ms: int) -> None:
        self.render.offset_feedback(offset_ms)

    def _offset_changed(self) -> int:
        self.timing.offset_ms = self.offset.offset_ms
        if self.sync_enabled and self._is_playing and self._last_elapsed_ms is not None:
            self._update_position(self._last_elapsed_ms)
        return self.timing.offset_ms

    # ==========================================
    # Diagnostics
    # ==========================================

    def snapshot(self) -> Dict[str, Any]:
        return {
            "song_label": self.song_label,
            "source_label": self.source_label,
            "line_count": len(self.lines),
            "current_line_index": self.timing.current_line_index,
            "is_synchronized": self.timing.is_synchronized,
            "offset_ms": self.timing.offset_ms,
            "sync_enabled": self.sync_enabled,
            "is_playing": self._is_playing,
            "visible": self.visibility.visible,
            "manually_overridden": self.visibility.manually_overridden,
            "latency_estimate_ms": round(self.latency_estimate_ms, 1),
        }
