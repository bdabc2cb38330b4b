"""
Render targets receive display updates from the engine.

DisplayState buffers the latest of everything so the web UI can poll it;
TerminalRenderTarget prints the current line like the old terminal mode.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

NO_LYRICS_PLACEHOLDER = "No lyrics found"
LOADING_PLACEHOLDER = "Loading lyrics..."


@dataclass
class LyricsPayload:
    song_label: str
    lines: List[str] = field(default_factory=list)
    is_synchronized: bool = False
    source_label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RenderTarget:
    """Base target; every hook is a no-op so subclasses override only what they show."""

    def lyrics_changed(self, payload: LyricsPayload) -> None:
        pass

    def loading(self, song_label: str) -> None:
        pass

    def no_lyrics(self, song_label: str) -> None:
        pass

    def line_changed(self, index: int) -> None:
        pass

    def offset_feedback(self, offset_ms: int) -> None:
        pass

    def offset_feedback_cleared(self) -> None:
        pass

    def visibility_changed(self, visible: bool) -> None:
        pass


class RenderTargetGroup(RenderTarget):
    """Fans every update out to several targets."""

    def __init__(self, targets: Sequence[RenderTarget]) -> None:
        self.targets = list(targets)

    def lyrics_changed(self, payload: LyricsPayload) -> None:
        for target in self.targets:
            target.lyrics_changed(payload)

    def loading(self, song_label: str) -> None:
        for target in self.targets:
            target.loading(song_label)

    def no_lyrics(self, song_label: str) -> None:
        for target in self.targets:
            target.no_lyrics(song_label)

    def line_changed(self, index: int) -> None:
        for target in self.targets:
            target.line_changed(index)

    def offset_feedback(self, offset_ms: int) -> None:
        for target in self.targets:
            target.offset_feedback(offset_ms)

    def offset_feedback_cleared(self) -> None:
        for target in self.targets:
            target.offset_feedback_cleared()

    def visibility_changed(self, visible: bool) -> None:
        for target in self.targets:
            target.visibility_changed(visible)


class DisplayState(RenderTarget):
    def __init__(self) -> None:
        self.payload: Optional[LyricsPayload] = None
        self.placeholder: Optional[str] = NO_LYRICS_PLACEHOLDER
        self.current_line_index = 0
        self.offset_feedback_ms: Optional[int] = None
        self.visible = False
        self.version = 0  # bumped on every update so pollers can skip unchanged frames

    def lyrics_changed(self, payload: LyricsPayload) -> None:
        self.payload = payload
        self.placeholder = None
        self.current_line_index = 0
        self.version += 1

    def loading(self, song_label: str) -> None:
        self.payload = LyricsPayload(song_label=song_label)
        self.placeholder = LOADING_PLACEHOLDER
        self.current_line_index = 0
        self.version += 1

    def no_lyrics(self, song_label: str) -> None:
        self.payload = LyricsPayload(song_label=song_label)
        self.placeholder = NO_LYRICS_PLACEHOLDER
        self.current_line_index = 0
        self.version += 1

    def line_changed(self, index: int) -> None:
        self.current_line_index = index
        self.version += 1

    def offset_feedback(self, offset_ms: int) -> None:
        self.offset_feedback_ms = offset_ms
        self.version += 1

    def offset_feedback_cleared(self) -> None:
        self.offset_feedback_ms = None
        self.version += 1

    def visibility_changed(self, visible: bool) -> None:
        self.visible = visible
        self.version += 1

    def to_dict(self) -> Dict[str, Any]:
        payload = self.payload.to_dict() if self.payload else None
        return {
            "version": self.version,
            "visible": self.visible,
            "lyrics": payload,
            "placeholder": self.placeholder,
            "current_line_index": self.current_line_index,
            "offset_feedback": (
                {"offset_ms": self.offset_feedback_ms, "transient": True}
                if self.offset_feedback_ms is not None else None
            ),
        }


class TerminalRenderTarget(RenderTarget):
    def __init__(self) -> None:
        self._lines: List[str] = []
        self._last_printed: Optional[str] = None

    def lyrics_changed(self, payload: LyricsPayload) -> None:
        self._lines = list(payload.lines)
        self._last_printed = None
        print(f"\n♪ {payload.song_label} ({payload.source_label})")

    def loading(self, song_label: str) -> None:
        self._lines = []
        self._last_printed = None
        print(f"\n♪ {song_label}: {LOADING_PLACEHOLDER}")

    def no_lyrics(self, song_label: str) -> None:
        self._lines = []
        print(f"\n♪ {song_label}: {NO_LYRICS_PLACEHOLDER}")

    def line_changed(self, index: int) -> None:
        if not 0 <= index < len(self._lines):
            return
        line = self._lines[index]
        if line != self._last_printed:
            print(line)
            self._last_printed = line

    def offset_feedback(self, offset_ms: int) -> None:
        print(f"[offset {offset_ms:+d}ms]")
