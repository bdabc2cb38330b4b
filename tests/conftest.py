"""Pytest configuration and shared fixtures"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

import pytest

from render import RenderTarget


class FakeHandle:
    def __init__(self, clock, when, callback, args):
        self.clock = clock
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Stands in for loop.call_later so timer tests control time explicitly."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self, self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.now = handle.when
            handle.cancelled = True  # fired handles are spent
            handle.callback(*handle.args)
        self.now = target


class RecordingTarget(RenderTarget):
    def __init__(self):
        self.events = []

    def lyrics_changed(self, payload):
        self.events.append(("lyrics", payload))

    def loading(self, song_label):
        self.events.append(("loading", song_label))

    def no_lyrics(self, song_label):
        self.events.append(("no_lyrics", song_label))

    def line_changed(self, index):
        self.events.append(("line", index))

    def offset_feedback(self, offset_ms):
        self.events.append(("feedback", offset_ms))

    def offset_feedback_cleared(self):
        self.events.append(("feedback_cleared", None))

    def visibility_changed(self, visible):
        self.events.append(("visible", visible))

    def of(self, kind):
        return [value for name, value in self.events if name == kind]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder():
    return RecordingTarget()
