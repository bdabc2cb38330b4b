"""
System Utils Package

The internal structure is:
    state.py      - Process-wide task tracking
    helpers.py    - Tracked tasks and small utilities
    timers.py     - Single-slot cancellable timers on the event loop
    latency.py    - Playback samples and latency smoothing
    offset.py     - User sync offset with transient feedback
    visibility.py - Auto show/hide scheduling
    monitor.py    - Playback polling loop
"""

from .helpers import cancel_background_tasks, clamp, create_tracked_task
from .latency import LatencyWindow, PlaybackSample, SampleSmoother
from .monitor import PlaybackMonitor
from .offset import OffsetController
from .timers import TimerSlot
from .visibility import Visibility, VisibilityScheduler

__all__ = [
    'cancel_background_tasks',
    'clamp',
    'create_tracked_task',
    'LatencyWindow',
    'PlaybackSample',
    'SampleSmoother',
    'PlaybackMonitor',
    'OffsetController',
    'TimerSlot',
    'Visibility',
    'VisibilityScheduler',
]
