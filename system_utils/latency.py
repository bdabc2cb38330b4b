"""
Playback sample smoothing.

The playback source reports elapsed time as of the moment it was read, so by
the time the response arrives the song has moved on by roughly the request's
round trip. Each sample is pushed forward by its own measured latency; a
rolling window of recent latencies is kept for diagnostics.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Optional

from logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_WINDOW_SIZE = 20


@dataclass(frozen=True)
class PlaybackSample:
    elapsed_ms: int
    duration_ms: int
    is_playing: bool
    latency_ms: int = 0
    track_id: Optional[str] = None
    sequence: Optional[int] = None


class LatencyWindow:
    """Last N round-trip measurements, oldest evicted first."""

    def __init__(self, size: int = DEFAULT_WINDOW_SIZE) -> None:
        self._samples = deque(maxlen=size)

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def size(self) -> int:
        return self._samples.maxlen

    def push(self, latency_ms: int) -> None:
        self._samples.append(latency_ms)

    def mean(self) -> float:
        if not self._samples:
            return 0.0
        return sum(self._samples) / len(self._samples)

    def values(self) -> list:
        return list(self._samples)


class SampleSmoother:
    """
    Compensates samples for request latency and drops stale ones.

    Samples may carry a sequence number taken before the request was sent; one
    that is not newer than the last accepted sample answers an older question
    and must not overwrite newer state. Samples without one are taken in
    arrival order.
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        self.window = LatencyWindow(window_size)
        self._last_sequence: Optional[int] = None
        self.dropped = 0

    @property
    def latency_estimate_ms(self) -> float:
        return self.window.mean()

    def ingest(self, sample: PlaybackSample) -> Optional[int]:
        """Return the latency-compensated elapsed time, or None for a stale sample."""
        # every round trip counts towards the estimate, stale or not
        self.window.push(sample.latency_ms)

        if sample.sequence is not None:
            if self._last_sequence is not None and sample.sequence <= self._last_sequence:
                self.dropped += 1
                logger.debug(f"Dropped stale sample #{sample.sequence} (last accepted #{self._last_sequence})")
                return None
            self._last_sequence = sample.sequence

        return sample.elapsed_ms + sample.latency_ms
