"""
Playback monitor.

Polls the playback source on a fixed interval and feeds the engine. A new
track clears the display and starts a lyric fetch in the background so
polling never waits on the lyric providers.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from config import SYNC
from logging_config import get_logger
from .helpers import create_tracked_task

logger = get_logger(__name__)


class PlaybackMonitor:
    def __init__(self, engine, spotify, search, interval: float = SYNC["poll_interval"]):
        self.engine = engine
        self.spotify = spotify
        self.search = search
        self.interval = interval
        self.current_track_id: Optional[str] = None
        self.fetch_task: Optional[asyncio.Task] = None
        self._running = False

    async def poll_once(self) -> None:
        result = await self.spotify.get_playback_sample()
        if result is None:
            self.engine.on_missing_sample()
            return

        sample, track = result
        if track.track_id != self.current_track_id:
            logger.info(f"Track changed: {track.label}")
            self.current_track_id = track.track_id
            self.engine.loading(track.label)
            if self.fetch_task and not self.fetch_task.done():
                self.fetch_task.cancel()
            self.fetch_task = create_tracked_task(self.fetch_lyrics(track))

        self.engine.on_sample(sample)

    async def fetch_lyrics(self, track) -> None:
        result = await self.search.search(track.artist, track.title, track.duration_ms)

        if track.track_id != self.current_track_id:
            logger.debug(f"Discarding lyrics for {track.label}, track changed")
            return

        if result is None:
            self.engine.clear(track.label)
            return

        self.engine.set_lyrics(
            track.label,
            result.text,
            source_label=result.source,
            synchronized=result.synchronized,
            duration_ms=track.duration_ms,
            position_ms=self.engine.last_elapsed_ms,
        )

    async def run(self) -> None:
        self._running = True
        logger.info(f"Playback monitor started (interval {self.interval}s)")
        try:
            while self._running:
                try:
                    await self.poll_once()
                except Exception as e:
                    logger.error(f"Playback poll failed: {e}", exc_info=True)
                await asyncio.sleep(self.interval)
        finally:
            self._running = False
            logger.info("Playback monitor stopped")

    def stop(self) -> None:
        self._running = False
