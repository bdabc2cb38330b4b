"""lyrics.ovh Provider (plain lyrics, no API key)"""

from typing import Optional
from urllib.parse import quote

from .base import LyricsProvider, LyricsResult
from logging_config import get_logger

logger = get_logger(__name__)

class LyricsOvhProvider(LyricsProvider):
    def __init__(self):
        super().__init__(provider_name="lyrics_ovh", display_name="Lyrics.ovh")

    def get_lyrics(self, artist: str, title: str, duration_ms: Optional[int] = None) -> Optional[LyricsResult]:
        url = f"{self.base_url}/{quote(artist.strip(), safe='')}/{quote(title.strip(), safe='')}"
        data = self._get_json(url)
        if not isinstance(data, dict) or not data.get("lyrics"):
            logger.info(f"Lyrics.ovh - No lyrics for: {artist} - {title}")
            return None
        return LyricsResult(text=data["lyrics"].strip(), synchronized=False, source=self.name)
