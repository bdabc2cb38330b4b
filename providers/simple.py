"""
Community lyrics APIs that answer a plain GET with {"lyrics": "..."}.
They return short junk for misses, hence the higher minimum length in config.
"""

from abc import abstractmethod
from typing import Optional, Tuple
from urllib.parse import quote

from .base import LyricsProvider, LyricsResult
from logging_config import get_logger

logger = get_logger(__name__)

class JsonLyricsProvider(LyricsProvider):
    def get_lyrics(self, artist: str, title: str, duration_ms: Optional[int] = None) -> Optional[LyricsResult]:
        url, params = self.build_request(artist.strip(), title.strip())
        logger.info(f"Trying alternative API: {self.name}")
        data = self._get_json(url, params=params)
        if not isinstance(data, dict):
            return None
        lyrics = data.get("lyrics")
        if not isinstance(lyrics, str) or not lyrics.strip():
            return None
        return LyricsResult(text=lyrics.strip(), synchronized=False, source=self.name)

    @abstractmethod
    def build_request(self, artist: str, title: str) -> Tuple[str, Optional[dict]]:
        """Return the request URL and query parameters for one lookup."""

class LyricsApiProvider(JsonLyricsProvider):
    def __init__(self):
        super().__init__(provider_name="lyricsapi", display_name="LyricsAPI")

    def build_request(self, artist: str, title: str):
        return f"{self.base_url}/{quote(artist, safe='')}/{quote(title, safe='')}", None

class LyristProvider(JsonLyricsProvider):
    def __init__(self):
        super().__init__(provider_name="lyrist", display_name="Lyrist")

    def build_request(self, artist: str, title: str):
        return f"{self.base_url}/{quote(artist, safe='')}/{quote(title, safe='')}", None

class PopcatProvider(JsonLyricsProvider):
    def __init__(self):
        super().__init__(provider_name="popcat", display_name="Popcat")

    def build_request(self, artist: str, title: str):
        return self.base_url, {"song": f"{title} {artist}"}
