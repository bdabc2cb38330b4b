"""LRCLIB Provider for synchronized lyrics"""

from typing import Any, Dict, List, Optional

from .base import LyricsProvider, LyricsResult
from logging_config import get_logger

logger = get_logger(__name__)

class LRCLIBProvider(LyricsProvider):
    HEADERS = {
        **LyricsProvider.HEADERS,
        "Lrclib-Client": LyricsProvider.HEADERS["User-Agent"],
    }

    def __init__(self):
        """Initialize LRCLIB provider with config settings"""
        super().__init__(provider_name="lrclib", display_name="LRCLIB")

    def get_lyrics(self, artist: str, title: str, duration_ms: Optional[int] = None) -> Optional[LyricsResult]:
        """
        Get lyrics using LRCLIB API.

        /api/get needs the duration and gives an exact match; /api/search is
        the fallback. Synced lyrics are preferred, plain lyrics are accepted.
        """
        artist = artist.strip()
        title = title.strip()

        response = None

        # 1. Try /api/get ONLY if we have a duration (Required by API)
        if duration_ms:
            params = {
                "artist_name": artist,
                "track_name": title,
                "duration": round(duration_ms / 1000),
            }
            logger.info(f"LRCLib - Trying exact match with params: {params}")
            response = self._get_json(f"{self.base_url}/get", params=params)
            if not isinstance(response, dict):
                response = None

        # 2. Fallback to /api/search if /get was skipped, failed, or had no synced lyrics
        if not (response and response.get("syncedLyrics")):
            search_result = self._search(artist, title)
            response = self._pick_result(search_result) or response

        if not response:
            logger.info(f"LRCLib - Nothing found for: {artist} - {title}")
            return None

        if response.get("instrumental"):
            logger.info(f"LRCLib - {artist} - {title} is instrumental")
            return None

        synced = response.get("syncedLyrics")
        if synced:
            return LyricsResult(text=synced, synchronized=True, source=self.name)

        plain = response.get("plainLyrics")
        if plain:
            return LyricsResult(text=plain, synchronized=False, source=self.name)

        return None

    def _search(self, artist: str, title: str) -> List[Dict[str, Any]]:
        logger.info("LRCLib - Trying search with specific fields")
        result = self._get_json(f"{self.base_url}/search", params={"track_name": title, "artist_name": artist})

        # If specific search fails, try general search as last resort
        if not result:
            logger.info("LRCLib - No results with specific fields, trying general search")
            result = self._get_json(f"{self.base_url}/search", params={"q": f"{artist} {title}"})

        return result if isinstance(result, list) else []

    @staticmethod
    def _pick_result(results: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """First result with synced lyrics, else first with plain lyrics."""
        for result in results:
            if result.get("syncedLyrics"):
                return result
        for result in results:
            if result.get("plainLyrics"):
                return result
        return None
