"""
Lyric-source cascade.

Providers are tried one after another, each with a particular spelling of
the artist/title, until one returns lyrics long enough to be worth showing.
A failing provider is logged and skipped; the cascade itself never raises.
"""
import asyncio
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .base import LyricsProvider, LyricsResult
from logging_config import get_logger

logger = get_logger(__name__)

def clean_search_term(term: str) -> str:
    """Strip bracketed parts and featured artists, collapse whitespace."""
    term = re.sub(r"\(.*?\)", "", term)
    term = re.sub(r"\[.*?\]", "", term)
    term = re.sub(r"feat\..*$", "", term, flags=re.IGNORECASE)
    term = re.sub(r"ft\..*$", "", term, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", term).strip()

def simplify_artist(artist: str) -> str:
    """First credited artist only."""
    return artist.split(",")[0].split("feat")[0].split("ft.")[0].strip()

def simplify_title(title: str) -> str:
    """Title up to the first bracket."""
    return title.split("(")[0].split("[")[0].strip()

TERM_STYLES: Dict[str, Callable[[str, str], Tuple[str, str]]] = {
    "original": lambda artist, title: (artist, title),
    "clean": lambda artist, title: (clean_search_term(artist), clean_search_term(title)),
    "simplified": lambda artist, title: (
        simplify_artist(clean_search_term(artist)),
        simplify_title(clean_search_term(title)),
    ),
}

@dataclass(frozen=True)
class SearchAttempt:
    provider: LyricsProvider
    terms: str = "clean"

    def query(self, artist: str, title: str) -> Tuple[str, str]:
        return TERM_STYLES[self.terms](artist, title)

def default_attempts() -> List[SearchAttempt]:
    from .lrclib import LRCLIBProvider
    from .lyrics_ovh import LyricsOvhProvider
    from .simple import LyricsApiProvider, LyristProvider, PopcatProvider

    lrclib = LRCLIBProvider()
    ovh = LyricsOvhProvider()
    return [
        SearchAttempt(lrclib, "original"),
        SearchAttempt(ovh, "clean"),
        SearchAttempt(LyricsApiProvider(), "clean"),
        SearchAttempt(LyristProvider(), "clean"),
        SearchAttempt(PopcatProvider(), "clean"),
        SearchAttempt(ovh, "original"),
        SearchAttempt(ovh, "simplified"),
    ]

class LyricsSearch:
    def __init__(self, attempts: Optional[Sequence[SearchAttempt]] = None):
        self._attempts = list(attempts) if attempts is not None else None

    @property
    def attempts(self) -> List[SearchAttempt]:
        if self._attempts is None:
            self._attempts = default_attempts()
        return self._attempts

    async def search(self, artist: str, title: str, duration_ms: Optional[int] = None) -> Optional[LyricsResult]:
        logger.info(f"Searching lyrics for: \"{title}\" by \"{artist}\"")
        tried = set()

        for attempt in self.attempts:
            if not attempt.provider.enabled:
                continue

            query = attempt.query(artist, title)
            key = (id(attempt.provider), query)
            if key in tried or not all(query):
                continue
            tried.add(key)

            try:
                result = await asyncio.to_thread(attempt.provider.get_lyrics, query[0], query[1], duration_ms)
            except Exception as e:
                logger.error(f"Error with {attempt.provider.name}: {e}")
                continue

            if attempt.provider.accepts(result):
                logger.info(f"Found lyrics using {attempt.provider.name} ({attempt.terms} terms)")
                return result

            logger.debug(f"{attempt.provider.name} gave nothing usable for {query[0]} - {query[1]}")

        logger.info(f"No lyrics found for {artist} - {title}")
        return None
