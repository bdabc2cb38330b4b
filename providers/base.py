"""
Base Provider Class
All lyrics providers must inherit from this base class.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from config import USER_AGENT, get_provider_config
from logging_config import get_logger

logger = get_logger(__name__)

@dataclass(frozen=True)
class LyricsResult:
    """Raw lyric text as returned by a provider."""
    text: str
    synchronized: bool
    source: str

class LyricsProvider(ABC):
    """Base class for all lyrics providers."""

    HEADERS = {"User-Agent": USER_AGENT}

    def __init__(self, provider_name: str, display_name: Optional[str] = None):
        """
        Initialize the provider using configuration from config.py

        Args:
            provider_name (str): Name of the provider (must match config key)
            display_name (str, optional): Label shown next to the lyrics
        """
        config = get_provider_config(provider_name)

        self.name = display_name or provider_name
        self.priority = config.get('priority', 100)
        self.enabled = config.get('enabled', True)
        self.timeout = config.get('timeout', 10)
        self.min_length = config.get('min_length', 1)
        self.base_url = config.get('base_url', '')

        self.session = requests.Session()
        self.session.headers.update(self.HEADERS)

        if self.enabled:
            logger.info(f"Initialized {self.name} provider (priority: {self.priority})")
        else:
            logger.info(f"{self.name} provider is disabled")

    @abstractmethod
    def get_lyrics(self, artist: str, title: str,
                   duration_ms: Optional[int] = None) -> Optional[LyricsResult]:
        """
        Get lyrics for a song.

        Args:
            artist (str): Artist name
            title (str): Song title
            duration_ms (int, optional): Track duration for exact matching

        Returns:
            Optional[LyricsResult]: lyric text, or None if nothing was found
        """

    def accepts(self, result: Optional[LyricsResult]) -> bool:
        """True if result is long enough to be worth displaying."""
        return bool(result and result.text and len(result.text.strip()) >= self.min_length)

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """GET url and decode JSON; None on any HTTP or decoding failure."""
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"{self.name} - Request failed: {e}")
            return None

        if resp.status_code == 404:
            logger.info(f"{self.name} - 404 Not Found")
            return None
        if resp.status_code != 200:
            logger.warning(f"{self.name} - Returned status {resp.status_code}")
            return None

        try:
            return resp.json()
        except ValueError as e:
            logger.warning(f"{self.name} - Invalid JSON: {e}")
            return None

    def __str__(self) -> str:
        """String representation of the provider"""
        status = "enabled" if self.enabled else "disabled"
        return f"{self.name} Provider (Priority: {self.priority}, Status: {status})"

    def __repr__(self) -> str:
        """Detailed representation of the provider"""
        return f"<{self.__class__.__name__} name='{self.name}' priority={self.priority} enabled={self.enabled}>"
