"""
Spotify API Integration
Polls the currently-playing endpoint and turns it into playback samples
"""
import asyncio
import itertools
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import spotipy
from requests.exceptions import ReadTimeout
from spotipy.oauth2 import SpotifyOAuth

from config import SPOTIFY
from logging_config import get_logger
from system_utils.latency import PlaybackSample

logger = get_logger(__name__)

@dataclass(frozen=True)
class TrackInfo:
    track_id: Optional[str]
    title: str
    artist: str
    album: str = ""
    duration_ms: int = 0

    @property
    def label(self) -> str:
        return f"{self.title} - {self.artist}"

class SpotifyAPI:
    def __init__(self, auth_manager: Optional[SpotifyOAuth] = None):
        """Initialize Spotify API with credentials from environment variables and settings"""
        self.timeout = SPOTIFY["timeout"]
        self.initialized = False
        self.auth_manager = auth_manager
        self.sp = None

        # Backoff state
        self.backoff_max = 60.0
        self._backoff_until = 0
        self._consecutive_errors = 0

        # Monotonic stamp for each request, taken before it is sent
        self._sequence = itertools.count(1)

        self.request_stats = {
            'total_requests': 0,
            'errors': {
                'timeout': 0,
                'rate_limit': 0,
                'other': 0
            }
        }

        if self.auth_manager is None:
            if not all([SPOTIFY["client_id"], SPOTIFY["client_secret"], SPOTIFY["redirect_uri"]]):
                logger.error("Missing Spotify credentials (SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET)")
                return

            # SPOTIPY_CACHE_PATH can point at a persistent location for the token cache
            cache_path = os.getenv("SPOTIPY_CACHE_PATH")
            if cache_path:
                Path(cache_path).parent.mkdir(parents=True, exist_ok=True)
                logger.info(f"Using persistent Spotify cache: {cache_path}")

            self.auth_manager = SpotifyOAuth(
                client_id=SPOTIFY["client_id"],
                client_secret=SPOTIFY["client_secret"],
                redirect_uri=SPOTIFY["redirect_uri"],
                scope=SPOTIFY["scope"],
                cache_path=cache_path,
                open_browser=False
            )

        self._build_client()
        try:
            self.initialized = bool(self.auth_manager.get_cached_token())
        except spotipy.oauth2.SpotifyOauthError as e:
            logger.error(f"Cached Spotify token is unusable: {e}")
            self.initialized = False

        if self.initialized:
            logger.info("Spotify API initialized from cached token")
        else:
            logger.warning("Spotify not authorized yet - open /callback flow via get_auth_url()")

    def _build_client(self) -> None:
        self.sp = spotipy.Spotify(
            auth_manager=self.auth_manager,
            requests_timeout=self.timeout,
            retries=SPOTIFY["retries"]
        )

    def _handle_error(self, error: Exception, status_code: Optional[int] = None):
        """Handle API errors with exponential backoff"""
        self._consecutive_errors += 1

        if status_code == 429:
            self.request_stats['errors']['rate_limit'] += 1
            retry_after = 30  # Default if header missing
            headers = getattr(error, 'headers', None) or {}
            try:
                retry_after = int(headers.get('Retry-After', 30))
            except (TypeError, ValueError):
                pass
            backoff_time = retry_after
            logger.warning(f"Rate limit hit. Backing off for {backoff_time}s")
        else:
            self.request_stats['errors']['other'] += 1
            # Exponential backoff: 1s, 2s, 4s, 8s... capped
            backoff_time = min(2 ** (self._consecutive_errors - 1), self.backoff_max)
            logger.warning(f"API Error ({error}). Backing off for {backoff_time}s (Error #{self._consecutive_errors})")

        self._backoff_until = time.time() + backoff_time

    async def get_playback_sample(self) -> Optional[Tuple[PlaybackSample, TrackInfo]]:
        """
        Fetch the current playback state.

        Returns (sample, track) or None when nothing is playing, the client
        is not authorized, the request failed, or we are backing off.
        """
        if not self.initialized:
            return None

        if time.time() < self._backoff_until:
            logger.debug(f"In backoff period. Skipping request. Resuming in {self._backoff_until - time.time():.1f}s")
            return None

        sequence = next(self._sequence)
        self.request_stats['total_requests'] += 1
        started = time.perf_counter()

        try:
            loop = asyncio.get_running_loop()
            current = await loop.run_in_executor(None, self.sp.current_playback)
        except spotipy.exceptions.SpotifyException as e:
            self._handle_error(e, e.http_status)
            return None
        except ReadTimeout as e:
            self.request_stats['errors']['timeout'] += 1
            self._handle_error(e)
            return None
        except Exception as e:
            self._handle_error(e)
            return None

        latency_ms = round((time.perf_counter() - started) * 1000)
        self._consecutive_errors = 0
        self._backoff_until = 0

        return self.parse_playback(current, latency_ms, sequence)

    @staticmethod
    def parse_playback(current: Optional[Dict[str, Any]], latency_ms: int,
                       sequence: int) -> Optional[Tuple[PlaybackSample, TrackInfo]]:
        if not current or not current.get('item'):
            logger.debug("No track currently playing")
            return None

        item = current['item']
        artists = ", ".join(artist['name'] for artist in item.get('artists') or [])
        if not artists:
            # podcast episodes carry a show instead of artists
            artists = (item.get('show') or {}).get('name', '')

        track = TrackInfo(
            track_id=item.get('id'),
            title=item.get('name', ''),
            artist=artists,
            album=(item.get('album') or {}).get('name', ''),
            duration_ms=item.get('duration_ms') or 0,
        )
        sample = PlaybackSample(
            elapsed_ms=current.get('progress_ms') or 0,
            duration_ms=track.duration_ms,
            is_playing=bool(current.get('is_playing')),
            latency_ms=latency_ms,
            track_id=track.track_id,
            sequence=sequence,
        )
        return sample, track

    def get_auth_url(self) -> Optional[str]:
        """
        Generate the Spotify authorization URL for web-based OAuth flow.
        """
        if not self.auth_manager:
            logger.error("Auth manager not initialized")
            return None
        return self.auth_manager.get_authorize_url()

    async def complete_auth(self, code: str) -> bool:
        """
        Exchange the authorization code from the /callback route for tokens.
        """
        if not self.auth_manager:
            logger.error("Auth manager not initialized")
            return False

        try:
            logger.info("Completing Spotify authentication...")
            loop = asyncio.get_running_loop()
            token_info = await loop.run_in_executor(
                None,
                lambda: self.auth_manager.get_access_token(code, as_dict=False)
            )
        except spotipy.oauth2.SpotifyOauthError as e:
            logger.error(f"Failed to complete authentication: {e}")
            self.initialized = False
            return False

        self.initialized = bool(token_info)
        if self.initialized:
            self._build_client()
            logger.info("Spotify authentication completed successfully")
        else:
            logger.error("Failed to get access token from Spotify")
        return self.initialized
