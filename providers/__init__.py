"""
Lyrics Providers Package
Lyric sources, the search cascade over them, and the Spotify playback source.
"""
from .base import LyricsProvider, LyricsResult
from .lrclib import LRCLIBProvider
from .lyrics_ovh import LyricsOvhProvider
from .simple import LyricsApiProvider, LyristProvider, PopcatProvider
from .search import LyricsSearch, SearchAttempt, clean_search_term
from .spotify_api import SpotifyAPI, TrackInfo

__all__ = [
    'LyricsProvider',
    'LyricsResult',
    'LRCLIBProvider',
    'LyricsOvhProvider',
    'LyricsApiProvider',
    'LyristProvider',
    'PopcatProvider',
    'LyricsSearch',
    'SearchAttempt',
    'clean_search_term',
    'SpotifyAPI',
    'TrackInfo',
]
