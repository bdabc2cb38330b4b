"""
ShowLyrics Configuration Loader
Loads values from settings.json via the settings manager.
"""
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from settings import settings

# ==========================================
# Path Configuration
# ==========================================
if getattr(sys, 'frozen', False):
    ROOT_DIR = Path(sys.executable).parent
else:
    ROOT_DIR = Path(__file__).parent

# ==========================================
# Version
# ==========================================
VERSION = "1.0.0"

env_file = ROOT_DIR / '.env'
if env_file.exists():
    load_dotenv(env_file)

# Helper to prefer Env Var > Settings JSON > Default
def conf(key, default=None):
    # 1. Check Env Var (Highest Priority - good for docker/dev)
    env_val = os.getenv(key.upper().replace('.', '_'))
    if env_val is not None:
        return env_val

    # 2. Check Settings JSON
    json_val = settings.get(key)
    if json_val is not None:
        return json_val

    # 3. Default
    return default

def conf_bool(key, default=False) -> bool:
    value = conf(key, default)
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)

# ==========================================
# EXPORTED CONFIG DICTS
# ==========================================

DEBUG = {
    "log_file": conf("debug.log_file", "showlyrics.log"),
    "log_level": conf("debug.log_level", "INFO"),
    "log_detailed": conf_bool("debug.log_detailed", False),
    "log_providers": conf_bool("debug.log_providers", True),
    "log_timing": conf_bool("debug.log_timing", False),
    "log_to_console": conf_bool("debug.log_to_console", True),
}

SERVER = {
    "port": int(conf("server.port", 9012)),
    "host": conf("server.host", "127.0.0.1"),
}

SPOTIFY = {
    "client_id": os.getenv("SPOTIFY_CLIENT_ID", ""),
    "client_secret": os.getenv("SPOTIFY_CLIENT_SECRET", ""),
    "redirect_uri": conf("spotify.redirect_uri", "http://127.0.0.1:9012/callback"),
    "scope": [
        "user-read-currently-playing",
        "user-read-playback-state",
    ],
    "timeout": int(conf("spotify.timeout", 5)),
    "retries": 0,  # a late sample is worthless, the next poll replaces it
}

SYNC = {
    "poll_interval": float(conf("sync.poll_interval", 0.5)),
    "offset_step_ms": int(conf("sync.offset_step_ms", 250)),
    "offset_min_ms": -5000,
    "offset_max_ms": 10000,
    "initial_offset_ms": int(conf("sync.initial_offset_ms", 0)),
    "feedback_clear_ms": int(conf("sync.feedback_clear_ms", 2000)),
    "hide_delay_ms": int(conf("sync.hide_delay_ms", 30000)),
    "latency_window_size": int(conf("sync.latency_window_size", 20)),
    "terminal": conf_bool("sync.terminal", False),
}

USER_AGENT = f"ShowLyrics/{VERSION}"

PROVIDERS = {
    "lrclib": {
        "enabled": conf_bool("providers.lrclib.enabled", True),
        "priority": 1,
        "base_url": "https://lrclib.net/api",
        "timeout": int(conf("providers.lrclib.timeout", 10)),
        "min_length": 1,
    },
    "lyrics_ovh": {
        "enabled": conf_bool("providers.lyrics_ovh.enabled", True),
        "priority": 2,
        "base_url": "https://api.lyrics.ovh/v1",
        "timeout": int(conf("providers.lyrics_ovh.timeout", 10)),
        "min_length": 1,
    },
    "lyricsapi": {
        "enabled": conf_bool("providers.alternatives.enabled", True),
        "priority": 3,
        "base_url": "https://lyricsapi.net/api/lyrics",
        "timeout": int(conf("providers.alternatives.timeout", 8)),
        "min_length": 50,
    },
    "lyrist": {
        "enabled": conf_bool("providers.alternatives.enabled", True),
        "priority": 4,
        "base_url": "https://lyrist.vercel.app/api",
        "timeout": int(conf("providers.alternatives.timeout", 8)),
        "min_length": 50,
    },
    "popcat": {
        "enabled": conf_bool("providers.alternatives.enabled", True),
        "priority": 5,
        "base_url": "https://api.popcat.xyz/lyrics",
        "timeout": int(conf("providers.alternatives.timeout", 8)),
        "min_length": 50,
    },
}

# Helper functions
def get_provider_config(name: str) -> dict:
    return PROVIDERS.get(name, {"enabled": False, "priority": 0})

