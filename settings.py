"""
ShowLyrics Settings Manager
Loads user configuration from settings.json (read-only)
"""

import ast
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from benedict import benedict

from logging_config import get_logger

logger = get_logger(__name__)

# Allow overriding the settings file location via environment variable
if getattr(sys, 'frozen', False):
    ROOT_DIR = Path(sys.executable).parent
else:
    ROOT_DIR = Path(__file__).parent

SETTINGS_FILE = Path(os.getenv("SHOWLYRICS_SETTINGS_FILE", str(ROOT_DIR / "settings.json")))

@dataclass
class Setting:
    """Represents a single configurable setting"""
    name: str
    type: type
    default: Any
    requires_restart: bool = False
    category: Optional[str] = None
    description: Optional[str] = None
    min_val: Optional[float] = None
    max_val: Optional[float] = None

    def validate_and_convert(self, value: Any) -> Any:
        try:
            if self.type == bool and isinstance(value, str):
                return value.lower() in ('true', '1', 'yes', 'on')

            if self.type == list:
                if isinstance(value, list):
                    return value
                if isinstance(value, str):
                    try:
                        parsed = ast.literal_eval(value.strip())
                        if isinstance(parsed, list):
                            return parsed
                    except (ValueError, SyntaxError):
                        pass
                    clean_value = value.strip().strip("[]")
                    return [v.strip().strip("'").strip('"') for v in clean_value.split(',') if v.strip()]
                return self.default

            converted = self.type(value)
            if self.min_val is not None and converted < self.min_val:
                return self.type(self.min_val)
            if self.max_val is not None and converted > self.max_val:
                return self.type(self.max_val)
            return converted
        except (ValueError, TypeError):
            return self.default

class SettingsManager:
    def __init__(self, settings_file: Path = SETTINGS_FILE):
        self._settings_file = Path(settings_file)
        self._settings: Dict[str, Any] = {}

        self._definitions = {
            # Debug
            "debug.log_file": Setting("Log File", str, "showlyrics.log", True, "Debug", "Log file name"),
            "debug.log_level": Setting("Log Level", str, "INFO", True, "Debug", "Console logging verbosity"),
            "debug.log_detailed": Setting("Detailed Logging", bool, False, True, "Debug", "DEBUG level in the log file"),
            "debug.log_providers": Setting("Log Providers", bool, True, True, "Debug", "Log provider requests"),
            "debug.log_timing": Setting("Log Timing", bool, False, True, "Debug", "Log every sample and timer at DEBUG"),
            "debug.log_to_console": Setting("Log to Console", bool, True, True, "Debug", "Print logs to terminal"),

            # Server
            "server.port": Setting("Port", int, 9012, True, "Server", "Control server port", min_val=1, max_val=65535),
            "server.host": Setting("Host", str, "127.0.0.1", True, "Server", "Bind address"),

            # Spotify
            "spotify.redirect_uri": Setting("Redirect URI", str, "http://127.0.0.1:9012/callback", True, "Spotify", "OAuth callback URL"),
            "spotify.timeout": Setting("Timeout", int, 5, True, "Spotify", "Playback request timeout (s)", min_val=1, max_val=30),

            # Sync
            "sync.poll_interval": Setting("Poll Interval", float, 0.5, True, "Sync", "Playback polling cadence (s)", min_val=0.1, max_val=5.0),
            "sync.offset_step_ms": Setting("Offset Step", int, 250, False, "Sync", "Offset change per key press (ms)", min_val=10, max_val=2000),
            "sync.initial_offset_ms": Setting("Initial Offset", int, 0, False, "Sync", "Offset applied at start (ms)", min_val=-5000, max_val=10000),
            "sync.feedback_clear_ms": Setting("Feedback Duration", int, 2000, False, "Sync", "Offset indicator lifetime (ms)", min_val=100, max_val=10000),
            "sync.hide_delay_ms": Setting("Hide Delay", int, 30000, False, "Sync", "Hide the display after pause (ms)", min_val=1000, max_val=600000),
            "sync.latency_window_size": Setting("Latency Window", int, 20, False, "Sync", "Round trips kept for the latency mean", min_val=1, max_val=200),
            "sync.terminal": Setting("Terminal Output", bool, False, True, "Sync", "Print the current line to the terminal"),

            # Providers
            "providers.lrclib.enabled": Setting("LRCLib", bool, True, True, "Providers", "Enable LRCLib"),
            "providers.lrclib.timeout": Setting("Timeout", int, 10, False, "Providers", "Request timeout (s)"),
            "providers.lyrics_ovh.enabled": Setting("Lyrics.ovh", bool, True, True, "Providers", "Enable lyrics.ovh"),
            "providers.lyrics_ovh.timeout": Setting("Timeout", int, 10, False, "Providers", "Request timeout (s)"),
            "providers.alternatives.enabled": Setting("Alternatives", bool, True, True, "Providers", "Enable lyrist / popcat"),
            "providers.alternatives.timeout": Setting("Timeout", int, 8, False, "Providers", "Request timeout (s)"),
        }

        self.load_settings()

    def load_settings(self) -> None:
        """Load settings from JSON, fall back to defaults"""
        self._settings = {key: definition.default for key, definition in self._definitions.items()}

        if not self._settings_file.exists():
            logger.debug(f"No settings file at {self._settings_file}, using defaults")
            return

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                saved = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load {self._settings_file.name}: {e} - using defaults")
            return

        if not isinstance(saved, dict):
            logger.error(f"{self._settings_file.name} must contain an object - using defaults")
            return

        # Both flat ("sync.offset_step_ms") and nested ({"sync": {...}}) keys are accepted
        flat = {key: val for key, val in saved.items() if "." in key}
        try:
            tree = benedict({key: val for key, val in saved.items() if "." not in key}, keypath_separator=".")
        except ValueError as e:
            logger.error(f"Invalid nested keys in {self._settings_file.name}: {e}")
            tree = benedict()

        for key, definition in self._definitions.items():
            if key in flat:
                self._settings[key] = definition.validate_and_convert(flat[key])
            elif key in tree:
                self._settings[key] = definition.validate_and_convert(tree[key])

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.
        Priority:
        1. Loaded value (from JSON or Schema Default)
        2. Provided 'default' argument (if key unknown)
        """
        if key in self._settings:
            return self._settings[key]
        return default

    def get_all(self) -> Dict:
        """Return formatted settings grouped by category"""
        result = {}
        for key, val in self._settings.items():
            defin = self._definitions[key]
            cat = defin.category or "Misc"
            result.setdefault(cat, {})[key] = {
                "value": val,
                "name": defin.name,
                "description": defin.description,
                "type": defin.type.__name__,
                "requires_restart": defin.requires_restart,
                "min": defin.min_val,
                "max": defin.max_val,
            }
        return result

settings = SettingsManager()
