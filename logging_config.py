"""
Centralized logging configuration for ShowLyrics

The console gets short lines, the rotating file under logs/ gets the detail.
Per-sample timing chatter (stale drops, timer arm/cancel) is DEBUG and only
reaches the console when log_timing is on.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

if getattr(sys, 'frozen', False):
    ROOT_DIR = Path(sys.argv[0]).parent
else:
    ROOT_DIR = Path(__file__).parent

LOGS_DIR = ROOT_DIR / "logs"

CONSOLE_FORMAT = '(%(filename)s:%(lineno)d) %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

# Rotate at 1MB, keep 10 backups
MAX_LOG_BYTES = 1 * 1024 * 1024
LOG_BACKUPS = 10

# Libraries that are too chatty at INFO
NOISY_LOGGERS = ("hypercorn.error", "hypercorn.access", "spotipy", "urllib3")

# Loggers that emit per-sample / per-timer messages
TIMING_LOGGERS = ("engine", "system_utils")

_logging_initialized = False

def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)

def _console_handler(level: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_level(level))
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler

def _file_handler(log_path: Path, level: str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8'
    )
    handler.setLevel(_level(level))
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler

def setup_logging(
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    console: bool = True,
    log_file: Optional[str] = None,
    log_providers: bool = True,
    log_timing: bool = False
) -> None:
    """
    Set up logging with separate console and file handlers.
    Calling it again is a no-op.

    Args:
        console_level: Logging level for console output
        file_level: Logging level for file output
        console: Whether to log to stdout at all
        log_file: File name under logs/ (default: app.log)
        log_providers: Let lyric provider requests through at console_level
        log_timing: Let per-sample timing messages through at DEBUG
    """
    global _logging_initialized
    if _logging_initialized:
        return

    LOGS_DIR.mkdir(exist_ok=True)
    log_path = LOGS_DIR / (log_file or "app.log")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers = []

    if console:
        root_logger.addHandler(_console_handler(console_level))
    root_logger.addHandler(_file_handler(log_path, file_level))

    logging.getLogger('providers').setLevel(_level(console_level) if log_providers else logging.WARNING)

    if not log_timing:
        for name in TIMING_LOGGERS:
            logging.getLogger(name).setLevel(logging.INFO)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Force UTF-8 encoding for Windows console (the terminal target prints ♪)
    if sys.platform.startswith('win'):
        sys.stdout.reconfigure(encoding='utf-8')
        sys.stderr.reconfigure(encoding='utf-8')

    _logging_initialized = True

    root_logger.info(f"Logging initialized - Console: {console_level}, File: {file_level}")
    root_logger.debug(f"Log file: {log_path}")

def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name"""
    # setup_logging() must be called explicitly by the entry point.
    return logging.getLogger(name)
