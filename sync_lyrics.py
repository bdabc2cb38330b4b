import asyncio
import signal
from queue import Empty
from typing import Optional

from hypercorn.asyncio import serve
from hypercorn.config import Config

from config import DEBUG, SERVER, SYNC
from context import queue
from engine import LyricsEngine
from logging_config import setup_logging, get_logger
from providers import LyricsSearch, SpotifyAPI
from render import DisplayState, RenderTargetGroup, TerminalRenderTarget
from server import app, attach_engine
from system_utils import PlaybackMonitor, cancel_background_tasks, create_tracked_task

logger = get_logger(__name__)

PORT = int(SERVER["port"])
_server_task: Optional[asyncio.Task] = None
_monitor: Optional[PlaybackMonitor] = None


async def run_server() -> None:
    """Run the Quart control server using Hypercorn."""
    config = Config()
    config.bind = [f"{SERVER['host']}:{PORT}"]
    config.use_reloader = False
    config.ignore_keyboard_interrupt = True
    config.accesslog = None
    await serve(app, config)


async def cleanup() -> None:
    """Cleanup resources before exit"""
    logger.info("Cleaning up resources...")

    if _monitor:
        _monitor.stop()

    # Cancel server task
    if _server_task:
        _server_task.cancel()
        try:
            await _server_task
        except asyncio.CancelledError:
            logger.info("Server task cancelled")

    # Cancel only tracked background tasks, not all asyncio tasks
    await cancel_background_tasks()


async def main(terminal: bool = False) -> None:
    """Wire the engine to its render targets, the playback source and the control server."""
    global _server_task, _monitor

    display = DisplayState()
    targets = [display]
    if terminal:
        targets.append(TerminalRenderTarget())

    engine = LyricsEngine(render=RenderTargetGroup(targets))
    spotify = SpotifyAPI()
    attach_engine(engine, display, spotify)

    if not spotify.initialized:
        auth_url = spotify.get_auth_url()
        if auth_url:
            logger.info(f"Authorize Spotify by opening: {auth_url}")

    logger.info(f"Starting server on port {PORT}...")
    _server_task = asyncio.create_task(run_server())

    _monitor = PlaybackMonitor(engine, spotify, LyricsSearch())
    create_tracked_task(_monitor.run())

    try:
        logger.info("Entering main loop...")
        while True:
            # Check for exit signals
            try:
                command = queue.get_nowait()
                if command == "exit":
                    logger.info("Exit signal received, breaking main loop...")
                    break
            except Empty:
                pass

            if _server_task.done():
                logger.error("Server stopped unexpectedly")
                break

            await asyncio.sleep(0.1)
    except asyncio.CancelledError:
        logger.info("Main loop cancelled...")
    finally:
        await cleanup()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description='ShowLyrics - Playback-synchronized lyrics display')
    parser.add_argument('--terminal', action='store_true',
                        help='Also print the current lyric line to the terminal')
    args = parser.parse_args()

    # Set up logging
    setup_logging(
        console_level=DEBUG.get("log_level", "INFO"),
        file_level="DEBUG" if DEBUG.get("log_detailed", False) else "INFO",
        console=DEBUG.get("log_to_console", True),
        log_file=DEBUG.get("log_file", "showlyrics.log"),
        log_providers=DEBUG.get("log_providers", True),
        log_timing=DEBUG.get("log_timing", False)
    )

    def handle_interrupt(signum, frame):
        """Handle keyboard interrupt"""
        logger.info("Received keyboard interrupt...")
        queue.put("exit")

    signal.signal(signal.SIGINT, handle_interrupt)

    try:
        logger.info("Starting ShowLyrics...")
        asyncio.run(main(terminal=args.terminal or SYNC["terminal"]))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt caught in main...")
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        raise
