"""
Control surface for the lyrics display.

Every route talks to the LyricsEngine attached with attach_engine(); the web
UI polls /lyrics for the DisplayState snapshot and posts user actions back.
"""
from typing import Optional

from quart import Quart, request, jsonify

from config import VERSION
from settings import settings
from logging_config import get_logger

logger = get_logger(__name__)

app = Quart(__name__)
app.config['SERVER_NAME'] = None


def attach_engine(engine, display=None, spotify=None) -> None:
    """Bind the engine (and optionally its DisplayState and Spotify client) to the app."""
    app.config['ENGINE'] = engine
    app.config['DISPLAY'] = display
    app.config['SPOTIFY'] = spotify


def get_engine():
    return app.config.get('ENGINE')


def _no_engine():
    return jsonify({"error": "Lyrics engine not running"}), 503


@app.after_request
async def add_cache_headers(response):
    # Polled state must never be served from cache
    response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
    return response


@app.route("/lyrics")
async def lyrics():
    """Current display state plus engine timing, polled by the frontend."""
    engine = get_engine()
    if engine is None:
        return _no_engine()

    display = app.config.get('DISPLAY')
    data = display.to_dict() if display is not None else {}
    data["engine"] = engine.snapshot()
    return jsonify(data)


@app.route("/api/latency")
async def latency():
    engine = get_engine()
    if engine is None:
        return _no_engine()

    window = engine.smoother.window
    return jsonify({
        "estimate_ms": round(engine.latency_estimate_ms, 1),
        "samples": window.values(),
        "window_size": window.size,
        "dropped": engine.smoother.dropped,
    })


@app.route("/api/settings", methods=['GET'])
async def api_get_settings():
    return jsonify({"version": VERSION, "settings": settings.get_all()})


@app.route("/api/line/next", methods=['POST'])
async def next_line():
    engine = get_engine()
    if engine is None:
        return _no_engine()
    return jsonify({"current_line_index": engine.step_line(1)})


@app.route("/api/line/previous", methods=['POST'])
async def previous_line():
    engine = get_engine()
    if engine is None:
        return _no_engine()
    return jsonify({"current_line_index": engine.step_line(-1)})


@app.route("/api/line/<int:index>", methods=['POST'])
async def jump_to_line(index: int):
    engine = get_engine()
    if engine is None:
        return _no_engine()
    if not 0 <= index < len(engine.lines):
        return jsonify({"error": f"Line {index} out of range", "line_count": len(engine.lines)}), 400
    return jsonify({"current_line_index": engine.jump_to_line(index)})


@app.route("/api/offset/increase", methods=['POST'])
async def increase_offset():
    engine = get_engine()
    if engine is None:
        return _no_engine()
    return jsonify({"offset_ms": engine.increase_offset()})


@app.route("/api/offset/decrease", methods=['POST'])
async def decrease_offset():
    engine = get_engine()
    if engine is None:
        return _no_engine()
    return jsonify({"offset_ms": engine.decrease_offset()})


@app.route("/api/sync", methods=['POST'])
async def set_sync():
    """Set auto-scroll with {"enabled": bool}; an empty body toggles it."""
    engine = get_engine()
    if engine is None:
        return _no_engine()

    data = await request.get_json(silent=True) or {}
    enabled: Optional[bool] = data.get("enabled") if isinstance(data, dict) else None
    if enabled is None:
        return jsonify({"sync_enabled": engine.toggle_sync()})
    if not isinstance(enabled, bool):
        return jsonify({"error": "'enabled' must be a boolean"}), 400
    return jsonify({"sync_enabled": engine.set_sync(enabled)})


@app.route("/api/visibility/<action>", methods=['POST'])
async def visibility(action: str):
    engine = get_engine()
    if engine is None:
        return _no_engine()

    actions = {
        "show": engine.show,
        "hide": engine.hide,
        "toggle": engine.toggle_visibility,
        "reset": engine.reset_visibility_override,
    }
    if action not in actions:
        return jsonify({"error": f"Unknown visibility action: {action}"}), 404

    actions[action]()
    return jsonify({
        "visible": engine.visibility.visible,
        "manually_overridden": engine.visibility.manually_overridden,
    })


@app.route("/api/interaction", methods=['POST'])
async def interaction():
    engine = get_engine()
    if engine is None:
        return _no_engine()
    engine.interaction()
    return jsonify({"status": "ok"})


@app.route("/callback")
async def spotify_callback():
    """
    Handle Spotify OAuth callback.
    This route receives the authorization code from Spotify after the user logs in.
    """
    code = request.args.get('code')
    error = request.args.get('error')

    if error:
        logger.error(f"Spotify OAuth error: {error}")
        return jsonify({"status": "error", "message": error}), 400

    if not code:
        logger.error("No authorization code received from Spotify")
        return jsonify({"status": "error", "message": "No authorization code received"}), 400

    spotify = app.config.get('SPOTIFY')
    if spotify is None:
        return jsonify({"status": "error", "message": "Spotify client not configured"}), 503

    if await spotify.complete_auth(code):
        return jsonify({"status": "ok"})
    return jsonify({"status": "error", "message": "Failed to get access token"}), 500


@app.route("/exit-application", methods=['POST'])
async def exit_application():
    from context import queue
    logger.info("Exit requested via API")
    queue.put("exit")
    return jsonify({"status": "ok"}), 200
