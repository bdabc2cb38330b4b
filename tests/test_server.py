"""
Tests for the control server routes
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from engine import LyricsEngine
from render import DisplayState
from server import app, attach_engine
from system_utils.latency import PlaybackSample

SYNCED = "[00:00.00]first\n[00:01.00]second\n[00:02.00]third\n"


@pytest.fixture
def display():
    return DisplayState()


@pytest.fixture
def engine(clock, display):
    engine = LyricsEngine(render=display, call_later=clock.call_later)
    engine.set_lyrics("Song - Artist", SYNCED, source_label="LRCLIB")
    return engine


@pytest.fixture
def spotify():
    client = MagicMock()
    client.complete_auth = AsyncMock(return_value=True)
    return client


@pytest.fixture
def client(engine, display, spotify):
    attach_engine(engine, display, spotify)
    yield app.test_client()
    attach_engine(None)


async def test_lyrics_snapshot(client, engine):
    engine.on_sample(PlaybackSample(1500, 180000, True, latency_ms=100, sequence=1))
    response = await client.get('/lyrics')
    data = await response.get_json()

    assert response.status_code == 200
    assert data["lyrics"]["lines"] == ["first", "second", "third"]
    assert data["current_line_index"] == 1
    assert data["visible"] is True
    assert data["engine"]["latency_estimate_ms"] == 100
    assert response.headers["Cache-Control"].startswith("no-cache")


async def test_routes_without_engine():
    attach_engine(None)
    client = app.test_client()
    for method, path in [("get", "/lyrics"), ("get", "/api/latency"), ("post", "/api/line/next"),
                         ("post", "/api/offset/increase"), ("post", "/api/visibility/show")]:
        response = await getattr(client, method)(path)
        assert response.status_code == 503, path


async def test_line_navigation(client, engine):
    response = await client.post('/api/line/next')
    assert (await response.get_json()) == {"current_line_index": 1}

    response = await client.post('/api/line/previous')
    assert (await response.get_json()) == {"current_line_index": 0}

    response = await client.post('/api/line/2')
    assert (await response.get_json()) == {"current_line_index": 2}

    response = await client.post('/api/line/9')
    assert response.status_code == 400
    assert engine.timing.current_line_index == 2


async def test_offset_routes(client, display):
    response = await client.post('/api/offset/increase')
    assert (await response.get_json()) == {"offset_ms": 250}
    assert display.offset_feedback_ms == 250

    response = await client.post('/api/offset/decrease')
    response = await client.post('/api/offset/decrease')
    assert (await response.get_json()) == {"offset_ms": -250}


async def test_sync_route(client, engine):
    response = await client.post('/api/sync', json={"enabled": False})
    assert (await response.get_json()) == {"sync_enabled": False}

    response = await client.post('/api/sync')
    assert (await response.get_json()) == {"sync_enabled": True}

    response = await client.post('/api/sync', json={"enabled": "yes"})
    assert response.status_code == 400


async def test_visibility_routes(client, engine):
    response = await client.post('/api/visibility/hide')
    assert (await response.get_json()) == {"visible": False, "manually_overridden": True}

    response = await client.post('/api/visibility/toggle')
    assert (await response.get_json())["visible"] is True

    await client.post('/api/visibility/hide')
    response = await client.post('/api/visibility/reset')
    assert (await response.get_json())["manually_overridden"] is False

    response = await client.post('/api/visibility/explode')
    assert response.status_code == 404


async def test_interaction_cancels_hide(client, engine, clock):
    engine.on_sample(PlaybackSample(0, 180000, True, sequence=1))
    engine.on_sample(PlaybackSample(500, 180000, False, sequence=2))
    assert engine.visibility.hide_timer.pending

    response = await client.post('/api/interaction')
    assert response.status_code == 200
    assert not engine.visibility.hide_timer.pending


async def test_latency_route(client, engine):
    engine.on_sample(PlaybackSample(0, 180000, True, latency_ms=80, sequence=1))
    engine.on_sample(PlaybackSample(500, 180000, True, latency_ms=120, sequence=2))
    data = await (await client.get('/api/latency')).get_json()
    assert data["estimate_ms"] == 100.0
    assert data["samples"] == [80, 120]
    assert data["window_size"] == 20


async def test_settings_route(client):
    data = await (await client.get('/api/settings')).get_json()
    assert "Sync" in data["settings"]
    assert "sync.hide_delay_ms" in data["settings"]["Sync"]


async def test_callback(client, spotify):
    response = await client.get('/callback?code=abc')
    assert response.status_code == 200
    spotify.complete_auth.assert_awaited_once_with("abc")

    response = await client.get('/callback?error=access_denied')
    assert response.status_code == 400


async def test_exit_application(client):
    from context import queue
    response = await client.post('/exit-application')
    assert response.status_code == 200
    assert queue.get_nowait() == "exit"
