"""Tests for the lyric providers with the HTTP session mocked out"""
from unittest.mock import MagicMock

import pytest
import requests

from providers.base import LyricsResult
from providers.lrclib import LRCLIBProvider
from providers.lyrics_ovh import LyricsOvhProvider
from providers.simple import JsonLyricsProvider, LyricsApiProvider, LyristProvider, PopcatProvider


def response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    return resp


def with_session(provider, *responses):
    provider.session = MagicMock()
    provider.session.get.side_effect = list(responses)
    return provider


def test_lrclib_exact_match_prefers_synced():
    provider = with_session(LRCLIBProvider(), response(payload={
        "syncedLyrics": "[00:01.00]Hello",
        "plainLyrics": "Hello",
    }))
    result = provider.get_lyrics("Artist", "Title", duration_ms=200400)

    assert result.synchronized
    assert result.text == "[00:01.00]Hello"
    assert result.source == "LRCLIB"
    url = provider.session.get.call_args.args[0]
    params = provider.session.get.call_args.kwargs["params"]
    assert url.endswith("/get")
    assert params["duration"] == 200


def test_lrclib_search_fallback_without_duration():
    provider = with_session(
        LRCLIBProvider(),
        response(payload=[]),
        response(payload=[{"plainLyrics": "only plain"}, {"syncedLyrics": "[00:02.00]timed"}]),
    )
    result = provider.get_lyrics("Artist", "Title")

    assert result.synchronized
    assert result.text == "[00:02.00]timed"
    assert provider.session.get.call_count == 2
    assert provider.session.get.call_args.kwargs["params"] == {"q": "Artist Title"}


def test_lrclib_falls_back_to_plain_from_get():
    provider = with_session(
        LRCLIBProvider(),
        response(payload={"plainLyrics": "words"}),
        response(status=404),
        response(status=404),
    )
    result = provider.get_lyrics("Artist", "Title", duration_ms=1000)
    assert not result.synchronized
    assert result.text == "words"


def test_lrclib_instrumental_is_no_result():
    provider = with_session(LRCLIBProvider(), response(payload={"instrumental": True}),
                            response(payload=[]), response(payload=[]))
    assert provider.get_lyrics("Artist", "Title", duration_ms=1000) is None


def test_request_error_is_swallowed():
    provider = LyricsOvhProvider()
    provider.session = MagicMock()
    provider.session.get.side_effect = requests.ConnectionError("down")
    assert provider.get_lyrics("Artist", "Title") is None


def test_invalid_json_is_no_result():
    resp = response()
    resp.json.side_effect = ValueError("not json")
    provider = with_session(LyricsOvhProvider(), resp)
    assert provider.get_lyrics("Artist", "Title") is None


def test_lyrics_ovh_quotes_path():
    provider = with_session(LyricsOvhProvider(), response(payload={"lyrics": "  some words \n"}))
    result = provider.get_lyrics("AC/DC", "Back In Black")

    assert result.text == "some words"
    assert not result.synchronized
    assert provider.session.get.call_args.args[0].endswith("/AC%2FDC/Back%20In%20Black")


def test_popcat_query_and_min_length():
    provider = with_session(PopcatProvider(), response(payload={"lyrics": "short"}))
    result = provider.get_lyrics("Artist", "Title")

    assert provider.session.get.call_args.kwargs["params"] == {"song": "Title Artist"}
    assert result.text == "short"
    assert not provider.accepts(result)
    assert provider.accepts(LyricsResult("x" * 60, False, "Popcat"))


def test_lyrist_missing_lyrics_key():
    provider = with_session(LyristProvider(), response(payload={"error": "not found"}))
    assert provider.get_lyrics("Artist", "Title") is None


def test_lyricsapi_path_lookup():
    provider = with_session(LyricsApiProvider(), response(payload={"lyrics": "  line one\nline two  "}))
    result = provider.get_lyrics("Sigur Rós", "Hoppípolla")

    url = provider.session.get.call_args.args[0]
    assert url == "https://lyricsapi.net/api/lyrics/Sigur%20R%C3%B3s/Hopp%C3%ADpolla"
    assert result == LyricsResult("line one\nline two", False, "LyricsAPI")


def test_json_provider_requires_build_request():
    with pytest.raises(TypeError):
        JsonLyricsProvider(provider_name="lyrist")
