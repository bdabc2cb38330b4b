"""Tests for timestamped and plain lyric parsing"""
from lyrics import (
    LyricLine,
    format_synced_lyrics,
    format_timestamp,
    has_timestamps,
    parse_plain_lyrics,
    parse_synced_lyrics,
)


def test_parses_timestamps_and_skips_bad_lines():
    lines = parse_synced_lyrics("[00:01.00]Hello\n[00:03.50]World\n[bad line]\n")
    assert lines == [LyricLine("Hello", 1000), LyricLine("World", 3500)]


def test_single_digit_minutes_and_centiseconds():
    lines = parse_synced_lyrics("[1:02.34]  Line  ")
    assert lines == [LyricLine("Line", 62340)]


def test_metadata_tags_and_empty_text_are_skipped():
    text = "[ar:Someone]\n[ti:Song]\n[00:00.50]\n[00:02.00]Sung\n\n"
    assert parse_synced_lyrics(text) == [LyricLine("Sung", 2000)]


def test_timestamped_section_markers_are_skipped():
    text = "[00:01.00][Chorus]\n[00:02.00]Sung\n[00:03.00] [Verse 2] \n"
    assert parse_synced_lyrics(text) == [LyricLine("Sung", 2000)]


def test_output_sorted_with_stable_ties():
    text = "[00:05.00]C\n[00:01.00]A\n[00:05.00]D\n[00:01.00]B\n"
    assert [line.text for line in parse_synced_lyrics(text)] == ["A", "B", "C", "D"]


def test_empty_input():
    assert parse_synced_lyrics("") == []
    assert parse_synced_lyrics(None) == []
    assert parse_plain_lyrics(None) == []


def test_format_then_parse_is_stable():
    lines = parse_synced_lyrics("[00:01.00]Hello\n[02:03.45]World")
    assert format_synced_lyrics(lines) == "[00:01.00]Hello\n[02:03.45]World"
    assert parse_synced_lyrics(format_synced_lyrics(lines)) == lines


def test_format_timestamp_truncates_to_centiseconds():
    assert format_timestamp(62349) == "[01:02.34]"


def test_plain_lyrics_drop_blanks_and_section_markers():
    lines = parse_plain_lyrics("[Verse 1]\nFirst line\n\n  Second line \n[Chorus]\n")
    assert [line.text for line in lines] == ["First line", "Second line"]
    assert not any(line.is_timed for line in lines)


def test_has_timestamps():
    assert has_timestamps("intro\n[00:10.00]line")
    assert not has_timestamps("[Chorus]\nplain")
    assert not has_timestamps(None)
