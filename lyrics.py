"""
Lyric parsing and line estimation.

Synced lyrics arrive as LRC-style text ("[mm:ss.cc]text"); plain lyrics are
newline-delimited text without timing. Both become an ordered list of
LyricLine, and the estimators below map an elapsed playback time onto an
index into that list.
"""
import math
import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Optional, Sequence

from logging_config import get_logger

logger = get_logger(__name__)

# [m:ss.cc] or [mm:ss.cc] followed by the line text
TIMESTAMP_LINE_RE = re.compile(r"^\[(\d{1,2}):(\d{2})\.(\d{2})\](.*)$")

# A line that is nothing but a bracketed label, e.g. "[Chorus]"
SECTION_MARKER_RE = re.compile(r"^\[.*\]$")

# Song structure curve for lyrics without timestamps.
# Intro and outro are compressed so a linear mapping does not lag behind.
INTRO_END = 0.12
OUTRO_START = 0.92
INTRO_SLOPE = 0.3
BODY_START = 0.3
BODY_WIDTH = 0.80
BODY_SPAN = 0.55
OUTRO_START_VALUE = 0.85
OUTRO_SLOPE = 1.5

@dataclass(frozen=True)
class LyricLine:
    """A single display line; offset_ms is None for untimed lyrics."""
    text: str
    offset_ms: Optional[int] = None

    @property
    def is_timed(self) -> bool:
        return self.offset_ms is not None

# ==========================================
# Parsing
# ==========================================

def parse_synced_lyrics(text: Optional[str]) -> List[LyricLine]:
    """
    Parse line-timestamped lyrics.

    Lines that do not carry a "[m:ss.cc]" prefix (metadata tags, blank lines,
    anything malformed) are skipped, as are timestamped lines whose text is
    empty or a section marker such as "[Chorus]". The result is ordered by offset; lines sharing a timestamp keep
    their original order.
    """
    if not text:
        return []

    lines = []
    skipped = 0
    for raw_line in text.splitlines():
        match = TIMESTAMP_LINE_RE.match(raw_line.strip())
        if not match:
            if raw_line.strip():
                skipped += 1
            continue

        minutes, seconds, centiseconds, rest = match.groups()
        line_text = rest.strip()
        if not line_text or SECTION_MARKER_RE.match(line_text):
            continue

        offset_ms = (int(minutes) * 60 + int(seconds)) * 1000 + int(centiseconds) * 10
        lines.append(LyricLine(text=line_text, offset_ms=offset_ms))

    if skipped:
        logger.debug(f"Skipped {skipped} lines without a timestamp prefix")

    # sorted() is stable, so equal offsets keep source order
    return sorted(lines, key=lambda line: line.offset_ms)

def parse_plain_lyrics(text: Optional[str]) -> List[LyricLine]:
    """Split untimed lyrics into display lines, dropping blanks and section markers."""
    if not text:
        return []

    lines = []
    for raw_line in text.splitlines():
        line_text = raw_line.strip()
        if not line_text or SECTION_MARKER_RE.match(line_text):
            continue
        lines.append(LyricLine(text=line_text))
    return lines

def has_timestamps(text: Optional[str]) -> bool:
    """True if at least one line of text carries a timestamp prefix."""
    if not text:
        return False
    return any(TIMESTAMP_LINE_RE.match(line.strip()) for line in text.splitlines())

def format_timestamp(offset_ms: int) -> str:
    minutes, rest = divmod(offset_ms, 60000)
    seconds, millis = divmod(rest, 1000)
    return f"[{minutes:02d}:{seconds:02d}.{millis // 10:02d}]"

def format_synced_lyrics(lines: Sequence[LyricLine]) -> str:
    """Serialize timed lines back to "[mm:ss.cc]text" form."""
    return "\n".join(f"{format_timestamp(line.offset_ms)}{line.text}" for line in lines if line.is_timed)

# ==========================================
# Position estimation
# ==========================================

def find_synced_index(lines: Sequence[LyricLine], elapsed_ms: int) -> int:
    """
    Index of the last line whose offset is <= elapsed_ms.

    Before the first line (or with no lines at all) this is 0, so the first
    line stays on screen until playback reaches it.
    """
    if not lines:
        return 0
    offsets = [line.offset_ms for line in lines]
    index = bisect_right(offsets, elapsed_ms) - 1
    return min(max(index, 0), len(lines) - 1)

def heuristic_progress(progress: float) -> float:
    """Map the elapsed fraction of a song onto the fraction of lyrics sung so far."""
    if progress < INTRO_END:
        adjusted = progress * INTRO_SLOPE
    elif progress <= OUTRO_START:
        adjusted = BODY_START + ((progress - INTRO_END) / BODY_WIDTH) * BODY_SPAN
    else:
        adjusted = OUTRO_START_VALUE + (progress - OUTRO_START) * OUTRO_SLOPE
    return min(max(adjusted, 0.0), 1.0)

def estimate_heuristic_index(elapsed_ms: int, duration_ms: int, line_count: int) -> int:
    """Guess the current line of untimed lyrics from how far into the song we are."""
    if duration_ms <= 0 or line_count <= 0:
        return 0
    adjusted = heuristic_progress(elapsed_ms / duration_ms)
    index = math.floor(adjusted * line_count)
    return min(max(index, 0), line_count - 1)

def estimate_line_index(lines: Sequence[LyricLine], elapsed_ms: int,
                        duration_ms: int, synchronized: bool) -> int:
    """Current line for elapsed_ms; timestamps win whenever they exist."""
    if not lines:
        return 0
    if synchronized:
        return find_synced_index(lines, elapsed_ms)
    return estimate_heuristic_index(elapsed_ms, duration_ms, len(lines))
