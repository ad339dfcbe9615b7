"""
SRT helpers for burned-in narration subtitles.
"""
import math
from pathlib import Path
from typing import Union


def format_srt_timestamp(seconds: float) -> str:
    """
    Format seconds as ``HH:MM:SS,mmm``.

    NaN and negative values are shown as zero; this is display-only and
    never used to validate a probed duration.
    """
    if seconds is None or math.isnan(seconds) or seconds < 0:
        seconds = 0.0
    total_ms = int(math.floor(seconds * 1000 + 0.5))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def build_srt(text: str, duration: float, lead_out: float = 0.35) -> str:
    """Single cue spanning the whole clip plus a short lead-out."""
    return f"1\n00:00:00,000 --> {format_srt_timestamp(duration + lead_out)}\n{text}\n\n"


def escape_filter_path(path: Union[str, Path]) -> str:
    """Escape a path for use inside the ffmpeg ``subtitles='...'`` filter option."""
    escaped = str(path).replace("\\", "/")
    escaped = escaped.replace(":", "\\:")
    return escaped.replace("'", "'\\''")
