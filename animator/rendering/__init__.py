"""
Media Assembly Package.

Audio-driven clip processing and ordered concatenation through ffmpeg.
"""
from .media_tool import MediaToolAdapter, ToolResult
from .subtitles import format_srt_timestamp, build_srt, escape_filter_path
from .clip_assembler import ClipAssembler, FadePlan, compute_fades
from .timeline import TimelineAssembler, build_manifest

__all__ = [
    "MediaToolAdapter",
    "ToolResult",
    "format_srt_timestamp",
    "build_srt",
    "escape_filter_path",
    "ClipAssembler",
    "FadePlan",
    "compute_fades",
    "TimelineAssembler",
    "build_manifest",
]
