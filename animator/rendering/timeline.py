"""
Timeline Assembler - ordered stream-copy concatenation of processed clips.
"""
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError

from ..exceptions import AnimationError, MediaToolError, NothingToAssembleError
from ..models import ProcessedClip, Timeline
from .media_tool import MediaToolAdapter

logger = logging.getLogger(__name__)


def build_manifest(clips: List[ProcessedClip]) -> str:
    """
    ffmpeg concat demuxer manifest, one ``file '...'`` line per clip.

    Paths are written absolute: the demuxer resolves relative entries against
    the manifest's own directory, not the working directory.
    """
    lines = []
    for clip in clips:
        path = Path(clip.path).resolve().as_posix().replace("'", "'\\''")
        lines.append(f"file '{path}'")
    return "\n".join(lines)


class TimelineAssembler:
    """Concatenates clips in scene-number order without re-encoding."""

    MANIFEST_NAME = "concat_list.txt"

    def __init__(self, media_tool: MediaToolAdapter):
        self.media_tool = media_tool

    def assemble(self, clips: List[ProcessedClip], output_path: Path) -> Timeline:
        """
        Concatenate ``clips`` into ``output_path``.

        Clips must share codec, resolution and frame rate (ClipAssembler output).

        Raises:
            NothingToAssembleError: if ``clips`` is empty
            MediaToolError: on non-zero ffmpeg exit
        """
        if not clips:
            raise NothingToAssembleError()

        ordered = sorted(clips, key=lambda c: c.scene_number)
        output_path = Path(output_path)
        try:
            timeline = Timeline(clips=ordered, output_path=str(output_path))
        except ValidationError as e:
            raise AnimationError(f"Invalid timeline: {e}") from e

        output_path.parent.mkdir(parents=True, exist_ok=True)
        manifest = output_path.parent / self.MANIFEST_NAME
        manifest.write_text(build_manifest(ordered), encoding="utf-8")
        logger.info(f"[TIMELINE] Concatenating {len(ordered)} clips: scenes {timeline.scene_numbers}")

        result = self.media_tool.concatenate(manifest, output_path)
        if not result.ok:
            logger.error(f"[TIMELINE] Concatenation failed: {result.stderr[-500:]}")
            raise MediaToolError("Final concatenation failed", result.returncode, result.stderr)

        manifest.unlink(missing_ok=True)
        logger.info(f"[TIMELINE] Assembled {output_path.name} ({timeline.total_duration:.1f}s)")
        return timeline
