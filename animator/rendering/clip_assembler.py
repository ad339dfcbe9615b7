"""
Clip Assembler - one scene's raw video + narration into a finished clip.

The narration audio is the authoritative duration: the raw video (always
generated at a fixed nominal length) is trimmed down to the audio plus a
small padding, never stretched. Subtitles are burned in and fades are
chosen from the clip's position in the timeline.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..exceptions import AssetMissingError, InputValidationError, MediaToolError
from ..models import ClipPosition, ProcessedClip
from .media_tool import MediaToolAdapter
from .subtitles import build_srt, escape_filter_path

logger = logging.getLogger(__name__)

SUBTITLE_STYLE = (
    "FontName=Arial,FontSize=16,PrimaryColour=&Hffffff,OutlineColour=&H000000,"
    "BorderStyle=1,Outline=1,Shadow=0,MarginV=30"
)


def fmt_seconds(value: float) -> str:
    """Compact seconds for ffmpeg arguments: 3.7, 4, 0.35."""
    return f"{value:.3f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class FadePlan:
    fade_in: bool
    fade_out: bool
    fade_duration: float
    fade_out_start: Optional[float]

    @property
    def video_filters(self) -> str:
        """Suffix appended to the -vf chain (leading comma included)."""
        parts = []
        if self.fade_in:
            parts.append(f"fade=t=in:st=0:d={fmt_seconds(self.fade_duration)}")
        if self.fade_out:
            parts.append(f"fade=t=out:st={fmt_seconds(self.fade_out_start)}:d={fmt_seconds(self.fade_duration)}")
        return "".join(f",{p}" for p in parts)

    @property
    def audio_filters(self) -> str:
        parts = []
        if self.fade_in:
            parts.append(f"afade=t=in:st=0:d={fmt_seconds(self.fade_duration)}")
        if self.fade_out:
            parts.append(f"afade=t=out:st={fmt_seconds(self.fade_out_start)}:d={fmt_seconds(self.fade_duration)}")
        return ",".join(parts)


def compute_fades(position: ClipPosition, duration: float, fade_duration: float = 0.5) -> FadePlan:
    """Fade windows for a clip; audio fades mirror the video fades exactly."""
    fade_out_start = max(0.0, duration - fade_duration) if position.fades_out else None
    return FadePlan(
        fade_in=position.fades_in,
        fade_out=position.fades_out,
        fade_duration=fade_duration,
        fade_out_start=fade_out_start,
    )


class ClipAssembler:
    """Trims, muxes, subtitles and fades one scene clip."""

    def __init__(
        self,
        media_tool: MediaToolAdapter,
        fade_duration: float = 0.5,
        subtitle_lead_out: float = 0.35,
        trim_padding: float = 0.3,
        fps: int = 30,
        width: int = 1920,
        height: int = 1080,
    ):
        self.media_tool = media_tool
        self.fade_duration = fade_duration
        self.subtitle_lead_out = subtitle_lead_out
        self.trim_padding = trim_padding
        self.fps = fps
        self.width = width
        self.height = height

    def build_args(
        self,
        raw_video: Path,
        narration_audio: Path,
        srt_path: Path,
        duration: float,
        fades: FadePlan,
        output_path: Path,
    ) -> List[str]:
        vf = (
            f"fps={self.fps},scale={self.width}:{self.height},format=yuv420p,"
            f"subtitles='{escape_filter_path(srt_path)}':force_style='{SUBTITLE_STYLE}'"
            f"{fades.video_filters}"
        )
        args = [
            "-ss", "0", "-t", fmt_seconds(duration + self.trim_padding), "-i", str(raw_video),
            "-i", str(narration_audio),
            "-map", "0:v", "-map", "1:a",
            "-c:v", "libx264", "-crf", "20", "-preset", "fast",
            "-c:a", "aac", "-ac", "2",
            "-vf", vf,
        ]
        if fades.audio_filters:
            args += ["-af", fades.audio_filters]
        args += ["-shortest", str(output_path)]
        return args

    def process_scene(
        self,
        raw_video: Path,
        narration_audio: Path,
        narration_text: str,
        position: ClipPosition,
        output_path: Path,
        scene_number: int,
    ) -> ProcessedClip:
        """
        Produce the normalized, subtitled, faded clip for one scene.

        Raises:
            AssetMissingError: if the video or audio input is missing
            InputValidationError: if there is no narration text
            MediaToolError: on an unreadable duration or non-zero ffmpeg exit (not retried)
        """
        raw_video = Path(raw_video)
        narration_audio = Path(narration_audio)
        output_path = Path(output_path)

        for path in (raw_video, narration_audio):
            if not path.exists():
                raise AssetMissingError(path, scene_number)
        if not narration_text or not narration_text.strip():
            raise InputValidationError(f"Scene {scene_number}: missing narration text")

        try:
            audio_duration = self.media_tool.probe_duration(narration_audio)
            video_duration = self.media_tool.probe_duration(raw_video)
        except MediaToolError as e:
            raise MediaToolError(str(e), e.returncode, e.stderr, scene_number) from e
        logger.info(
            f"[CLIP] Scene {scene_number}: audio {audio_duration:.2f}s, raw video {video_duration:.2f}s ({position.value})"
        )

        # Video is trimmed to the narration, never stretched; -shortest ends an overlong narration with the video
        duration = audio_duration
        if audio_duration > video_duration:
            logger.warning(
                f"[CLIP] Scene {scene_number}: narration runs {audio_duration - video_duration:.2f}s past the "
                f"raw video; clip ends at {video_duration:.2f}s"
            )
            duration = video_duration

        output_path.parent.mkdir(parents=True, exist_ok=True)
        srt_path = output_path.parent / f"subtitle_{scene_number}.srt"
        srt_path.write_text(build_srt(narration_text, audio_duration, self.subtitle_lead_out), encoding="utf-8")

        fades = compute_fades(position, duration, self.fade_duration)
        args = self.build_args(raw_video, narration_audio, srt_path, duration, fades, output_path)

        result = self.media_tool.transcode_and_mux(args)
        if not result.ok:
            logger.error(f"[CLIP] Scene {scene_number}: ffmpeg failed: {result.stderr[-500:]}")
            raise MediaToolError("ffmpeg failed to process scene clip", result.returncode, result.stderr, scene_number)

        srt_path.unlink(missing_ok=True)
        logger.info(f"[CLIP] Scene {scene_number} processed: {output_path.name}")

        return ProcessedClip(
            scene_number=scene_number,
            path=str(output_path),
            duration=duration,
            position=position,
            fade_in=fades.fade_in,
            fade_out=fades.fade_out,
            fade_out_start=fades.fade_out_start,
        )
