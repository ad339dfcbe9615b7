"""
FFmpeg / FFprobe adapter.

All media work goes through synchronous subprocess calls with captured
output. Non-zero exits are returned to the caller as a ToolResult; only
failures to run the tool at all (missing binary, timeout) raise here.
"""
import logging
import math
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..exceptions import MediaToolError

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class MediaToolAdapter:
    """Wraps the ffmpeg and ffprobe executables."""

    def __init__(
        self,
        ffmpeg_path: Optional[str] = None,
        ffprobe_path: Optional[str] = None,
        timeout: int = 600,
        probe_timeout: int = 60,
    ):
        if ffmpeg_path is None or ffprobe_path is None:
            from ..config import config
            ffmpeg_path = ffmpeg_path or config.paths.ffmpeg_path
            ffprobe_path = ffprobe_path or config.paths.ffprobe_path
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path
        self.timeout = timeout
        self.probe_timeout = probe_timeout

    def run(self, cmd: Sequence[str], timeout: Optional[int] = None) -> ToolResult:
        cmd = [str(c) for c in cmd]
        logger.debug(f"[FFMPEG] Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout or self.timeout)
        except subprocess.TimeoutExpired as e:
            raise MediaToolError(f"{Path(cmd[0]).name} timed out after {e.timeout}s", stderr=str(e.stderr or "")) from e
        except OSError as e:
            raise MediaToolError(f"Could not run {cmd[0]}: {e}") from e
        return ToolResult(result.returncode, result.stdout or "", result.stderr or "")

    def probe_duration(self, path: Path) -> float:
        """
        Duration of a media file in seconds.

        Raises:
            MediaToolError: on a non-zero exit or an unusable (NaN, negative) value
        """
        result = self.run(
            [
                self.ffprobe_path, "-v", "error",
                "-show_entries", "format=duration",
                "-of", "default=noprint_wrappers=1:nokey=1",
                str(path),
            ],
            timeout=self.probe_timeout,
        )
        if not result.ok:
            raise MediaToolError(f"ffprobe failed for {path}", result.returncode, result.stderr)

        raw = result.stdout.strip()
        try:
            duration = float(raw)
        except ValueError:
            raise MediaToolError(f"Failed to parse duration for {path}: {raw!r}", stderr=result.stderr)
        if math.isnan(duration) or math.isinf(duration) or duration < 0:
            raise MediaToolError(f"Invalid duration for {path}: {raw!r}", stderr=result.stderr)
        return duration

    def transcode_and_mux(self, args: List[str]) -> ToolResult:
        return self.run([self.ffmpeg_path, "-y", *args])

    def concatenate(self, manifest: Path, output_path: Path, args: Optional[List[str]] = None) -> ToolResult:
        extra = args if args is not None else ["-c", "copy", "-movflags", "+faststart"]
        return self.run([
            self.ffmpeg_path, "-y",
            "-f", "concat", "-safe", "0",
            "-i", str(manifest),
            *extra,
            str(output_path),
        ])
