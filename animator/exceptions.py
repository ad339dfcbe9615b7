"""
Animation pipeline exceptions.
"""
from typing import Any, List, Optional


class AnimationError(Exception):
    """Base exception for animation pipeline errors."""
    pass


class InputValidationError(AnimationError):
    """Raised when a generation request is malformed (article length, scene count)."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        self.errors = errors or []
        super().__init__(message)


class ProviderExhaustedError(AnimationError):
    """Raised when every video generation strategy failed for a scene."""

    def __init__(self, attempts: List[Any], last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        cause = str(last_error) if last_error else "no provider available"
        super().__init__(f"Video generation failed after {len(attempts)} attempts: {cause}")


class MediaToolError(AnimationError):
    """Raised on a non-zero exit (or unusable output) from ffmpeg/ffprobe."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
        scene_number: Optional[int] = None,
    ):
        self.returncode = returncode
        self.stderr = stderr
        self.scene_number = scene_number
        prefix = f"Scene {scene_number}: " if scene_number is not None else ""
        detail = f" (exit {returncode})" if returncode is not None else ""
        super().__init__(f"{prefix}{message}{detail}")


class AssetMissingError(AnimationError):
    """Raised when an expected file is absent at a phase boundary."""

    def __init__(self, path: Any, scene_number: Optional[int] = None):
        self.path = str(path)
        self.scene_number = scene_number
        prefix = f"Scene {scene_number}: " if scene_number is not None else ""
        super().__init__(f"{prefix}missing asset {self.path}")


class NothingToAssembleError(AnimationError):
    """Raised when the timeline has no processed clips."""

    def __init__(self, message: str = "No clips were successfully processed"):
        super().__init__(message)


class PersistenceError(AnimationError):
    """Raised when the final video cannot be copied to durable storage."""
    pass


class JobFailedError(AnimationError):
    """Terminal job failure carrying the failing phase and innermost cause."""

    def __init__(self, phase: str, cause: str, job_id: Optional[str] = None):
        self.phase = phase
        self.cause = cause
        self.job_id = job_id
        super().__init__(f"Job failed during '{phase}': {cause}")
