"""
Base classes for image-to-video providers.

Two provider shapes are supported:
- SyncVideoProvider: a single blocking ``run`` call returns the result URL
- PollingVideoProvider: ``submit`` returns a task id that is polled to completion
"""
import base64
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .polling import TaskPoller, TaskStatus


@dataclass(frozen=True)
class CameraControl:
    """Single-axis camera movement (pan, tilt, zoom, ...)."""
    axis: str
    value: float

    @property
    def is_tilt(self) -> bool:
        return self.axis == "tilt"

    def to_payload(self) -> Dict[str, Any]:
        return {"type": "simple", "config": {self.axis: self.value}}

    def describe(self, mood: str) -> Optional[str]:
        """Prompt phrase for providers without native camera control."""
        if self.axis == "pan":
            return f"smooth panning camera movement with {mood} mood characteristics"
        if self.axis == "zoom":
            if self.value > 0:
                return f"slow zoom in camera movement emphasizing {mood} mood"
            return f"slow zoom out camera movement maintaining {mood} mood"
        if self.axis == "horizontal":
            return f"horizontal camera movement with {mood} pacing"
        if self.axis == "vertical":
            return f"vertical camera movement reflecting {mood} energy"
        return None


@dataclass
class VideoRequest:
    """One image-to-video generation request."""
    image: str  # http(s) URL or data URL
    prompt: str
    mood: str = "professional"
    mood_intensity: int = 5
    duration: int = 10
    aspect_ratio: str = "16:9"
    camera_control: Optional[CameraControl] = None
    mode: Optional[str] = None


@dataclass
class VideoResult:
    video_url: str
    provider: str
    task_id: Optional[str] = None
    duration: float = 10.0


def image_to_data_url(image_path: Path) -> str:
    """Encode a local PNG as a data URL accepted by the video APIs."""
    data = base64.b64encode(Path(image_path).read_bytes()).decode("ascii")
    return f"data:image/png;base64,{data}"


class BaseVideoProvider(ABC):
    """Abstract base class for video generation providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is configured."""
        pass

    @abstractmethod
    def generate(self, request: VideoRequest) -> VideoResult:
        """
        Generate a video and block until its URL is known.

        Raises:
            ProviderError: on any failure (subclasses carry the cause)
        """
        pass


class SyncVideoProvider(BaseVideoProvider):
    """Provider exposing a single blocking run call."""

    @abstractmethod
    def run(self, request: VideoRequest) -> VideoResult:
        pass

    def generate(self, request: VideoRequest) -> VideoResult:
        return self.run(request)


class PollingVideoProvider(BaseVideoProvider):
    """Provider exposing submit + poll; generation is driven by a TaskPoller."""

    def __init__(
        self,
        poll_interval: float = 10.0,
        max_poll_attempts: int = 60,
        max_poll_errors: int = 5,
        poll_error_backoff_cap: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.max_poll_errors = max_poll_errors
        self.poll_error_backoff_cap = poll_error_backoff_cap
        self._sleep = sleep
        self._clock = clock

    @abstractmethod
    def submit(self, request: VideoRequest) -> str:
        """Submit a task and return its id."""
        pass

    @abstractmethod
    def poll(self, task_id: str) -> TaskStatus:
        """Observe the current status of a task."""
        pass

    def make_poller(self) -> TaskPoller:
        return TaskPoller(
            provider=self.name,
            interval=self.poll_interval,
            max_attempts=self.max_poll_attempts,
            max_poll_errors=self.max_poll_errors,
            error_backoff_cap=self.poll_error_backoff_cap,
            sleep=self._sleep,
            clock=self._clock,
        )

    def generate(self, request: VideoRequest) -> VideoResult:
        task_id = self.submit(request)
        status = self.make_poller().wait(task_id, self.poll)
        return VideoResult(video_url=status.result_url, provider=self.name, task_id=task_id)
