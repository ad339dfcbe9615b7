"""
Layered retry/fallback over the video providers.

Each scene gets up to three strategy attempts of decreasing fidelity:

    camera   -> scene-type camera control
    standard -> same prompt, no camera control
    degraded -> first clause of the motion prompt, reduced intensity

Within a strategy the providers are tried in order (primary first), so a
failing primary falls back to the secondary before the strategy is
downgraded.
"""
import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from ...exceptions import ProviderExhaustedError
from ...models import ProviderAttempt, SceneType, VideoResolution
from ..exceptions import ProviderError, ProviderUnavailable
from .base import BaseVideoProvider, CameraControl, VideoRequest

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    CAMERA = "camera"
    STANDARD = "standard"
    DEGRADED = "degraded"

    @property
    def display_name(self) -> str:
        names = {
            Strategy.CAMERA: "Camera control",
            Strategy.STANDARD: "Standard",
            Strategy.DEGRADED: "Simplified prompt",
        }
        return names[self]

    @classmethod
    def for_attempt(cls, attempt: int) -> "Strategy":
        """Strategy for a 1-based attempt index; attempts past the third stay degraded."""
        order = (cls.CAMERA, cls.STANDARD, cls.DEGRADED)
        return order[min(attempt, len(order)) - 1]


def camera_control_for(scene_type: SceneType, intensity: int) -> Tuple[CameraControl, Optional[str]]:
    """Camera control and mode override for a scene type."""
    if scene_type == SceneType.ACTION:
        return CameraControl("pan", min(5, 2 + intensity / 2)), None
    if scene_type == SceneType.LANDSCAPE:
        return CameraControl("zoom", max(-3, -1 - intensity / 3)), "std"
    if scene_type == SceneType.EMOTIONAL:
        return CameraControl("zoom", min(6, 2 + intensity / 2)), None
    # dialogue and standard scenes keep the camera level
    return CameraControl("tilt", 0), None


def degrade_prompt(motion_prompt: str, mood: str) -> str:
    first_clause = motion_prompt.split(",")[0].strip()
    return f"Disney animation: {first_clause} with {mood} mood"


class ProviderFallbackEngine:
    """Resolves one scene image into a generated video URL."""

    def __init__(
        self,
        providers: Sequence[BaseVideoProvider],
        strategy_attempts: int = 3,
        backoff_base: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if strategy_attempts < 1:
            raise ValueError("strategy_attempts must be at least 1")
        self.providers = list(providers)
        self.strategy_attempts = strategy_attempts
        self.backoff_base = backoff_base
        self._sleep = sleep
        self._clock = clock

    @property
    def available_providers(self) -> List[BaseVideoProvider]:
        return [p for p in self.providers if p.is_available]

    def build_request(
        self,
        strategy: Strategy,
        image: str,
        motion_prompt: str,
        duration_hint: float,
        scene_type: SceneType,
        mood: str,
        mood_intensity: int,
    ) -> VideoRequest:
        request = VideoRequest(
            image=image,
            prompt=motion_prompt,
            mood=mood,
            mood_intensity=mood_intensity,
            duration=int(round(duration_hint)) or 10,
        )
        if strategy == Strategy.CAMERA:
            request.camera_control, request.mode = camera_control_for(scene_type, mood_intensity)
        elif strategy == Strategy.DEGRADED:
            request.prompt = degrade_prompt(motion_prompt, mood)
            request.mood_intensity = max(1, mood_intensity - 2)
        return request

    def resolve_video(
        self,
        image: str,
        motion_prompt: str,
        duration_hint: float = 10,
        scene_type: SceneType = SceneType.STANDARD,
        mood: str = "professional",
        mood_intensity: int = 5,
    ) -> VideoResolution:
        """
        Try every strategy until a provider returns a video URL.

        Raises:
            ProviderExhaustedError: when all strategies failed on every provider
        """
        attempts: List[ProviderAttempt] = []
        last_error: Optional[Exception] = None

        if not self.available_providers:
            raise ProviderExhaustedError(attempts, ProviderUnavailable("video", "no video provider configured"))

        for strategy_attempt in range(1, self.strategy_attempts + 1):
            strategy = Strategy.for_attempt(strategy_attempt)
            request = self.build_request(
                strategy, image, motion_prompt, duration_hint, scene_type, mood, mood_intensity
            )
            logger.info(
                f"[VIDEO] {mood} strategy {strategy_attempt}/{self.strategy_attempts} "
                f"({strategy.display_name}, {scene_type.value} scene, intensity {request.mood_intensity}/10)"
            )

            for provider in self.providers:
                if not provider.is_available:
                    logger.debug(f"[VIDEO] Skipping unavailable provider {provider.name}")
                    continue

                started = self._clock()
                try:
                    result = provider.generate(request)
                except ProviderError as e:
                    last_error = e
                    attempts.append(ProviderAttempt(
                        attempt=len(attempts) + 1,
                        strategy=strategy.value,
                        provider=provider.name,
                        success=False,
                        error=str(e),
                        elapsed_seconds=max(0.0, self._clock() - started),
                    ))
                    logger.warning(f"[VIDEO] {provider.name} failed ({strategy.value}): {e}")
                    continue

                attempts.append(ProviderAttempt(
                    attempt=len(attempts) + 1,
                    strategy=strategy.value,
                    provider=provider.name,
                    success=True,
                    video_url=result.video_url,
                    elapsed_seconds=max(0.0, self._clock() - started),
                ))
                logger.info(f"[VIDEO] Resolved via {provider.name} ({strategy.value}) after {len(attempts)} attempts")
                return VideoResolution(
                    video_url=result.video_url,
                    provider=provider.name,
                    strategy=strategy.value,
                    attempts=attempts,
                )

            if strategy_attempt < self.strategy_attempts:
                delay = self.backoff_base * (2 ** strategy_attempt)
                logger.info(f"[VIDEO] Waiting {delay:.0f}s before next strategy")
                self._sleep(delay)

        raise ProviderExhaustedError(attempts, last_error)
