"""
Replicate provider for the hosted Kling v1.6 models.

Predictions are created with ``Prefer: wait`` so that most runs are already
terminal in the create response; that response is the first observation the
poller sees. Longer runs are followed through the prediction's ``urls.get``
link by the shared TaskPoller.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from ...services.moods import enhance_video_prompt, negative_prompt, video_settings
from ..exceptions import MalformedResponse, ProviderError, ProviderUnavailable
from .base import PollingVideoProvider, VideoRequest
from .polling import TaskState, TaskStatus

logger = logging.getLogger(__name__)

_STATUS_MAP = {
    "starting": TaskState.SUBMITTED,
    "processing": TaskState.PROCESSING,
    "succeeded": TaskState.SUCCEEDED,
    "failed": TaskState.FAILED,
    "canceled": TaskState.FAILED,
}


class ReplicateVideoProvider(PollingVideoProvider):
    """Image-to-video over the Replicate predictions API."""

    API_URL = "https://api.replicate.com/v1"
    STANDARD_MODEL = "kwaivgi/kling-v1.6-standard"
    PRO_MODEL = "kwaivgi/kling-v1.6-pro"

    def __init__(
        self,
        api_token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        **poll_options,
    ):
        super().__init__(sleep=sleep, clock=clock, **poll_options)
        self.api_token = api_token
        self.client = client or httpx.Client(timeout=timeout)
        # Create responses not yet observed by the poller, and status links per prediction
        self._created: Dict[str, Dict[str, Any]] = {}
        self._status_urls: Dict[str, str] = {}

    @property
    def name(self) -> str:
        return "replicate"

    @property
    def is_available(self) -> bool:
        return bool(self.api_token)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Token {self.api_token}",
            "Content-Type": "application/json",
            "Prefer": "wait",
        }

    def build_input(self, request: VideoRequest) -> Dict[str, Any]:
        settings = video_settings(request.mood, request.mood_intensity)
        prompt = request.prompt
        if request.camera_control is not None and not request.camera_control.is_tilt:
            phrase = request.camera_control.describe(request.mood)
            if phrase:
                prompt = f"{prompt}, {phrase}"

        return {
            "prompt": enhance_video_prompt(prompt, request.mood, request.mood_intensity),
            "duration": request.duration,
            "cfg_scale": settings["cfg_scale"],
            "start_image": request.image,
            "aspect_ratio": request.aspect_ratio,
            "negative_prompt": negative_prompt(request.mood),
        }

    def model_for(self, request: VideoRequest) -> str:
        mode = request.mode or video_settings(request.mood, request.mood_intensity)["preferred_mode"]
        return self.PRO_MODEL if mode == "pro" else self.STANDARD_MODEL

    def _prediction(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise MalformedResponse(self.name, f"Expected a prediction object, got {type(payload).__name__}")
        if not isinstance(payload.get("id"), str) or not payload["id"]:
            raise MalformedResponse(self.name, f"Prediction has no id: {payload!r:.200}")
        return payload

    def submit(self, request: VideoRequest) -> str:
        if not self.is_available:
            raise ProviderUnavailable(self.name, "Missing REPLICATE_API_TOKEN")

        model = self.model_for(request)
        logger.info(f"[REPLICATE] Running {model} with {request.mood} mood (intensity {request.mood_intensity}/10)")

        try:
            response = self.client.post(
                f"{self.API_URL}/models/{model}/predictions",
                headers=self._headers(),
                json={"input": self.build_input(request)},
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.name, f"Prediction request failed: {e}") from e

        prediction = self._prediction(payload)
        prediction_id = prediction["id"]
        urls = prediction.get("urls")
        get_url = urls.get("get") if isinstance(urls, dict) else None
        self._status_urls[prediction_id] = get_url if isinstance(get_url, str) and get_url else (
            f"{self.API_URL}/predictions/{prediction_id}"
        )
        self._created[prediction_id] = prediction
        logger.info(f"[REPLICATE] Prediction created: {prediction_id} ({prediction.get('status')})")
        return prediction_id

    def _fetch(self, task_id: str) -> Dict[str, Any]:
        url = self._status_urls.get(task_id, f"{self.API_URL}/predictions/{task_id}")
        try:
            response = self.client.get(url, headers={"Authorization": f"Token {self.api_token}"})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.name, f"Prediction status failed: {e}") from e
        return self._prediction(payload)

    def poll(self, task_id: str) -> TaskStatus:
        prediction = self._created.pop(task_id, None) or self._fetch(task_id)
        status = prediction.get("status")
        state = _STATUS_MAP.get(status) if isinstance(status, str) else None

        if state is None:
            logger.warning(f"[REPLICATE] Unknown status {status!r} for prediction {task_id}")
            return TaskStatus(state=TaskState.PROCESSING)

        logger.debug(f"[REPLICATE] Prediction {task_id}: {status}")
        if state.is_terminal:
            self._status_urls.pop(task_id, None)

        if state == TaskState.SUCCEEDED:
            output = prediction.get("output")
            url = self._output_url(output)
            if not url:
                logger.warning(f"[REPLICATE] No video URL in output: {output!r:.200}")
            return TaskStatus(state=state, result_url=url)

        if state == TaskState.FAILED:
            return TaskStatus(state=state, failure_reason=str(prediction.get("error") or status))

        return TaskStatus(state=state)

    @staticmethod
    def _output_url(output) -> Optional[str]:
        if isinstance(output, str):
            return output or None
        if isinstance(output, list) and output and isinstance(output[0], str):
            return output[0]
        if isinstance(output, dict):
            url = output.get("url") or output.get("video")
            return url if isinstance(url, str) else None
        return None
