"""
Kling AI direct API provider.

API: https://api-singapore.klingai.com/v1
Uses the submit/poll task API:
1. POST /videos/image2video -> task_id
2. GET /videos/generations/{task_id} until succeed/failed
"""
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx
import jwt

from ...services.moods import enhance_video_prompt, video_settings
from ..exceptions import MalformedResponse, ProviderError, ProviderUnavailable
from .base import PollingVideoProvider, VideoRequest
from .polling import TaskState, TaskStatus

logger = logging.getLogger(__name__)

_STATUS_MAP = {
    "submitted": TaskState.SUBMITTED,
    "processing": TaskState.PROCESSING,
    "succeed": TaskState.SUCCEEDED,
    "failed": TaskState.FAILED,
}


class KlingVideoProvider(PollingVideoProvider):
    """Image-to-video through the Kling AI task API, authenticated with short-lived JWTs."""

    BASE_URL = "https://api-singapore.klingai.com/v1"
    MODEL = "kling-v1-6"
    TOKEN_TTL = 1800

    def __init__(
        self,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0,
        request_retries: int = 3,
        request_backoff_base: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        **poll_options,
    ):
        super().__init__(sleep=sleep, clock=clock, **poll_options)
        self.access_key = access_key
        self.secret_key = secret_key
        self.request_retries = request_retries
        self.request_backoff_base = request_backoff_base
        self.client = client or httpx.Client(timeout=timeout)

    @property
    def name(self) -> str:
        return "kling"

    @property
    def is_available(self) -> bool:
        return bool(self.access_key and self.secret_key)

    def _token(self) -> str:
        now = int(time.time())
        payload = {
            "iss": self.access_key,
            "exp": now + self.TOKEN_TTL,
            "nbf": now - 5,
        }
        return jwt.encode(payload, self.secret_key, algorithm="HS256", headers={"typ": "JWT"})

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token()}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Authenticated request, retried with exponential backoff. A fresh token is signed per try."""
        if not self.is_available:
            raise ProviderUnavailable(self.name, "Missing KLING_ACCESS_KEY / KLING_SECRET_KEY")

        last_error: Optional[Exception] = None
        for attempt in range(1, self.request_retries + 1):
            try:
                response = self.client.request(method, f"{self.BASE_URL}{path}", headers=self._headers(), json=payload)
                response.raise_for_status()
                body = response.json()
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
                logger.warning(f"[KLING] {method} {path} attempt {attempt}/{self.request_retries} failed (status={status}): {e}")
                if attempt < self.request_retries:
                    self._sleep((2 ** attempt) * self.request_backoff_base)
                continue

            if not isinstance(body, dict):
                raise MalformedResponse(self.name, f"{method} {path} returned {type(body).__name__}, expected an object")
            return body

        raise ProviderError(self.name, f"Request failed after {self.request_retries} attempts: {last_error}")

    @staticmethod
    def _video_url(task_result: Dict[str, Any]) -> Optional[str]:
        videos = task_result.get("videos")
        if not isinstance(videos, list) or not videos or not isinstance(videos[0], dict):
            return None
        url = videos[0].get("url")
        return url if isinstance(url, str) and url else None

    @staticmethod
    def _image_field(image: str) -> str:
        # Kling takes raw base64 or a URL, not a data URL
        if image.startswith("data:") and "," in image:
            return image.split(",", 1)[1]
        return image

    def build_payload(self, request: VideoRequest) -> Dict[str, Any]:
        settings = video_settings(request.mood, request.mood_intensity)
        payload: Dict[str, Any] = {
            "model_name": self.MODEL,
            "image": self._image_field(request.image),
            "prompt": enhance_video_prompt(request.prompt, request.mood, request.mood_intensity),
            "duration": str(request.duration),
            "mode": request.mode or settings["preferred_mode"],
            "cfg_scale": settings["cfg_scale"],
        }
        if request.camera_control is not None:
            payload["mode"] = "pro"
            if not request.camera_control.is_tilt:
                payload["camera_control"] = request.camera_control.to_payload()
        return payload

    def submit(self, request: VideoRequest) -> str:
        payload = self.build_payload(request)
        logger.info(
            f"[KLING] Submitting {request.mood} video (mode={payload['mode']}, "
            f"camera={'yes' if 'camera_control' in payload else 'no'})"
        )
        result = self._request("POST", "/videos/image2video", payload)

        if result.get("code") != 0:
            raise ProviderError(self.name, f"Video generation failed: {result.get('message', 'Unknown error')}")

        data = result.get("data")
        task_id = data.get("task_id") if isinstance(data, dict) else None
        if not isinstance(task_id, (str, int)) or isinstance(task_id, bool) or task_id == "":
            raise MalformedResponse(self.name, f"No task_id in response: {result}")

        logger.info(f"[KLING] Task created: {task_id}")
        return str(task_id)

    def poll(self, task_id: str) -> TaskStatus:
        result = self._request("GET", f"/videos/generations/{task_id}")
        if result.get("code") != 0:
            raise ProviderError(self.name, f"Status query failed: {result.get('message', 'Unknown error')}")

        data = result.get("data")
        if not isinstance(data, dict):
            raise MalformedResponse(self.name, f"No task data for {task_id}: {result!r:.200}")
        status = data.get("task_status") or data.get("status") or ""
        task_result = data.get("task_result")
        if not isinstance(task_result, dict):
            task_result = {}
        state = _STATUS_MAP.get(status) if isinstance(status, str) else None

        if state is None:
            logger.warning(f"[KLING] Unknown status '{status}' for task {task_id}")
            return TaskStatus(state=TaskState.PROCESSING)

        if state == TaskState.SUCCEEDED:
            url = self._video_url(task_result)
            if url is None:
                logger.warning(f"[KLING] Task {task_id} succeeded without a usable video entry: {task_result!r:.200}")
            return TaskStatus(state=state, result_url=url)

        if state == TaskState.FAILED:
            reason = task_result.get("fail_reason") or data.get("task_status_msg") or "Unknown error"
            return TaskStatus(state=state, failure_reason=reason)

        logger.debug(f"[KLING] Task {task_id}: {status}")
        return TaskStatus(state=state)
