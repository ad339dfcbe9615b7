"""
ElevenLabs voice provider.
"""
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import httpx

from .base import BaseVoiceProvider
from ..exceptions import ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)


class ElevenLabsVoiceProvider(BaseVoiceProvider):
    """ElevenLabs TTS API provider."""

    API_URL = "https://api.elevenlabs.io/v1/text-to-speech"
    MODEL_ID = "eleven_multilingual_v2"

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0,
        max_retries: int = 3,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._api_key = api_key
        self.max_retries = max_retries
        self._sleep = sleep
        self.client = client or httpx.Client(timeout=timeout)

    @property
    def name(self) -> str:
        return "elevenlabs"

    @property
    def is_available(self) -> bool:
        return bool(self._api_key)

    def synthesize(self, text: str, voice_id: str, voice_settings: Dict[str, Any], output_path: Path) -> Path:
        if not self.is_available:
            raise ProviderUnavailable(self.name, "Missing ELEVENLABS_API_KEY")
        if not text or not text.strip():
            raise ProviderError(self.name, "Empty narration text")

        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self._api_key,
        }
        body = {"text": text, "model_id": self.MODEL_ID, "voice_settings": voice_settings}

        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.client.post(f"{self.API_URL}/{voice_id}", headers=headers, json=body)
            except httpx.HTTPError as e:
                raise ProviderError(self.name, f"Request failed: {e}") from e

            if response.status_code == 429 and attempt < self.max_retries:
                delay = 2 ** attempt
                logger.warning(f"[TTS] Rate limited, retrying in {delay}s ({attempt}/{self.max_retries})")
                self._sleep(delay)
                continue

            if response.status_code != 200:
                raise ProviderError(self.name, f"HTTP {response.status_code}: {response.text[:200]}")
            break

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(response.content)
        logger.info(f"[TTS] Narration saved: {output_path.name}")
        return output_path
