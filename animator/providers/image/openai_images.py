"""
OpenAI image provider (gpt-image-1).
"""
import base64
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional

from openai import OpenAI, OpenAIError

from ..exceptions import MalformedResponse, ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)


class OpenAIImageProvider:
    """Image generation and reference-guided editing through the OpenAI Images API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-image-1",
        size: str = "1536x1024",
        quality: str = "medium",
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.size = size
        self.quality = quality
        if client is not None:
            self.client = client
        else:
            self.client = OpenAI(api_key=api_key) if api_key else None

    @property
    def name(self) -> str:
        return "openai-images"

    @property
    def is_available(self) -> bool:
        return self.client is not None

    def generate(self, prompt: str, output_path: Path) -> Path:
        """Generate an image from a prompt and write it as PNG."""
        if not self.is_available:
            raise ProviderUnavailable(self.name, "Missing OPENAI_API_KEY")

        logger.info(f"[IMAGE] Generating image: {prompt[:80].strip()}...")
        try:
            response = self.client.images.generate(
                model=self.model,
                prompt=prompt,
                size=self.size,
                quality=self.quality,
                n=1,
                moderation="low",
            )
        except OpenAIError as e:
            raise ProviderError(self.name, f"Image generation failed: {e}") from e

        return self._save(response, output_path)

    def edit_with_references(self, reference_paths: List[Path], prompt: str, output_path: Path) -> Path:
        """
        Generate an image guided by reference images.

        Falls back to plain generation if the edit call fails.
        """
        if not self.is_available:
            raise ProviderUnavailable(self.name, "Missing OPENAI_API_KEY")
        if not reference_paths:
            return self.generate(prompt, output_path)

        logger.info(f"[IMAGE] Generating image with {len(reference_paths)} reference images")
        try:
            with ExitStack() as stack:
                files = [stack.enter_context(open(p, "rb")) for p in reference_paths]
                response = self.client.images.edit(
                    model=self.model,
                    image=files,
                    prompt=prompt,
                    size=self.size,
                    quality=self.quality,
                )
            return self._save(response, output_path)
        except (OpenAIError, OSError, MalformedResponse) as e:
            logger.warning(f"[IMAGE] Reference edit failed ({e}), falling back to plain generation")
            return self.generate(prompt, output_path)

    def _save(self, response, output_path: Path) -> Path:
        data = response.data[0] if response.data else None
        if data is None or not data.b64_json:
            raise MalformedResponse(self.name, "No image payload in response")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(base64.b64decode(data.b64_json))
        logger.info(f"[IMAGE] Image saved: {output_path}")
        return output_path
