"""
Base class for voice/TTS providers.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict


class BaseVoiceProvider(ABC):
    """Abstract base class for voice/TTS providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available."""
        pass

    @abstractmethod
    def synthesize(self, text: str, voice_id: str, voice_settings: Dict[str, Any], output_path: Path) -> Path:
        """
        Synthesize speech from text.

        Args:
            text: Narration text
            voice_id: Provider voice identifier
            voice_settings: Provider-specific delivery settings
            output_path: Where to write the audio (MP3)

        Returns:
            Path to generated audio file

        Raises:
            ProviderUnavailable: when credentials are missing
            ProviderError: when synthesis fails
        """
        pass
