"""
Voice/TTS providers.
"""
from .base import BaseVoiceProvider
from .elevenlabs import ElevenLabsVoiceProvider
from .factory import get_voice_provider

__all__ = [
    "BaseVoiceProvider",
    "ElevenLabsVoiceProvider",
    "get_voice_provider",
]
