"""
Voice provider factory.
"""
from .base import BaseVoiceProvider
from .elevenlabs import ElevenLabsVoiceProvider


def get_voice_provider() -> BaseVoiceProvider:
    """
    Get the configured voice provider.

    A provider without credentials is still returned; callers treat its
    ProviderUnavailable as "no narration" for the scene.
    """
    from ...config import config

    return ElevenLabsVoiceProvider(
        api_key=config.ai.elevenlabs_api_key if config.ai.has_elevenlabs else None,
        timeout=config.generation.http_timeout,
    )
