"""
Providers Layer.

Unified access to the external generation services:
- Structured text (story, country context, motion)
- Images (character masters, scene stills)
- Video (image-to-video with layered fallback)
- Voice/TTS (scene narration)
"""
from .exceptions import (
    ProviderError,
    ProviderUnavailable,
    ProviderTaskFailed,
    ProviderTimeout,
    MalformedResponse,
)

from .text import OpenAIStructuredText, get_text_provider
from .image import OpenAIImageProvider, get_image_provider

from .video import (
    BaseVideoProvider,
    SyncVideoProvider,
    PollingVideoProvider,
    VideoRequest,
    VideoResult,
    TaskPoller,
    TaskState,
    TaskStatus,
    KlingVideoProvider,
    ReplicateVideoProvider,
    ProviderFallbackEngine,
    download_video,
    get_video_engine,
)

from .voice import BaseVoiceProvider, ElevenLabsVoiceProvider, get_voice_provider

__all__ = [
    # Exceptions
    "ProviderError",
    "ProviderUnavailable",
    "ProviderTaskFailed",
    "ProviderTimeout",
    "MalformedResponse",

    # Text
    "OpenAIStructuredText",
    "get_text_provider",

    # Image
    "OpenAIImageProvider",
    "get_image_provider",

    # Video
    "BaseVideoProvider",
    "SyncVideoProvider",
    "PollingVideoProvider",
    "VideoRequest",
    "VideoResult",
    "TaskPoller",
    "TaskState",
    "TaskStatus",
    "KlingVideoProvider",
    "ReplicateVideoProvider",
    "ProviderFallbackEngine",
    "download_video",
    "get_video_engine",

    # Voice
    "BaseVoiceProvider",
    "ElevenLabsVoiceProvider",
    "get_voice_provider",
]
