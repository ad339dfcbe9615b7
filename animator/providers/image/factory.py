"""
Image provider factory.
"""
from .openai_images import OpenAIImageProvider


def get_image_provider() -> OpenAIImageProvider:
    """Get the configured image provider."""
    from ...config import config

    return OpenAIImageProvider(
        api_key=config.ai.openai_api_key if config.ai.has_openai else None,
        model=config.ai.openai_image_model,
    )
