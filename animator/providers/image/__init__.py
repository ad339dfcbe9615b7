"""
Image generation providers.
"""
from .openai_images import OpenAIImageProvider
from .factory import get_image_provider

__all__ = ["OpenAIImageProvider", "get_image_provider"]
