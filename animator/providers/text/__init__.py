"""
Structured text providers.
"""
from .openai_structured import OpenAIStructuredText
from .factory import get_text_provider

__all__ = ["OpenAIStructuredText", "get_text_provider"]
