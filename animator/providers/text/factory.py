"""
Structured text provider factory.
"""
from .openai_structured import OpenAIStructuredText


def get_text_provider() -> OpenAIStructuredText:
    """Get the configured structured-output text provider."""
    from ...config import config

    return OpenAIStructuredText(
        api_key=config.ai.openai_api_key if config.ai.has_openai else None,
        model=config.ai.openai_model,
    )
