"""
Video provider factory.
"""
from typing import List, Literal

from .base import BaseVideoProvider
from .engine import ProviderFallbackEngine
from .kling import KlingVideoProvider
from .replicate import ReplicateVideoProvider


ProviderType = Literal["replicate", "kling"]

# Replicate first, direct Kling API as fallback
DEFAULT_ORDER: List[ProviderType] = ["replicate", "kling"]


class VideoProviderFactory:
    """Builds configured video providers from the application config."""

    @classmethod
    def create(cls, provider: ProviderType) -> BaseVideoProvider:
        from ...config import config

        gen = config.generation
        if provider == "replicate":
            return ReplicateVideoProvider(
                api_token=config.ai.replicate_api_token if config.ai.has_replicate else None,
                timeout=gen.http_timeout,
                poll_interval=gen.poll_interval,
                max_poll_attempts=gen.max_poll_attempts,
                poll_error_backoff_cap=gen.poll_error_backoff_cap,
            )
        if provider == "kling":
            has_kling = config.ai.has_kling
            return KlingVideoProvider(
                access_key=config.ai.kling_access_key if has_kling else None,
                secret_key=config.ai.kling_secret_key if has_kling else None,
                timeout=gen.http_timeout,
                request_retries=gen.request_retries,
                request_backoff_base=gen.request_backoff_base,
                poll_interval=gen.poll_interval,
                max_poll_attempts=gen.max_poll_attempts,
                poll_error_backoff_cap=gen.poll_error_backoff_cap,
            )
        raise ValueError(f"Unknown video provider: {provider}")


def get_video_engine(order: List[ProviderType] = None) -> ProviderFallbackEngine:
    """Get the fallback engine over all known video providers."""
    from ...config import config

    providers = [VideoProviderFactory.create(name) for name in (order or DEFAULT_ORDER)]
    return ProviderFallbackEngine(
        providers,
        strategy_attempts=config.generation.strategy_attempts,
        backoff_base=config.generation.strategy_backoff_base,
    )
