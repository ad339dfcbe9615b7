"""
Provider exceptions.
"""


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"[{provider}] {message}")


class ProviderUnavailable(ProviderError):
    """Provider is not available (missing API key, etc.)."""

    def __init__(self, provider: str, reason: str = "unavailable"):
        super().__init__(provider, f"Provider unavailable: {reason}")
        self.reason = reason


class ProviderTaskFailed(ProviderError):
    """Remote generation task reported a failure."""

    def __init__(self, provider: str, reason: str):
        super().__init__(provider, f"Task failed: {reason}")
        self.reason = reason


class ProviderTimeout(ProviderError):
    """Polling gave up before the remote task finished."""

    def __init__(self, provider: str, attempts: int):
        super().__init__(provider, f"Task timed out after {attempts} poll attempts")
        self.attempts = attempts


class MalformedResponse(ProviderError):
    """Provider answered with a payload we cannot interpret."""
    pass
