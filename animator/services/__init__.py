"""
Services Module - story generation, mood tables and delivery helpers.
"""
from .story_service import StoryService
from .storage import LocalDurableStorage
from .webhook import notify_webhook

__all__ = [
    "StoryService",
    "LocalDurableStorage",
    "notify_webhook",
]
