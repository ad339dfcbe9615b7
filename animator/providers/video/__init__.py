"""
Image-to-video providers and the fallback engine.
"""
from .base import (
    BaseVideoProvider,
    CameraControl,
    PollingVideoProvider,
    SyncVideoProvider,
    VideoRequest,
    VideoResult,
    image_to_data_url,
)
from .polling import TaskPoller, TaskState, TaskStatus
from .kling import KlingVideoProvider
from .replicate import ReplicateVideoProvider
from .engine import ProviderFallbackEngine, Strategy, camera_control_for
from .download import download_video
from .factory import VideoProviderFactory, get_video_engine

__all__ = [
    "BaseVideoProvider",
    "CameraControl",
    "PollingVideoProvider",
    "SyncVideoProvider",
    "VideoRequest",
    "VideoResult",
    "image_to_data_url",
    "TaskPoller",
    "TaskState",
    "TaskStatus",
    "KlingVideoProvider",
    "ReplicateVideoProvider",
    "ProviderFallbackEngine",
    "Strategy",
    "camera_control_for",
    "download_video",
    "VideoProviderFactory",
    "get_video_engine",
]
