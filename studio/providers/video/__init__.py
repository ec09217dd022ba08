"""
Video generation providers.
"""
from .base import BaseVideoProvider, VideoGenerationResult
from .replicate import ReplicateVideoProvider
from .factory import get_video_provider

__all__ = [
    "BaseVideoProvider",
    "VideoGenerationResult",
    "ReplicateVideoProvider",
    "get_video_provider",
]
