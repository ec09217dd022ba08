"""
Video generation provider selection.
"""
from .base import BaseVideoProvider
from .replicate import ReplicateVideoProvider


def get_video_provider() -> BaseVideoProvider:
    """Get the configured video generation provider; check ``is_available`` before use."""
    return ReplicateVideoProvider()
