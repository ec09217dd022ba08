"""
Music generation provider selection.
"""
from .base import BaseMusicProvider
from .replicate import ReplicateMusicProvider


def get_music_provider() -> BaseMusicProvider:
    """Get the configured music generation provider; check ``is_available`` before use."""
    return ReplicateMusicProvider()
