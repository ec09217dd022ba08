"""
Music generation providers.
"""
from .base import BaseMusicProvider, MusicGenerationResult
from .replicate import ReplicateMusicProvider
from .factory import get_music_provider

__all__ = [
    "BaseMusicProvider",
    "MusicGenerationResult",
    "ReplicateMusicProvider",
    "get_music_provider",
]
