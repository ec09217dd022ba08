"""
Providers Layer.

Provides unified access to external capabilities for:
- Video generation
- Music generation
- Voiceover/TTS
- Assembly/render
- Durable storage

Every provider reports whether it is configured through ``is_available``.
"""
from .exceptions import ProviderError, ProviderUnavailable

from .video import (
    BaseVideoProvider,
    VideoGenerationResult,
    ReplicateVideoProvider,
    get_video_provider,
)

from .music import (
    BaseMusicProvider,
    MusicGenerationResult,
    ReplicateMusicProvider,
    get_music_provider,
)

from .voice import (
    BaseVoiceProvider,
    VoiceoverGenerationResult,
    OpenAITTSProvider,
    get_voice_provider,
)

from .assembly import (
    BaseAssemblyProvider,
    ShotstackAssemblyProvider,
    get_assembly_provider,
)

from .storage import (
    BaseStorageProvider,
    SupabaseStorageProvider,
    PassthroughStorageProvider,
    StorageProviderFactory,
    get_storage_provider,
)

__all__ = [
    # Exceptions
    "ProviderError",
    "ProviderUnavailable",

    # Video
    "BaseVideoProvider",
    "VideoGenerationResult",
    "ReplicateVideoProvider",
    "get_video_provider",

    # Music
    "BaseMusicProvider",
    "MusicGenerationResult",
    "ReplicateMusicProvider",
    "get_music_provider",

    # Voice
    "BaseVoiceProvider",
    "VoiceoverGenerationResult",
    "OpenAITTSProvider",
    "get_voice_provider",

    # Assembly
    "BaseAssemblyProvider",
    "ShotstackAssemblyProvider",
    "get_assembly_provider",

    # Storage
    "BaseStorageProvider",
    "SupabaseStorageProvider",
    "PassthroughStorageProvider",
    "StorageProviderFactory",
    "get_storage_provider",
]
