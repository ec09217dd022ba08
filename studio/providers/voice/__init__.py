"""
Voice/TTS providers.
"""
from .base import BaseVoiceProvider, VoiceoverGenerationResult
from .openai_tts import OpenAITTSProvider
from .factory import get_voice_provider

__all__ = [
    "BaseVoiceProvider",
    "VoiceoverGenerationResult",
    "OpenAITTSProvider",
    "get_voice_provider",
]
