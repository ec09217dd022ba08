"""
Voiceover provider selection.
"""
from .base import BaseVoiceProvider
from .openai_tts import OpenAITTSProvider


def get_voice_provider() -> BaseVoiceProvider:
    """Get the configured voiceover provider; check ``is_available`` before use."""
    return OpenAITTSProvider()
