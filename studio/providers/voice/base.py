"""
Base class for voiceover/TTS providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class VoiceoverGenerationResult:
    """Outcome of a voiceover call."""
    success: bool
    audio_url: Optional[str] = None
    duration: Optional[float] = None
    error: Optional[str] = None


class BaseVoiceProvider(ABC):
    """Abstract base class for voice/TTS providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available."""
        pass

    @abstractmethod
    async def synthesize(
        self,
        text: str,
        voice: str = "nova",
        model: str = "tts-1",
        speed: float = 1.0,
        project_id: Optional[str] = None,
    ) -> VoiceoverGenerationResult:
        """
        Synthesize speech from text.

        Args:
            text: Text to synthesize
            voice: Voice identifier
            model: TTS model identifier
            speed: Playback speed multiplier
            project_id: Owning project (context only)

        Returns:
            VoiceoverGenerationResult with the audio URL or an error
        """
        pass
