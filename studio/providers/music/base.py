"""
Base class for music generation providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class MusicGenerationResult:
    """Outcome of a music generation call."""
    success: bool
    audio_url: Optional[str] = None
    duration: Optional[float] = None
    prediction_id: Optional[str] = None
    error: Optional[str] = None


class BaseMusicProvider(ABC):
    """Abstract base class for background music providers."""

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
    async def generate(
        self,
        prompt: str,
        duration: float = 10,
        mood: Optional[str] = None,
        genre: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> MusicGenerationResult:
        """
        Generate a music track.

        Args:
            prompt: Music description
            duration: Requested length in seconds (providers cap this)
            mood: Optional mood hint
            genre: Optional genre hint
            project_id: Owning project (context only)

        Returns:
            MusicGenerationResult with the track URL or an error
        """
        pass
