"""
Base class for video generation providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Optional


VideoDuration = Literal["short", "long"]
AspectRatio = Literal["16:9", "9:16", "1:1"]


@dataclass
class VideoGenerationResult:
    """Outcome of a single video generation call."""
    success: bool
    video_url: Optional[str] = None
    prediction_id: Optional[str] = None
    error: Optional[str] = None


class BaseVideoProvider(ABC):
    """Abstract base class for text-to-video providers."""

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
        duration: VideoDuration = "short",
        aspect_ratio: AspectRatio = "16:9",
        project_id: Optional[str] = None,
        scene_id: Optional[str] = None,
    ) -> VideoGenerationResult:
        """
        Generate a video clip from a prompt.

        Args:
            prompt: Visual description of the shot
            duration: Duration class ('short' or 'long')
            aspect_ratio: Output aspect ratio
            project_id: Owning project (context only)
            scene_id: Owning scene (context only)

        Returns:
            VideoGenerationResult with the clip URL or an error
        """
        pass
