"""
Base class for durable asset storage.
"""
from abc import ABC, abstractmethod
from typing import Optional


class BaseStorageProvider(ABC):
    """Copies transient provider URLs into durable storage."""

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
    async def persist_video(
        self,
        transient_url: str,
        project_id: str,
        scene_id: Optional[str] = None,
    ) -> str:
        """
        Persist a rendered video and return its durable URL.

        Raises:
            ProviderError: If the download or upload fails
        """
        pass

    @abstractmethod
    async def persist_audio(
        self,
        transient_url: str,
        project_id: str,
        scene_id: Optional[str] = None,
    ) -> str:
        """
        Persist a generated audio track (music) and return its durable URL.

        Raises:
            ProviderError: If the download or upload fails
        """
        pass
