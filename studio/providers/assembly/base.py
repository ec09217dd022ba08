"""
Base class for assembly/render providers.
"""
from abc import ABC, abstractmethod

from studio.assembly.models import AssemblyStatus, RenderSubmission, Timeline


class BaseAssemblyProvider(ABC):
    """Abstract base class for cloud render providers."""

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
    async def submit(self, timeline: Timeline) -> RenderSubmission:
        """
        Queue a render job for the timeline.

        Returns:
            RenderSubmission carrying the provider render id
        """
        pass

    @abstractmethod
    async def poll(self, render_id: str) -> AssemblyStatus:
        """
        Fetch the current state of a render job.

        Implementations normalize their native vocabulary into RenderStatus.
        """
        pass
