"""
Passthrough storage provider - fallback when no durable storage is configured.
"""
import logging
from typing import Optional

from .base import BaseStorageProvider

logger = logging.getLogger(__name__)


class PassthroughStorageProvider(BaseStorageProvider):
    """Returns the transient URL unchanged."""

    @property
    def name(self) -> str:
        return "passthrough"

    @property
    def is_available(self) -> bool:
        return True

    async def persist_video(
        self,
        transient_url: str,
        project_id: str,
        scene_id: Optional[str] = None,
    ) -> str:
        logger.debug(f"[STORAGE] No durable storage, keeping transient URL for project {project_id}")
        return transient_url

    async def persist_audio(
        self,
        transient_url: str,
        project_id: str,
        scene_id: Optional[str] = None,
    ) -> str:
        return transient_url
