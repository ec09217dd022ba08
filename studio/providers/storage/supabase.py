"""
Supabase Storage provider.

Downloads a transient provider URL and uploads it to a public bucket so
the asset outlives the provider's expiry window.
"""
import logging
import uuid
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

import httpx

from .base import BaseStorageProvider
from ..exceptions import ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)


class SupabaseStorageProvider(BaseStorageProvider):
    """Supabase Storage REST API provider."""

    VIDEO_BUCKET = "videos"
    AUDIO_BUCKET = "audio"
    DOWNLOAD_TIMEOUT = 60.0

    VIDEO_EXTENSIONS = {
        "video/mp4": "mp4",
        "video/webm": "webm",
        "video/quicktime": "mov",
    }
    AUDIO_EXTENSIONS = {
        "audio/mpeg": "mp3",
        "audio/mp3": "mp3",
        "audio/wav": "wav",
        "audio/x-wav": "wav",
        "audio/mp4": "m4a",
    }

    def __init__(
        self,
        url: Optional[str] = None,
        service_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        from studio.config import config
        self._url = (url or config.keys.supabase_url or "").rstrip("/")
        self._key = service_key or config.keys.supabase_service_key or ""
        self._client = client or httpx.AsyncClient(timeout=self.DOWNLOAD_TIMEOUT)

    @property
    def name(self) -> str:
        return "supabase"

    @property
    def is_available(self) -> bool:
        return bool(self._url and self._key and not self._key.startswith("PASTE_"))

    def _headers(self, content_type: str) -> dict:
        return {
            "Authorization": f"Bearer {self._key}",
            "apikey": self._key,
            "Content-Type": content_type,
            "cache-control": "31536000",
            "x-upsert": "false",
        }

    async def persist_video(
        self,
        transient_url: str,
        project_id: str,
        scene_id: Optional[str] = None,
    ) -> str:
        return await self._persist(
            transient_url, project_id, scene_id, self.VIDEO_BUCKET, self.VIDEO_EXTENSIONS, "mp4",
        )

    async def persist_audio(
        self,
        transient_url: str,
        project_id: str,
        scene_id: Optional[str] = None,
    ) -> str:
        return await self._persist(
            transient_url, project_id, scene_id, self.AUDIO_BUCKET, self.AUDIO_EXTENSIONS, "mp3",
        )

    async def _download(self, transient_url: str) -> Tuple[bytes, str]:
        if urlparse(transient_url).scheme != "https":
            raise ProviderError(self.name, "Only HTTPS URLs can be persisted")

        try:
            response = await self._client.get(transient_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.name, f"Failed to download media: {e}", status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(self.name, f"Failed to download media: {e}") from e

        content_type = response.headers.get("content-type", "application/octet-stream")
        return response.content, content_type.split(";")[0].strip()

    async def _persist(
        self,
        transient_url: str,
        project_id: str,
        scene_id: Optional[str],
        bucket: str,
        extensions: Dict[str, str],
        default_extension: str,
    ) -> str:
        if not self.is_available:
            raise ProviderUnavailable(self.name, "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")

        content, content_type = await self._download(transient_url)
        if content_type not in extensions:
            logger.warning(f"[STORAGE] Unexpected content type '{content_type}' for bucket '{bucket}'")

        extension = extensions.get(content_type, default_extension)
        media_id = uuid.uuid4().hex
        path = (
            f"{project_id}/{scene_id}/{media_id}.{extension}"
            if scene_id
            else f"{project_id}/{media_id}.{extension}"
        )

        try:
            upload = await self._client.post(
                f"{self._url}/storage/v1/object/{bucket}/{path}",
                headers=self._headers(content_type),
                content=content,
            )
            upload.raise_for_status()
        except httpx.HTTPError as e:
            raise ProviderError(self.name, f"Failed to upload to '{bucket}': {e}") from e

        public_url = f"{self._url}/storage/v1/object/public/{bucket}/{path}"
        logger.info(f"[STORAGE] Persisted to {bucket}: {public_url}")
        return public_url

    async def close(self):
        await self._client.aclose()
