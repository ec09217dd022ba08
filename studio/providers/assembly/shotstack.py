"""
Shotstack assembly provider.

API: https://api.shotstack.io/{v1|stage}
1. POST /render with an edit (timeline + output) -> render id
2. GET /render/{id} -> status / url
"""
import logging
from typing import Any, Dict, Optional

import httpx

from studio.assembly.models import (
    AssemblyStatus,
    RenderStatus,
    RenderSubmission,
    Timeline,
    TimelineClip,
)
from .base import BaseAssemblyProvider
from ..exceptions import ProviderUnavailable

logger = logging.getLogger(__name__)


SHOTSTACK_STATUS_MAP: Dict[str, RenderStatus] = {
    "queued": RenderStatus.QUEUED,
    "fetching": RenderStatus.QUEUED,
    "rendering": RenderStatus.RENDERING,
    "saving": RenderStatus.RENDERING,
    "done": RenderStatus.COMPLETED,
    "failed": RenderStatus.FAILED,
}

RESOLUTION_MAP = {
    "720p": "hd",
    "1080p": "fhd",
    "4k": "uhd",
}

TRANSITION_MAP = {
    "fade": "fade",
    "dissolve": "fade",
    "wipe": "wipeRight",
}

TITLE_STYLE_MAP = {
    "title": "future",
    "subtitle": "subtitle",
    "caption": "minimal",
}


def map_transition(transition_type: str) -> str:
    return TRANSITION_MAP.get(transition_type, "fade")


def map_resolution(resolution: str) -> str:
    return RESOLUTION_MAP.get(resolution, "fhd")


def _audio_effect(clip: TimelineClip) -> Optional[str]:
    if clip.fade_in and clip.fade_out:
        return "fadeInFadeOut"
    if clip.fade_in:
        return "fadeIn"
    if clip.fade_out:
        return "fadeOut"
    return None


def _clip_to_shotstack(clip: TimelineClip) -> Dict[str, Any]:
    asset: Dict[str, Any] = {"type": clip.asset_type}
    if clip.src:
        asset["src"] = clip.src
    if clip.asset_type == "title":
        asset["text"] = clip.text or ""
        asset["style"] = TITLE_STYLE_MAP.get(clip.style or "subtitle", "subtitle")
        if clip.position:
            asset["position"] = clip.position
        if clip.color:
            asset["color"] = clip.color
    if clip.volume is not None:
        asset["volume"] = clip.volume
    if clip.trim is not None:
        asset["trim"] = clip.trim
    if clip.asset_type == "audio":
        effect = _audio_effect(clip)
        if effect:
            asset["effect"] = effect

    result: Dict[str, Any] = {
        "asset": asset,
        "start": clip.start,
        "length": clip.length,
    }
    if clip.asset_type == "video":
        result["fit"] = "cover"

    transition: Dict[str, str] = {}
    if clip.transition_in:
        transition["in"] = map_transition(clip.transition_in)
    if clip.transition_out:
        transition["out"] = map_transition(clip.transition_out)
    if transition:
        result["transition"] = transition

    return result


def build_shotstack_edit(timeline: Timeline) -> Dict[str, Any]:
    """Translate a Timeline into a Shotstack edit document."""
    tracks = [
        {"clips": [_clip_to_shotstack(clip) for clip in track.clips]}
        for track in timeline.tracks
        if track.clips
    ]

    output: Dict[str, Any] = {
        "format": timeline.format,
        "resolution": map_resolution(timeline.resolution),
        "aspectRatio": timeline.aspect_ratio,
        "fps": timeline.fps,
    }
    if timeline.quality:
        output["quality"] = timeline.quality

    return {
        "timeline": {
            "tracks": tracks,
            "background": timeline.background,
        },
        "output": output,
    }


class ShotstackAssemblyProvider(BaseAssemblyProvider):
    """Cloud render through the Shotstack Edit API."""

    ENV_KEY = "SHOTSTACK_API_KEY"

    def __init__(
        self,
        api_key: Optional[str] = None,
        env: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        from studio.config import config
        self._api_key = api_key or config.keys.shotstack_api_key
        env = env or config.keys.shotstack_env
        self.base_url = "https://api.shotstack.io/stage" if env == "stage" else "https://api.shotstack.io/v1"
        self.client = client or httpx.AsyncClient(timeout=config.limits.render_request_timeout)

    @property
    def name(self) -> str:
        return "shotstack"

    @property
    def is_available(self) -> bool:
        return bool(self._api_key and not self._api_key.startswith("PASTE_"))

    def _get_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self._api_key or "",
            "Content-Type": "application/json",
        }

    async def submit(self, timeline: Timeline) -> RenderSubmission:
        if not self.is_available:
            raise ProviderUnavailable(self.name, self.ENV_KEY)

        edit = build_shotstack_edit(timeline)

        try:
            response = await self.client.post(
                f"{self.base_url}/render",
                headers=self._get_headers(),
                json=edit,
            )
        except httpx.TimeoutException:
            return RenderSubmission(success=False, error="Render request timed out")
        except httpx.HTTPError as e:
            return RenderSubmission(success=False, error=f"Render request failed: {e}")

        if response.status_code >= 400:
            logger.error(f"[SHOTSTACK] API error {response.status_code}: {response.text[:200]}")
            return RenderSubmission(success=False, error="Failed to start video assembly")

        result = response.json()
        render_id = (result.get("response") or {}).get("id")
        if not result.get("success") or not render_id:
            return RenderSubmission(success=False, error=result.get("message") or "Failed to queue render job")

        logger.info(f"[SHOTSTACK] Render queued: {render_id}")
        return RenderSubmission(success=True, render_id=render_id)

    async def poll(self, render_id: str) -> AssemblyStatus:
        if not self.is_available:
            return AssemblyStatus(status=RenderStatus.FAILED, error="Video assembly is not configured.")

        try:
            response = await self.client.get(
                f"{self.base_url}/render/{render_id}",
                headers={"x-api-key": self._api_key or ""},
            )
        except httpx.HTTPError as e:
            return AssemblyStatus(status=RenderStatus.FAILED, error=f"Failed to check status: {e}")

        if response.status_code >= 400:
            return AssemblyStatus(status=RenderStatus.FAILED, error="Failed to get render status")

        data = response.json().get("response") or {}
        status = RenderStatus.normalize(data.get("status"), SHOTSTACK_STATUS_MAP)

        return AssemblyStatus(
            status=status,
            progress=data.get("progress"),
            video_url=data.get("url"),
            error=data.get("error"),
        )

    async def close(self):
        await self.client.aclose()
