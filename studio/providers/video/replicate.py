"""
Replicate video provider (Zeroscope text-to-video).
"""
import logging
from typing import Optional

import httpx

from .base import AspectRatio, BaseVideoProvider, VideoDuration, VideoGenerationResult
from ..exceptions import ProviderError, ProviderUnavailable
from ..replicate import ReplicateClient

logger = logging.getLogger(__name__)


class ReplicateVideoProvider(BaseVideoProvider):
    """Text-to-video through Replicate predictions."""

    MODEL_VERSION = "9f747673945c62801b13b84701c783929c0ee784e4748ec062204894dda1a351"
    NEGATIVE_PROMPT = "blurry, low quality, distorted, watermark"

    DIMENSIONS = {
        "16:9": (1024, 576),
        "9:16": (576, 1024),
        "1:1": (768, 768),
    }

    def __init__(
        self,
        api_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        max_wait: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ):
        from studio.config import config
        limits = config.limits
        self._api_token = api_token or config.keys.replicate_api_token
        self._max_wait = max_wait if max_wait is not None else limits.generation_max_poll_seconds
        self._replicate = ReplicateClient(
            self._api_token or "",
            client=client,
            request_timeout=limits.generation_request_timeout,
            poll_interval=poll_interval if poll_interval is not None else limits.generation_poll_interval_seconds,
        )

    @property
    def name(self) -> str:
        return "replicate-video"

    @property
    def is_available(self) -> bool:
        return bool(self._api_token and not self._api_token.startswith("PASTE_"))

    async def generate(
        self,
        prompt: str,
        duration: VideoDuration = "short",
        aspect_ratio: AspectRatio = "16:9",
        project_id: Optional[str] = None,
        scene_id: Optional[str] = None,
    ) -> VideoGenerationResult:
        if not self.is_available:
            raise ProviderUnavailable(self.name, "REPLICATE_API_TOKEN")

        width, height = self.DIMENSIONS.get(aspect_ratio, self.DIMENSIONS["16:9"])
        model_input = {
            "prompt": prompt.strip(),
            "negative_prompt": self.NEGATIVE_PROMPT,
            "num_frames": 48 if duration == "long" else 24,
            "width": width,
            "height": height,
            "fps": 8,
        }

        try:
            prediction = await self._replicate.create_prediction(self.MODEL_VERSION, model_input)
            logger.info(f"[REPLICATE] Video prediction created: {prediction.get('id')}")
            final = await self._replicate.wait_for(prediction["id"], self._max_wait)
        except ProviderError as e:
            return VideoGenerationResult(success=False, error=e.message)
        except httpx.TimeoutException:
            return VideoGenerationResult(success=False, error="Video generation request timed out")
        except httpx.HTTPError as e:
            return VideoGenerationResult(success=False, error=str(e))

        status = final.get("status")
        video_url = ReplicateClient.output_url(final)

        if status == "succeeded" and video_url:
            return VideoGenerationResult(success=True, video_url=video_url, prediction_id=final.get("id"))
        if status in ("failed", "canceled"):
            return VideoGenerationResult(
                success=False,
                prediction_id=final.get("id"),
                error=final.get("error") or "Video generation failed",
            )
        return VideoGenerationResult(
            success=False,
            prediction_id=final.get("id"),
            error="Video generation did not finish in time",
        )

    async def close(self):
        await self._replicate.close()
