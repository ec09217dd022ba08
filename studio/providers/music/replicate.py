"""
Replicate music provider (MusicGen stereo-large).
"""
import logging
from typing import Optional

import httpx

from .base import BaseMusicProvider, MusicGenerationResult
from ..exceptions import ProviderError, ProviderUnavailable
from ..replicate import ReplicateClient

logger = logging.getLogger(__name__)


class ReplicateMusicProvider(BaseMusicProvider):
    """Background music through Replicate MusicGen."""

    MODEL_VERSION = "b05b1dff1d8c6dc63d14b0cdb42135378dcb87f6373b0d3d341ede46e59e2b38"
    MIN_DURATION = 5
    MAX_DURATION = 30
    MAX_WAIT = 90.0

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
        self._max_wait = max_wait if max_wait is not None else self.MAX_WAIT
        self._replicate = ReplicateClient(
            self._api_token or "",
            client=client,
            request_timeout=limits.generation_request_timeout,
            poll_interval=poll_interval if poll_interval is not None else limits.generation_poll_interval_seconds,
        )

    @property
    def name(self) -> str:
        return "replicate-music"

    @property
    def is_available(self) -> bool:
        return bool(self._api_token and not self._api_token.startswith("PASTE_"))

    def _clamp_duration(self, duration: float) -> int:
        try:
            seconds = int(duration) or 10
        except (TypeError, ValueError):
            seconds = 10
        return min(self.MAX_DURATION, max(self.MIN_DURATION, seconds))

    async def generate(
        self,
        prompt: str,
        duration: float = 10,
        mood: Optional[str] = None,
        genre: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> MusicGenerationResult:
        if not self.is_available:
            raise ProviderUnavailable(self.name, "REPLICATE_API_TOKEN")

        seconds = self._clamp_duration(duration)

        enhanced_prompt = prompt.strip()
        if genre:
            enhanced_prompt += f", {genre} genre"
        if mood:
            enhanced_prompt += f", {mood} mood"

        model_input = {
            "prompt": enhanced_prompt,
            "duration": seconds,
            "model_version": "stereo-large",
            "output_format": "mp3",
            "normalization_strategy": "loudness",
        }

        try:
            prediction = await self._replicate.create_prediction(self.MODEL_VERSION, model_input)
            logger.info(f"[REPLICATE] Music prediction created: {prediction.get('id')}")
            final = await self._replicate.wait_for(prediction["id"], self._max_wait)
        except ProviderError as e:
            return MusicGenerationResult(success=False, error=e.message)
        except httpx.TimeoutException:
            return MusicGenerationResult(success=False, error="Music generation request timed out")
        except httpx.HTTPError as e:
            return MusicGenerationResult(success=False, error=str(e))

        status = final.get("status")
        audio_url = ReplicateClient.output_url(final)

        if status == "succeeded" and audio_url:
            return MusicGenerationResult(
                success=True,
                audio_url=audio_url,
                duration=seconds,
                prediction_id=final.get("id"),
            )
        if status in ("failed", "canceled"):
            return MusicGenerationResult(
                success=False,
                prediction_id=final.get("id"),
                error=final.get("error") or "Music generation failed",
            )
        return MusicGenerationResult(
            success=False,
            prediction_id=final.get("id"),
            error="Music generation did not finish in time",
        )

    async def close(self):
        await self._replicate.close()
