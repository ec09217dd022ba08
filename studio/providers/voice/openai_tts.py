"""
OpenAI TTS voice provider.
"""
import base64
import logging
from typing import Optional

from openai import APIError, APITimeoutError, AsyncOpenAI

from .base import BaseVoiceProvider, VoiceoverGenerationResult
from ..exceptions import ProviderUnavailable

logger = logging.getLogger(__name__)


class OpenAITTSProvider(BaseVoiceProvider):
    """OpenAI speech API provider. Returns audio as a base64 data URL."""

    ENV_KEY = "OPENAI_API_KEY"
    VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
    MAX_CHARS = 4096
    CHARS_PER_MINUTE = 750  # ~150 words/min at ~5 chars/word

    def __init__(self, api_key: Optional[str] = None, client: Optional[AsyncOpenAI] = None):
        from studio.config import config
        self._api_key = api_key or config.keys.openai_api_key
        self._client = client
        self._timeout = config.limits.tts_request_timeout

    @property
    def name(self) -> str:
        return "openai-tts"

    @property
    def is_available(self) -> bool:
        return bool(self._api_key and not self._api_key.startswith("PASTE_"))

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    @classmethod
    def estimate_duration(cls, text: str, speed: float = 1.0) -> float:
        return round((len(text) / cls.CHARS_PER_MINUTE) * 60 / speed)

    async def synthesize(
        self,
        text: str,
        voice: str = "nova",
        model: str = "tts-1",
        speed: float = 1.0,
        project_id: Optional[str] = None,
    ) -> VoiceoverGenerationResult:
        if not self.is_available:
            raise ProviderUnavailable(self.name, self.ENV_KEY)

        trimmed = text.strip()
        if not trimmed:
            return VoiceoverGenerationResult(success=False, error="Text is required for voiceover generation")
        if len(trimmed) > self.MAX_CHARS:
            return VoiceoverGenerationResult(
                success=False,
                error=f"Text exceeds maximum length of {self.MAX_CHARS} characters",
            )

        if voice not in self.VOICES:
            voice = "nova"
        speed = min(4.0, max(0.25, float(speed or 1.0)))

        try:
            response = await self._get_client().audio.speech.create(
                model=model,
                voice=voice,
                input=trimmed,
                response_format="mp3",
                speed=speed,
            )
        except APITimeoutError:
            return VoiceoverGenerationResult(success=False, error="Voiceover request timed out")
        except APIError as e:
            logger.error(f"[TTS] OpenAI speech API error: {e}")
            return VoiceoverGenerationResult(success=False, error=e.message or "Failed to generate voiceover")

        audio_url = "data:audio/mpeg;base64," + base64.b64encode(response.content).decode("ascii")
        duration = self.estimate_duration(trimmed, speed)
        logger.info(f"[TTS] Voiceover generated: {len(trimmed)} chars, ~{duration}s")

        return VoiceoverGenerationResult(success=True, audio_url=audio_url, duration=duration)

    async def close(self):
        if self._client is not None:
            await self._client.close()
