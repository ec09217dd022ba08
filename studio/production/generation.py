"""
Generation stage: video per shot, then optional music and voiceover.

Units run one at a time in planning order. A failed unit is recorded and
the stage moves on; only cancellation escapes. With a storage provider,
each generated clip and the music track are copied to durable storage;
a failed copy keeps the provider's transient URL.
"""
import logging
import warnings
from dataclasses import dataclass, field
from typing import Awaitable, List, Optional, TypeVar

from studio.providers.video.base import BaseVideoProvider
from studio.providers.music.base import BaseMusicProvider
from studio.providers.voice.base import BaseVoiceProvider
from studio.providers.storage.base import BaseStorageProvider

from .context import CancellationToken
from .cost import CREDITS_PER_SHOT, MUSIC_CREDITS, CostBreakdown, voiceover_credits
from .enums import ProductionStage
from .exceptions import PersistenceWarning, ProductionCancelled, UnitGenerationError
from .models import AudioAsset, ClipAsset, GeneratedShot, ProductionAssets, ProductionRequest
from .progress import ProgressReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_MUSIC_SECONDS = 30.0


@dataclass
class GenerationOutcome:
    assets: ProductionAssets = field(default_factory=ProductionAssets)
    credits: CostBreakdown = field(default_factory=CostBreakdown)
    errors: List[str] = field(default_factory=list)

    @property
    def credits_used(self) -> int:
        return self.credits.total


class GenerationCoordinator:
    """Drives the video, music and voice providers for one run."""

    def __init__(
        self,
        video: BaseVideoProvider,
        music: Optional[BaseMusicProvider] = None,
        voice: Optional[BaseVoiceProvider] = None,
        storage: Optional[BaseStorageProvider] = None,
    ):
        self.video = video
        self.music = music
        self.voice = voice
        self.storage = storage

    async def _persist(
        self,
        kind: str,
        awaitable: Awaitable[str],
        transient_url: str,
        token: Optional[CancellationToken],
    ) -> str:
        try:
            if token is not None:
                return await token.guard(awaitable)
            return await awaitable
        except ProductionCancelled:
            raise
        except Exception as e:
            message = f"Failed to persist {kind}, keeping transient URL: {e}"
            logger.warning(f"[PRODUCTION] {message}")
            warnings.warn(message, PersistenceWarning, stacklevel=2)
            return transient_url

    async def persist_clip(
        self,
        request: ProductionRequest,
        shot: GeneratedShot,
        video_url: str,
        token: Optional[CancellationToken] = None,
    ) -> str:
        if self.storage is None:
            return video_url
        return await self._persist(
            f"clip {shot.id}",
            self.storage.persist_video(video_url, request.project_id, shot.scene_id),
            video_url,
            token,
        )

    async def persist_music(
        self,
        request: ProductionRequest,
        audio_url: str,
        token: Optional[CancellationToken] = None,
    ) -> str:
        if self.storage is None:
            return audio_url
        return await self._persist(
            "music track",
            self.storage.persist_audio(audio_url, request.project_id),
            audio_url,
            token,
        )

    async def _call(self, unit: str, awaitable: Awaitable[T], token: Optional[CancellationToken]) -> T:
        try:
            if token is not None:
                return await token.guard(awaitable)
            return await awaitable
        except ProductionCancelled:
            raise
        except Exception as e:
            raise UnitGenerationError(unit, str(e)) from e

    def _record_error(self, outcome: GenerationOutcome, reporter: ProgressReporter, message: str) -> None:
        logger.error(f"[PRODUCTION] {message}")
        outcome.errors.append(message)
        reporter.add_error(message)

    async def generate(
        self,
        request: ProductionRequest,
        shots: List[GeneratedShot],
        reporter: ProgressReporter,
        token: Optional[CancellationToken] = None,
        outcome: Optional[GenerationOutcome] = None,
    ) -> GenerationOutcome:
        """
        Run every unit for the planned shots.

        Pass ``outcome`` to keep partial results visible to the caller if the
        run is cancelled midway.
        """
        if outcome is None:
            outcome = GenerationOutcome()

        await self.generate_videos(request, shots, outcome, reporter, token)

        if request.wants_music and self.music is not None:
            await self.generate_music(request, shots, outcome, reporter, token)

        if request.wants_voiceover and self.voice is not None:
            await self.generate_voiceover(request, outcome, reporter, token)

        return outcome

    async def generate_videos(
        self,
        request: ProductionRequest,
        shots: List[GeneratedShot],
        outcome: GenerationOutcome,
        reporter: ProgressReporter,
        token: Optional[CancellationToken] = None,
    ) -> None:
        total = len(shots)
        aspect_ratio = request.settings.generation_preferences.video_aspect_ratio

        for completed, shot in enumerate(shots):
            if token is not None:
                token.check()

            reporter.update(
                ProductionStage.GENERATING_VIDEO,
                20 + (completed / total) * 40,
                f"Generating video {completed + 1}/{total}: {shot.description[:50]}...",
            )

            try:
                result = await self._call(
                    shot.id,
                    self.video.generate(
                        prompt=shot.description,
                        duration="short",
                        aspect_ratio=aspect_ratio,
                        project_id=request.project_id,
                        scene_id=shot.scene_id,
                    ),
                    token,
                )
                error = result.error
                video_url = result.video_url if result.success else None
            except UnitGenerationError as e:
                error = e.message
                video_url = None

            if video_url:
                video_url = await self.persist_clip(request, shot, video_url, token)
                shot.attach_video(video_url)
                outcome.assets.video_clips.append(
                    ClipAsset(scene_id=shot.scene_id, url=video_url, duration=shot.duration)
                )
                outcome.credits.video += CREDITS_PER_SHOT
            else:
                self._record_error(outcome, reporter, f"Failed to generate video for shot {shot.id}: {error}")

        reporter.update(ProductionStage.GENERATING_VIDEO, 60, "Video clips generated", "Video generation")
        logger.info(f"[PRODUCTION] Generated {len(outcome.assets.video_clips)}/{total} clips")

    async def generate_music(
        self,
        request: ProductionRequest,
        shots: List[GeneratedShot],
        outcome: GenerationOutcome,
        reporter: ProgressReporter,
        token: Optional[CancellationToken] = None,
    ) -> None:
        if token is not None:
            token.check()
        reporter.update(ProductionStage.GENERATING_MUSIC, 65, "Generating background music...")

        prefs = request.settings.generation_preferences
        total_seconds = sum(shot.duration for shot in shots)
        mood = prefs.music_mood or request.genre or "cinematic"

        try:
            result = await self._call(
                "music",
                self.music.generate(
                    prompt=f"{mood} background music for {request.genre or 'film'} scene",
                    duration=min(MAX_MUSIC_SECONDS, total_seconds),
                    mood=mood,
                    genre=prefs.music_genre or "cinematic",
                    project_id=request.project_id,
                ),
                token,
            )
            error = result.error
            audio_url = result.audio_url if result.success else None
        except UnitGenerationError as e:
            error = e.message
            audio_url = None

        if audio_url:
            audio_url = await self.persist_music(request, audio_url, token)
            outcome.assets.music_track = AudioAsset(url=audio_url, duration=result.duration or MAX_MUSIC_SECONDS)
            outcome.credits.music += MUSIC_CREDITS
        else:
            self._record_error(outcome, reporter, f"Failed to generate music: {error}")

        reporter.update(ProductionStage.GENERATING_MUSIC, 70, "Background music generated", "Music generation")

    async def generate_voiceover(
        self,
        request: ProductionRequest,
        outcome: GenerationOutcome,
        reporter: ProgressReporter,
        token: Optional[CancellationToken] = None,
    ) -> None:
        text = ". ".join(request.dialogue_lines())
        if not text:
            return

        if token is not None:
            token.check()
        reporter.update(ProductionStage.GENERATING_VOICEOVER, 75, "Generating voiceover...")

        try:
            result = await self._call(
                "voiceover",
                self.voice.synthesize(
                    text=text,
                    voice=request.settings.audio_preferences.default_voice or "nova",
                    model="tts-1",
                    speed=1.0,
                    project_id=request.project_id,
                ),
                token,
            )
            error = result.error
            audio_url = result.audio_url if result.success else None
        except UnitGenerationError as e:
            error = e.message
            audio_url = None

        if audio_url:
            outcome.assets.voiceover_track = AudioAsset(url=audio_url, duration=result.duration or 0)
            outcome.credits.voiceover += voiceover_credits(len(text))
        else:
            self._record_error(outcome, reporter, f"Failed to generate voiceover: {error}")

        reporter.update(ProductionStage.GENERATING_VOICEOVER, 80, "Voiceover generated", "Voiceover generation")
