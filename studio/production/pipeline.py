"""
Single-run production pipeline.

Flow:
1. Check that every required provider is configured
2. Prepare scenes (explicit, or synthesized from the prompt)
3. Estimate credits
4. Plan shots
5. Generate video per shot, then music and voiceover
6. Assemble the final video
"""
import logging
from typing import List, Optional

from studio.assembly.coordinator import AssemblyCoordinator
from studio.assembly.models import AssemblyOptions, AudioTrack, VideoClip
from studio.providers.assembly import get_assembly_provider
from studio.providers.music import BaseMusicProvider, get_music_provider
from studio.providers.storage import BaseStorageProvider, get_storage_provider
from studio.providers.video import BaseVideoProvider, get_video_provider
from studio.providers.voice import BaseVoiceProvider, get_voice_provider

from .context import CancellationToken
from .cost import CreditEstimate, estimate_production_credits
from .enums import ProductionStage
from .exceptions import (
    ConfigurationError,
    ProductionCancelled,
    ProductionError,
    ValidationError,
)
from .generation import GenerationCoordinator, GenerationOutcome
from .models import (
    AssemblyPreferences,
    AudioPreferences,
    GeneratedShot,
    ProductionAssets,
    ProductionRequest,
    ProductionResult,
    ProductionSettings,
    SceneInput,
)
from .planner import normalize_target_duration, plan_shots, scenes_from_prompt
from .progress import ProgressObserver, ProgressReporter

logger = logging.getLogger(__name__)


class ProductionPipeline:
    """
    Turns one ProductionRequest into one finished video.

    Providers are injected; anything left out comes from the provider
    factories and therefore from the environment configuration.
    """

    def __init__(
        self,
        video: Optional[BaseVideoProvider] = None,
        music: Optional[BaseMusicProvider] = None,
        voice: Optional[BaseVoiceProvider] = None,
        assembler: Optional[AssemblyCoordinator] = None,
        storage: Optional[BaseStorageProvider] = None,
    ):
        self.video = video or get_video_provider()
        self.music = music or get_music_provider()
        self.voice = voice or get_voice_provider()
        self.assembler = assembler or AssemblyCoordinator(
            provider=get_assembly_provider(),
            storage=get_storage_provider(),
        )
        # Clips and music go to the same store as the final render by default
        self.storage = storage or self.assembler.storage
        self.generator = GenerationCoordinator(self.video, self.music, self.voice, self.storage)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_missing_configurations(self, request: Optional[ProductionRequest] = None) -> List[str]:
        """
        List the providers a request needs but cannot use.

        Without a request every capability is treated as required.
        """
        wants_music = request.wants_music if request else True
        wants_voiceover = request.wants_voiceover if request else True

        missing = []
        if not self.video.is_available:
            missing.append("REPLICATE_API_TOKEN (video)")
        if wants_music and not self.music.is_available:
            missing.append("REPLICATE_API_TOKEN (music)")
        if wants_voiceover and not self.voice.is_available:
            missing.append("OPENAI_API_KEY (voiceover)")
        if not self.assembler.is_available:
            missing.append("SHOTSTACK_API_KEY (assembly)")
        return missing

    def is_configured(self, request: Optional[ProductionRequest] = None) -> bool:
        return not self.get_missing_configurations(request)

    def check_configuration(self, request: ProductionRequest) -> None:
        """Raises ConfigurationError if a required provider is unavailable."""
        missing = self.get_missing_configurations(request)
        if missing:
            raise ConfigurationError(missing)

    def estimate(self, request: ProductionRequest) -> CreditEstimate:
        return estimate_production_credits(request)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def prepare_scenes(self, request: ProductionRequest) -> List[SceneInput]:
        if request.scenes:
            return list(request.scenes)
        if request.has_prompt:
            return scenes_from_prompt(request.prompt, request.target_duration)
        raise ValidationError("No scenes provided and no prompt to generate from")

    def build_assembly_options(
        self,
        request: ProductionRequest,
        shots: List[GeneratedShot],
        assets: ProductionAssets,
    ) -> AssemblyOptions:
        audio_prefs = request.settings.audio_preferences
        prefs = request.settings.assembly_preferences

        audio_tracks = []
        if assets.music_track:
            audio_tracks.append(AudioTrack(
                url=assets.music_track.url,
                type="music",
                volume=audio_prefs.music_volume,
                loop=True,
            ))
        if assets.voiceover_track:
            audio_tracks.append(AudioTrack(
                url=assets.voiceover_track.url,
                type="voiceover",
                volume=audio_prefs.voiceover_volume,
            ))

        return AssemblyOptions(
            project_id=request.project_id,
            clips=[
                VideoClip(url=shot.video_url, duration=shot.duration)
                for shot in sorted(shots, key=lambda s: s.order)
            ],
            audio_tracks=audio_tracks,
            resolution=prefs.resolution,
            aspect_ratio=prefs.aspect_ratio,
            fps=prefs.fps,
            transition_type=prefs.transition_type,
            transition_duration=prefs.transition_duration,
            format=prefs.format,
            quality=prefs.quality,
        )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def produce(
        self,
        request: ProductionRequest,
        on_progress: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> ProductionResult:
        """
        Run a complete production.

        Never raises for production failures: configuration, validation,
        assembly and cancellation errors all come back as a failed
        ProductionResult carrying the credits actually consumed.
        """
        reporter = ProgressReporter(on_progress)
        outcome = GenerationOutcome()
        estimated = 0

        logger.info(f"[PRODUCTION] Starting production for project {request.project_id}")

        try:
            self.check_configuration(request)
            if token is not None:
                token.check()

            reporter.update(ProductionStage.GENERATING_SCRIPT, 5, "Preparing scenes...")
            scenes = self.prepare_scenes(request)
            estimated = estimate_production_credits(request).total
            reporter.update(ProductionStage.GENERATING_SCRIPT, 10, "Scenes prepared", "Scene preparation")

            reporter.update(ProductionStage.GENERATING_SHOTS, 15, "Generating shot list...")
            shots = plan_shots(scenes)
            reporter.update(ProductionStage.GENERATING_SHOTS, 20, "Shot list generated", "Shot breakdown")
            logger.info(f"[PRODUCTION] Planned {len(shots)} shots across {len(scenes)} scenes")

            await self.generator.generate(request, shots, reporter, token, outcome)

            if token is not None:
                token.check()
            reporter.update(ProductionStage.ASSEMBLING, 85, "Assembling final video...")

            generated = [shot for shot in shots if shot.is_generated]
            if not generated:
                return self._failed(
                    reporter, "No video clips were successfully generated", outcome, estimated,
                )

            options = self.build_assembly_options(request, generated, outcome.assets)
            assembly = await self.assembler.assemble(options, token)

            if not assembly.success:
                return self._failed(reporter, f"Assembly failed: {assembly.error}", outcome, estimated)

            outcome.credits.assembly += assembly.credits_used
            reporter.update(ProductionStage.ASSEMBLING, 95, "Video assembled", "Final assembly")
            reporter.update(ProductionStage.COMPLETED, 100, "Production complete!", "Production")

            logger.info(
                f"[PRODUCTION] Complete: {assembly.video_url} "
                f"({outcome.credits_used}/{estimated} credits, {len(outcome.errors)} unit errors)"
            )

            return ProductionResult(
                success=True,
                progress=reporter.snapshot,
                credits_used=outcome.credits_used,
                estimated_credits=estimated,
                video_url=assembly.video_url,
                duration=assembly.duration,
                render_id=assembly.render_id,
                assets=outcome.assets,
            )

        except (ConfigurationError, ValidationError) as e:
            return self._failed(reporter, e.message, None, estimated)
        except ProductionCancelled as e:
            logger.warning(f"[PRODUCTION] Cancelled: {e.message}")
            return self._failed(reporter, e.message, outcome, estimated)
        except ProductionError as e:
            return self._failed(reporter, e.message, outcome, estimated)
        except Exception as e:
            logger.exception(f"[PRODUCTION] Unexpected error: {e}")
            return self._failed(reporter, str(e) or "Production failed unexpectedly", outcome, estimated)

    def _failed(
        self,
        reporter: ProgressReporter,
        error: str,
        outcome: Optional[GenerationOutcome],
        estimated: int,
    ) -> ProductionResult:
        logger.error(f"[PRODUCTION] Failed: {error}")
        reporter.fail(error)
        return ProductionResult(
            success=False,
            progress=reporter.snapshot,
            credits_used=outcome.credits_used if outcome else 0,
            estimated_credits=estimated,
            error=error,
            assets=outcome.assets if outcome else None,
        )

    async def quick_produce(
        self,
        project_id: str,
        prompt: str,
        duration_seconds: float = 30,
        genre: Optional[str] = None,
        user_id: Optional[str] = None,
        on_progress: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> ProductionResult:
        """One-click production: music on, voiceover off, 1080p with fades."""
        request = ProductionRequest(
            project_id=project_id,
            user_id=user_id,
            prompt=prompt,
            genre=genre,
            target_duration=normalize_target_duration(duration_seconds),
            settings=ProductionSettings(
                audio_preferences=AudioPreferences(
                    include_music_track=True,
                    include_voiceover=False,
                    music_volume=0.4,
                ),
                assembly_preferences=AssemblyPreferences(
                    resolution="1080p",
                    transition_type="fade",
                ),
            ),
        )
        return await self.produce(request, on_progress=on_progress, token=token)
