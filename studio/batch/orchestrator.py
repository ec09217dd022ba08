"""
Batch orchestration for long-form content.

A series is produced as a sequence of episodes and a movie as a sequence
of acts. Each segment is an independent single-run production whose
prompt restates the shared context (characters, setting, arc) and its
position in the story.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

import pydantic

from studio.production.context import CancellationToken
from studio.production.cost import CreditEstimate, estimate_movie_credits, estimate_series_credits
from studio.production.enums import ProductionType, SegmentStatus
from studio.production.exceptions import ValidationError
from studio.production.models import ProductionRequest, ProductionSettings
from studio.production.pipeline import ProductionPipeline

from .models import (
    BatchProductionProgress,
    BatchProductionResult,
    BatchProgressObserver,
    EpisodeConfig,
    MovieConfig,
    SegmentResult,
    SegmentVideo,
    SeriesConfig,
)
from .prompts import (
    build_act_prompt,
    build_continuity_context,
    build_episode_prompt,
    generate_default_acts,
    round_half_up,
)

logger = logging.getLogger(__name__)


@dataclass
class _Segment:
    number: int
    segment_id: str
    title: str
    label: str
    fallback_duration: float
    fields: Dict[str, Any] = field(default_factory=dict)

    def build_request(self) -> ProductionRequest:
        # Segment prompts restate the whole story context, so the caller-facing
        # prompt cap does not apply to them.
        return ProductionRequest.model_validate(self.fields, context={"max_prompt_length": None})


class BatchSegmentOrchestrator:
    """Produces the segments of a series or movie one at a time, in order."""

    def __init__(self, pipeline: Optional[ProductionPipeline] = None):
        self.pipeline = pipeline or ProductionPipeline()

    # ------------------------------------------------------------------
    # Estimates
    # ------------------------------------------------------------------

    def estimate_series(self, config: SeriesConfig, settings: Optional[ProductionSettings] = None) -> CreditEstimate:
        return estimate_series_credits(config, settings)

    def estimate_movie(self, config: MovieConfig, settings: Optional[ProductionSettings] = None) -> CreditEstimate:
        return estimate_movie_credits(config, settings)

    # ------------------------------------------------------------------
    # Series / movie
    # ------------------------------------------------------------------

    async def produce_series(
        self,
        project_id: str,
        config: SeriesConfig,
        user_id: Optional[str] = None,
        settings: Optional[ProductionSettings] = None,
        on_progress: Optional[BatchProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> BatchProductionResult:
        if not config.episodes:
            raise ValidationError("Series must contain at least one episode")

        context = build_continuity_context(config.main_characters)
        season = config.season_number or 1
        last = len(config.episodes) - 1

        segments = []
        for i, episode in enumerate(config.episodes):
            segments.append(_Segment(
                number=episode.episode_number,
                segment_id=f"episode-{episode.episode_number}",
                title=f"S{season}E{episode.episode_number}: {episode.title}",
                label=f"Episode {episode.episode_number}: {episode.title}",
                fallback_duration=config.episode_duration,
                fields=dict(
                    project_id=project_id,
                    user_id=user_id,
                    prompt=build_episode_prompt(episode, config, context, i == 0, i == last),
                    scenes=episode.scenes,
                    title=episode.title,
                    genre=config.genre,
                    target_duration=config.episode_duration,
                    settings=settings or ProductionSettings(),
                ),
            ))

        return await self._run(ProductionType.SERIES, config.title, segments, on_progress, token)

    async def produce_movie(
        self,
        project_id: str,
        config: MovieConfig,
        user_id: Optional[str] = None,
        settings: Optional[ProductionSettings] = None,
        on_progress: Optional[BatchProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> BatchProductionResult:
        acts = config.acts or generate_default_acts(config)
        context = build_continuity_context(config.main_characters)
        last = len(acts) - 1

        segments = []
        for i, act in enumerate(acts):
            seconds = act.duration * 60
            segments.append(_Segment(
                number=act.act_number,
                segment_id=f"act-{act.act_number}",
                title=f"Act {act.act_number}: {act.title}",
                label=f"Act {act.act_number}: {act.title}",
                fallback_duration=seconds,
                fields=dict(
                    project_id=project_id,
                    user_id=user_id,
                    prompt=build_act_prompt(act, config, context, i == 0, i == last),
                    scenes=act.scenes,
                    title=f"{config.title} - Act {act.act_number}",
                    genre=config.genre,
                    target_duration=seconds or None,
                    settings=settings or ProductionSettings(),
                ),
            ))

        return await self._run(ProductionType.MOVIE, config.title, segments, on_progress, token)

    async def _run(
        self,
        kind: ProductionType,
        title: str,
        segments: List[_Segment],
        on_progress: Optional[BatchProgressObserver],
        token: Optional[CancellationToken],
    ) -> BatchProductionResult:
        progress = BatchProductionProgress(
            type=kind,
            title=title,
            total_segments=len(segments),
            segment_results=tuple(SegmentResult(segment_id=s.segment_id, title=s.title) for s in segments),
        )

        def publish(snapshot: BatchProductionProgress) -> BatchProductionProgress:
            if on_progress is not None:
                try:
                    on_progress(snapshot)
                except Exception as e:
                    logger.warning(f"[BATCH] Progress observer raised: {e}")
            return snapshot

        videos: List[SegmentVideo] = []
        total_credits = 0
        label = kind.segment_label

        logger.info(f"[BATCH] Starting {kind.value} '{title}' with {len(segments)} segments")

        for i, segment in enumerate(segments):
            if token is not None and token.cancelled:
                reason = token.reason or "Production cancelled"
                logger.warning(f"[BATCH] {reason}; skipping {len(segments) - i} remaining segments")
                progress = publish(replace(progress, errors=progress.errors + (reason,)))
                break

            progress = replace(
                progress,
                current_segment=segment.label,
                overall_progress=round_half_up(i / len(segments) * 100),
            ).with_segment(i, status=SegmentStatus.PROCESSING)
            progress = publish(progress)

            try:
                request = segment.build_request()
                result = await self.pipeline.produce(request, token=token)
            except pydantic.ValidationError as e:
                message = "; ".join(err["msg"] for err in e.errors())
                logger.error(f"[BATCH] {label} {segment.number} rejected: {message}")
                progress = replace(
                    progress.with_segment(i, status=SegmentStatus.FAILED, error=message),
                    errors=progress.errors + (f"{label} {segment.number} failed: {message}",),
                )
            except Exception as e:
                logger.exception(f"[BATCH] {label} {segment.number} raised")
                progress = replace(
                    progress.with_segment(i, status=SegmentStatus.FAILED, error=str(e)),
                    errors=progress.errors + (f"{label} {segment.number} failed: {e}",),
                )
            else:
                if result.success and result.video_url:
                    videos.append(SegmentVideo(
                        segment_id=segment.segment_id,
                        title=segment.title,
                        video_url=result.video_url,
                        duration=result.duration or segment.fallback_duration,
                    ))
                    total_credits += result.credits_used
                    progress = progress.with_segment(
                        i, status=SegmentStatus.COMPLETED, video_url=result.video_url,
                    )
                    logger.info(f"[BATCH] {label} {segment.number} completed: {result.video_url}")
                else:
                    progress = replace(
                        progress.with_segment(i, status=SegmentStatus.FAILED, error=result.error),
                        errors=progress.errors + (f"{label} {segment.number} failed: {result.error}",),
                    )
                    logger.error(f"[BATCH] {label} {segment.number} failed: {result.error}")

            progress = publish(replace(progress, completed_segments=progress.completed_segments + 1))

        progress = publish(replace(progress, overall_progress=100))

        error = None
        if not videos:
            noun = "episodes" if kind == ProductionType.SERIES else "acts"
            error = f"No {noun} were successfully produced"

        return BatchProductionResult(
            success=bool(videos),
            type=kind,
            title=title,
            progress=progress,
            videos=videos,
            total_duration=sum(v.duration for v in videos),
            total_credits_used=total_credits,
            error=error,
        )

    # ------------------------------------------------------------------
    # Quick helpers
    # ------------------------------------------------------------------

    async def quick_series(
        self,
        project_id: str,
        title: str,
        synopsis: str,
        episode_count: int = 6,
        episode_duration: float = 60,
        genre: str = "drama",
        user_id: Optional[str] = None,
        on_progress: Optional[BatchProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> BatchProductionResult:
        """Series from a title and synopsis: pilot, numbered chapters, finale."""
        episodes = []
        for n in range(1, episode_count + 1):
            if n == 1:
                episode_synopsis = f"Pilot: {synopsis}"
            elif n == episode_count:
                episode_synopsis = f"Finale: Conclusion of {title}"
            else:
                episode_synopsis = f"Chapter {n} of {title}"
            episodes.append(EpisodeConfig(episode_number=n, title=f"Episode {n}", synopsis=episode_synopsis))

        config = SeriesConfig(
            title=title,
            genre=genre,
            synopsis=synopsis,
            episode_count=episode_count,
            episode_duration=episode_duration,
            episodes=episodes,
        )
        return await self.produce_series(project_id, config, user_id=user_id, on_progress=on_progress, token=token)

    async def quick_movie(
        self,
        project_id: str,
        title: str,
        synopsis: str,
        target_duration: float = 5,
        genre: str = "drama",
        user_id: Optional[str] = None,
        on_progress: Optional[BatchProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> BatchProductionResult:
        """Movie from a title and synopsis using the default three-act split."""
        config = MovieConfig(
            title=title,
            genre=genre,
            synopsis=synopsis,
            target_duration=target_duration,
            acts=[],
        )
        return await self.produce_movie(project_id, config, user_id=user_id, on_progress=on_progress, token=token)
