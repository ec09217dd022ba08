"""
Assembly stage.

Builds a provider-agnostic Timeline from AssemblyOptions, submits it once
to the render provider, polls until the job is terminal or the wall-clock
budget runs out, then hands the result to durable storage.
"""
import asyncio
import logging
import time
import warnings
from typing import List, Optional

from studio.production.context import CancellationToken
from studio.production.cost import estimate_assembly_credits
from studio.production.exceptions import AssemblyError, PersistenceWarning, ProductionCancelled
from studio.providers.assembly.base import BaseAssemblyProvider
from studio.providers.exceptions import ProviderError
from studio.providers.storage.base import BaseStorageProvider
from studio.providers.storage.passthrough import PassthroughStorageProvider

from .models import (
    AssemblyOptions,
    AssemblyResult,
    AssemblyStatus,
    AudioTrack,
    RenderStatus,
    Timeline,
    TimelineClip,
    TimelineTrack,
    VideoClip,
)

logger = logging.getLogger(__name__)


def build_timeline(options: AssemblyOptions) -> Timeline:
    """
    Lay out clips back-to-back (an explicit ``start_time`` wins) with
    transitions on interior boundaries only, then audio spanning the video
    and text overlays.
    """
    use_transitions = options.transition_type != "cut"
    last = len(options.clips) - 1

    video_clips: List[TimelineClip] = []
    current = 0.0
    for i, clip in enumerate(options.clips):
        length = clip.effective_duration
        start = clip.start_time if clip.start_time is not None else current
        video_clips.append(TimelineClip(
            asset_type="video",
            start=start,
            length=length,
            src=clip.url,
            trim=clip.trim_start,
            transition_in=options.transition_type if use_transitions and i > 0 else None,
            transition_out=options.transition_type if use_transitions and i < last else None,
        ))
        current = start + length

    tracks = [TimelineTrack(kind="video", clips=video_clips)]

    audio_tracks = {"music": [], "voiceover": [], "sfx": []}
    for audio in options.audio_tracks:
        audio_tracks[audio.type].append(TimelineClip(
            asset_type="audio",
            start=audio.start_time or 0.0,
            length=current,
            src=audio.url,
            volume=audio.effective_volume,
            fade_in=audio.fade_in,
            fade_out=audio.fade_out,
            loop=audio.loop,
        ))
    for kind in ("music", "voiceover", "sfx"):
        if audio_tracks[kind]:
            tracks.append(TimelineTrack(kind=kind, clips=audio_tracks[kind]))

    if options.text_overlays:
        tracks.append(TimelineTrack(kind="text", clips=[
            TimelineClip(
                asset_type="title",
                start=overlay.start_time,
                length=overlay.duration,
                text=overlay.text,
                position=overlay.position,
                style=overlay.style,
                font_size=overlay.font_size,
                color=overlay.color,
            )
            for overlay in options.text_overlays
        ]))

    return Timeline(
        tracks=tracks,
        duration=current,
        resolution=options.resolution,
        aspect_ratio=options.aspect_ratio,
        fps=options.fps,
        format=options.format,
        quality=options.quality,
    )


class AssemblyCoordinator:
    """Runs one render job from submission to a durable URL."""

    def __init__(
        self,
        provider: BaseAssemblyProvider,
        storage: Optional[BaseStorageProvider] = None,
        poll_interval: Optional[float] = None,
        max_poll_seconds: Optional[float] = None,
    ):
        from studio.config import config
        self.provider = provider
        self.storage = storage or PassthroughStorageProvider()
        self.poll_interval = poll_interval if poll_interval is not None else config.limits.poll_interval_seconds
        self.max_poll_seconds = max_poll_seconds if max_poll_seconds is not None else config.limits.max_poll_seconds

    @property
    def is_available(self) -> bool:
        return self.provider.is_available

    async def get_status(self, render_id: str) -> AssemblyStatus:
        """Single status check for an existing render job."""
        return await self.provider.poll(render_id)

    async def assemble(
        self,
        options: AssemblyOptions,
        token: Optional[CancellationToken] = None,
    ) -> AssemblyResult:
        if not options.clips:
            return AssemblyResult(
                success=False,
                status=RenderStatus.FAILED,
                error="At least one video clip is required for assembly.",
            )

        try:
            render_id = await self._submit(build_timeline(options), token)
            final = await self._wait_for_render(render_id, token)
        except AssemblyError as e:
            logger.error(f"[ASSEMBLY] {e.message}")
            return AssemblyResult(
                success=False,
                render_id=e.render_id,
                status=RenderStatus.FAILED,
                error=e.message,
            )

        video_url = await self._persist(final.video_url, options)

        return AssemblyResult(
            success=True,
            video_url=video_url,
            render_id=render_id,
            duration=options.total_clip_seconds,
            credits_used=estimate_assembly_credits(options),
            status=RenderStatus.COMPLETED,
            progress=final.progress,
        )

    async def _submit(self, timeline: Timeline, token: Optional[CancellationToken]) -> str:
        try:
            if token is not None:
                submission = await token.guard(self.provider.submit(timeline))
            else:
                submission = await self.provider.submit(timeline)
        except ProductionCancelled:
            raise
        except ProviderError as e:
            raise AssemblyError(e.message) from e
        except Exception as e:
            logger.exception(f"[ASSEMBLY] Submission to {self.provider.name} raised")
            raise AssemblyError(f"Failed to start video assembly: {e}") from e

        if not submission.success or not submission.render_id:
            raise AssemblyError(submission.error or "Failed to start video assembly")

        logger.info(f"[ASSEMBLY] Render submitted: {submission.render_id} ({self.provider.name})")
        return submission.render_id

    async def _wait_for_render(self, render_id: str, token: Optional[CancellationToken]) -> AssemblyStatus:
        started = time.monotonic()
        last_error: Optional[str] = None

        while time.monotonic() - started < self.max_poll_seconds:
            if token is not None:
                await token.sleep(self.poll_interval)
            else:
                await asyncio.sleep(self.poll_interval)

            try:
                status = await self._poll(render_id, token)
            except ProductionCancelled:
                raise
            except ProviderError as e:
                if not e.retryable:
                    raise AssemblyError(e.message, render_id) from e
                last_error = e.message
                logger.warning(f"[ASSEMBLY] Poll failed for {render_id}, retrying: {e.message}")
                continue
            except Exception as e:
                last_error = str(e)
                logger.warning(f"[ASSEMBLY] Poll failed for {render_id}, retrying: {e}")
                continue

            logger.debug(f"[ASSEMBLY] {render_id}: {status.status.value} {status.progress or ''}")

            if status.status == RenderStatus.COMPLETED:
                if not status.video_url:
                    raise AssemblyError("Render completed without a video URL", render_id)
                return status
            if status.status == RenderStatus.FAILED:
                raise AssemblyError(status.error or "Video assembly failed", render_id)

        if last_error:
            logger.error(f"[ASSEMBLY] Last poll error for {render_id}: {last_error}")
        raise AssemblyError(f"Render timed out after {self.max_poll_seconds:g} seconds", render_id)

    async def _poll(self, render_id: str, token: Optional[CancellationToken]) -> AssemblyStatus:
        if token is not None:
            return await token.guard(self.provider.poll(render_id))
        return await self.provider.poll(render_id)

    async def _persist(self, transient_url: str, options: AssemblyOptions) -> str:
        try:
            return await self.storage.persist_video(transient_url, options.project_id, options.scene_id)
        except Exception as e:
            message = f"Failed to persist video, keeping transient URL: {e}"
            logger.warning(f"[ASSEMBLY] {message}")
            warnings.warn(message, PersistenceWarning, stacklevel=2)
            return transient_url

    async def quick_assemble(
        self,
        project_id: str,
        clip_urls: List[str],
        music_url: Optional[str] = None,
        voiceover_url: Optional[str] = None,
        resolution: str = "1080p",
        transition_type: str = "fade",
    ) -> AssemblyResult:
        """Assemble a plain sequence of 5 second clips with optional audio."""
        audio_tracks = []
        if music_url:
            audio_tracks.append(AudioTrack(url=music_url, type="music", volume=0.3, loop=True))
        if voiceover_url:
            audio_tracks.append(AudioTrack(url=voiceover_url, type="voiceover", volume=1.0))

        return await self.assemble(AssemblyOptions(
            project_id=project_id,
            clips=[VideoClip(url=url, duration=5.0) for url in clip_urls],
            audio_tracks=audio_tracks,
            resolution=resolution,
            transition_type=transition_type,
            transition_duration=0.5,
        ))

    async def assemble_cinematic_scene(
        self,
        project_id: str,
        scene_id: str,
        shots: List[dict],
        music_url: Optional[str] = None,
        voiceover_url: Optional[str] = None,
        music_volume: float = 0.25,
    ) -> AssemblyResult:
        """Cinematic preset: dissolves, faded music bed, 1080p 16:9."""
        audio_tracks = []
        if music_url:
            audio_tracks.append(AudioTrack(
                url=music_url,
                type="music",
                volume=music_volume,
                fade_in=2.0,
                fade_out=2.0,
                loop=True,
            ))
        if voiceover_url:
            audio_tracks.append(AudioTrack(url=voiceover_url, type="voiceover", volume=1.0))

        return await self.assemble(AssemblyOptions(
            project_id=project_id,
            scene_id=scene_id,
            clips=[VideoClip(url=shot["video_url"], duration=shot.get("duration")) for shot in shots],
            audio_tracks=audio_tracks,
            resolution="1080p",
            aspect_ratio="16:9",
            transition_type="dissolve",
            transition_duration=0.8,
            format="mp4",
            quality="high",
        ))
