"""
Tests for the single-run production pipeline.
"""
import pydantic
import pytest

from studio.assembly.models import AssemblyStatus, RenderStatus
from studio.config import config
from studio.production.context import CancellationToken
from studio.production.cost import estimate_production_credits
from studio.production.enums import ProductionStage
from studio.production.exceptions import PersistenceWarning
from studio.production.models import (
    AssemblyPreferences,
    AudioPreferences,
    ProductionRequest,
    ProductionSettings,
    SceneInput,
)


class TestProduce:
    """Tests for ProductionPipeline.produce."""

    @pytest.mark.asyncio
    async def test_single_scene_run(self, pipeline, single_scene_request, fake_video, fake_music, fake_voice):
        seen = []
        result = await pipeline.produce(single_scene_request, on_progress=seen.append)

        assert result.success is True
        assert result.video_url == "https://storage.test/proj-1/final.mp4"
        assert result.render_id == "render-1"
        assert result.duration == 10
        assert result.credits_used == 50
        assert result.estimated_credits == 50
        assert result.error is None
        assert len(fake_video.calls) == 2
        assert len(fake_music.calls) == 1
        assert fake_voice.calls == []

        assert result.progress.stage == ProductionStage.COMPLETED
        assert result.progress.progress == 100
        assert result.progress.current_step == "Production complete!"
        assert result.progress.completed_steps == (
            "Scene preparation",
            "Shot breakdown",
            "Video generation",
            "Music generation",
            "Final assembly",
            "Production",
        )

        percents = [s.progress for s in seen]
        assert percents == sorted(percents)
        assert percents[0] == 5

    @pytest.mark.asyncio
    async def test_assets_are_reported(self, pipeline, single_scene_request):
        result = await pipeline.produce(single_scene_request)

        assert [c.url for c in result.assets.video_clips] == [
            "https://storage.test/proj-1/clip-0.mp4",
            "https://storage.test/proj-1/clip-1.mp4",
        ]
        assert result.assets.music_track.url == "https://storage.test/proj-1/music.mp3"
        assert result.assets.voiceover_track is None

    @pytest.mark.asyncio
    async def test_assets_are_persisted_before_assembly(self, pipeline, single_scene_request, fake_storage):
        await pipeline.produce(single_scene_request)

        assert fake_storage.calls == [
            ("https://cdn.test/clip-0.mp4", "proj-1", "s1"),
            ("https://cdn.test/clip-1.mp4", "proj-1", "s1"),
            ("https://cdn.test/music.mp3", "proj-1", None),
            ("https://render.test/final.mp4", "proj-1", None),
        ]

    @pytest.mark.asyncio
    async def test_storage_failure_keeps_transient_urls(self, pipeline, single_scene_request, fake_storage):
        fake_storage.fail = True

        with pytest.warns(PersistenceWarning):
            result = await pipeline.produce(single_scene_request)

        assert result.success is True
        assert [c.url for c in result.assets.video_clips] == [
            "https://cdn.test/clip-0.mp4",
            "https://cdn.test/clip-1.mp4",
        ]
        assert result.assets.music_track.url == "https://cdn.test/music.mp3"
        assert result.video_url == "https://render.test/final.mp4"

    @pytest.mark.asyncio
    async def test_assembly_receives_clips_and_music(self, pipeline, single_scene_request, fake_assembly):
        await pipeline.produce(single_scene_request)

        timeline = fake_assembly.timelines[0]
        video = timeline.track("video")
        music = timeline.track("music")

        assert [c.src for c in video.clips] == [
            "https://storage.test/proj-1/clip-0.mp4",
            "https://storage.test/proj-1/clip-1.mp4",
        ]
        assert music.clips[0].volume == 0.3
        assert music.clips[0].loop is True
        assert music.clips[0].length == 10
        assert timeline.resolution == "1080p"

    @pytest.mark.asyncio
    async def test_partial_failure_still_succeeds(self, pipeline, fake_video):
        fake_video.fail_on = {0}
        request = ProductionRequest(
            project_id="proj-1",
            scenes=[SceneInput(id="s1", description="Harbor", duration=15)],
        )

        result = await pipeline.produce(request)

        assert result.success is True
        assert result.errors == ["Failed to generate video for shot shot-s1-0: content filtered"]
        assert result.credits_used <= estimate_production_credits(request).total

    @pytest.mark.asyncio
    async def test_consumed_never_exceeds_estimate(self, pipeline):
        request = ProductionRequest(
            project_id="proj-1",
            scenes=[
                SceneInput(id="a", description="first", duration=12, dialogue=["Run!"]),
                SceneInput(id="b", description="second", duration=7, dialogue=["Where?"]),
            ],
            settings=ProductionSettings(
                assembly_preferences=AssemblyPreferences(transition_type="cut"),
            ),
        )

        result = await pipeline.produce(request)

        assert result.success is True
        assert result.credits_used <= result.estimated_credits

    @pytest.mark.asyncio
    async def test_prompt_only_request(self, pipeline, fake_video):
        request = ProductionRequest(project_id="proj-1", prompt="A comet over the sea", target_duration=30)

        result = await pipeline.produce(request)

        assert result.success is True
        assert len(fake_video.calls) == 6
        assert fake_video.calls[0]["prompt"].startswith("Opening, establishing wide shot, Opening: A comet")
        assert result.credits_used <= result.estimated_credits

    @pytest.mark.asyncio
    async def test_zero_shots_skips_assembly(self, pipeline, single_scene_request, fake_video, fake_assembly):
        fake_video.fail_on = {0, 1}

        result = await pipeline.produce(single_scene_request)

        assert result.success is False
        assert result.error == "No video clips were successfully generated"
        assert fake_assembly.timelines == []
        assert result.progress.stage == ProductionStage.FAILED
        # Music still ran and is still charged
        assert result.credits_used == 5
        assert len(result.errors) == 3

    @pytest.mark.asyncio
    async def test_assembly_failure(self, pipeline, single_scene_request, fake_assembly):
        fake_assembly.statuses = [AssemblyStatus(status=RenderStatus.FAILED, error="render exploded")]

        result = await pipeline.produce(single_scene_request)

        assert result.success is False
        assert result.error == "Assembly failed: render exploded"
        assert result.credits_used == 25

    @pytest.mark.asyncio
    async def test_missing_scenes_and_prompt(self, pipeline, fake_video):
        result = await pipeline.produce(ProductionRequest(project_id="proj-1"))

        assert result.success is False
        assert result.error == "No scenes provided and no prompt to generate from"
        assert result.credits_used == 0
        assert result.estimated_credits == 0
        assert fake_video.calls == []

    @pytest.mark.asyncio
    async def test_cancellation(self, pipeline, fake_video, fake_assembly):
        token = CancellationToken()
        fake_video.on_call = lambda index: token.cancel("Stopped by user") if index == 0 else None
        request = ProductionRequest(
            project_id="proj-1",
            scenes=[SceneInput(id="s1", description="Harbor", duration=20)],
        )

        result = await pipeline.produce(request, token=token)

        assert result.success is False
        assert result.error == "Stopped by user"
        assert result.credits_used == 10
        assert len(fake_video.calls) == 1
        assert fake_assembly.timelines == []


class TestConfiguration:
    """Tests for required-provider checks."""

    @pytest.mark.asyncio
    async def test_missing_video_provider(self, pipeline, single_scene_request, fake_video):
        fake_video.available = False

        result = await pipeline.produce(single_scene_request)

        assert result.success is False
        assert result.error == "Production not fully configured. Missing: REPLICATE_API_TOKEN (video)"
        assert result.credits_used == 0
        assert result.estimated_credits == 0
        assert fake_video.calls == []

    def test_voiceover_only_required_when_requested(self, pipeline, single_scene_request, fake_voice):
        fake_voice.available = False

        assert pipeline.get_missing_configurations(single_scene_request) == []
        assert pipeline.get_missing_configurations() == ["OPENAI_API_KEY (voiceover)"]

    def test_assembly_always_required(self, pipeline, single_scene_request, fake_assembly, fake_music):
        fake_assembly.available = False
        fake_music.available = False

        assert pipeline.get_missing_configurations(single_scene_request) == [
            "REPLICATE_API_TOKEN (music)",
            "SHOTSTACK_API_KEY (assembly)",
        ]
        assert not pipeline.is_configured(single_scene_request)


class TestQuickProduce:
    """Tests for quick_produce."""

    @pytest.mark.asyncio
    async def test_defaults(self, pipeline, fake_video, fake_music, fake_voice, fake_assembly):
        result = await pipeline.quick_produce("proj-1", "Lanterns rising over a lake", genre="fantasy")

        assert result.success is True
        assert len(fake_video.calls) == 6
        assert len(fake_music.calls) == 1
        assert fake_voice.calls == []

        music = fake_assembly.timelines[0].track("music").clips[0]
        assert music.volume == 0.4

    @pytest.mark.asyncio
    async def test_duration_is_clamped(self, pipeline, fake_video):
        await pipeline.quick_produce("proj-1", "Lanterns", duration_seconds=2)
        assert len(fake_video.calls) == 2


class TestRequestLimits:
    """Tests for the prompt and scene caps on ProductionRequest."""

    def test_long_prompt_is_rejected(self):
        with pytest.raises(pydantic.ValidationError, match="prompt must be at most 2000 characters"):
            ProductionRequest(project_id="proj-1", prompt="x" * 2001)

    def test_prompt_cap_can_be_lifted(self):
        request = ProductionRequest.model_validate(
            {"project_id": "proj-1", "prompt": "x" * 5000},
            context={"max_prompt_length": None},
        )

        assert len(request.prompt) == 5000

    def test_too_many_scenes(self):
        scenes = [SceneInput(id=f"s{n}", description="Harbor") for n in range(21)]

        with pytest.raises(pydantic.ValidationError, match="at most 20 scenes"):
            ProductionRequest(project_id="proj-1", scenes=scenes)

    def test_limits_follow_config(self, monkeypatch):
        monkeypatch.setattr(config.limits, "max_prompt_length", 10)
        monkeypatch.setattr(config.limits, "max_scenes", 1)

        with pytest.raises(pydantic.ValidationError, match="at most 10 characters"):
            ProductionRequest(project_id="proj-1", prompt="a stormy harbor")
        with pytest.raises(pydantic.ValidationError, match="at most 1 scenes"):
            ProductionRequest(
                project_id="proj-1",
                scenes=[SceneInput(id="a", description="one"), SceneInput(id="b", description="two")],
            )
