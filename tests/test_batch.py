"""
Tests for series and movie batch production.
"""
import pytest

from studio.batch.models import (
    ActConfig,
    CharacterProfile,
    EpisodeConfig,
    MovieConfig,
    SeriesConfig,
)
from studio.batch.orchestrator import BatchSegmentOrchestrator
from studio.batch.prompts import (
    build_act_prompt,
    build_continuity_context,
    build_episode_prompt,
    generate_default_acts,
)
from studio.production.context import CancellationToken
from studio.production.enums import ProductionType, SegmentStatus
from studio.production.exceptions import ValidationError
from studio.production.models import ProductionResult, SceneInput
from studio.production.progress import ProductionProgress


class ScriptedPipeline:
    """Stands in for ProductionPipeline; fails requests whose title matches."""

    def __init__(self, fail_titles=(), raise_titles=(), on_produce=None):
        self.fail_titles = set(fail_titles)
        self.raise_titles = set(raise_titles)
        self.on_produce = on_produce
        self.requests = []

    async def produce(self, request, on_progress=None, token=None):
        self.requests.append(request)
        if self.on_produce:
            self.on_produce(request)
        if request.title in self.raise_titles:
            raise RuntimeError("worker lost")
        if request.title in self.fail_titles:
            return ProductionResult(
                success=False,
                progress=ProductionProgress(),
                credits_used=10,
                error="No video clips were successfully generated",
            )
        return ProductionResult(
            success=True,
            progress=ProductionProgress(),
            credits_used=50,
            video_url=f"https://storage.test/{len(self.requests)}.mp4",
            duration=30,
        )


@pytest.fixture
def characters():
    return [
        CharacterProfile(name="Mara", role="protagonist", description="a lighthouse keeper"),
        CharacterProfile(name="Teo", role="antagonist", description="a smuggler"),
    ]


@pytest.fixture
def series(characters):
    return SeriesConfig(
        title="Saltwater",
        genre="mystery",
        synopsis="A coastal town hides a secret.",
        episode_duration=60,
        main_characters=characters,
        setting="a fishing village",
        overarching_plot="The lighthouse signals are being faked",
        episodes=[
            EpisodeConfig(episode_number=1, title="Fog", synopsis="A ship runs aground.", plot_points=["wreck", "rescue"]),
            EpisodeConfig(episode_number=2, title="Tide", synopsis="Cargo goes missing."),
            EpisodeConfig(episode_number=3, title="Beacon", synopsis="The truth comes out."),
        ],
    )


class TestPrompts:
    """Tests for continuity context and segment prompts."""

    def test_continuity_context(self, characters):
        assert build_continuity_context(characters) == (
            "Mara (protagonist): a lighthouse keeper. Teo (antagonist): a smuggler"
        )

    def test_premiere_prompt(self, series):
        context = build_continuity_context(series.main_characters)
        prompt = build_episode_prompt(series.episodes[0], series, context, True, False)

        assert prompt == (
            'mystery TV series: "Saltwater". Setting: a fishing village. Episode 1: "Fog". '
            "A ship runs aground.. "
            f"Characters: {context}. Key moments: wreck, rescue. "
            "This is the series premiere - establish the world and characters. "
            "Series arc: The lighthouse signals are being faked"
        )

    def test_finale_prompt(self, series):
        prompt = build_episode_prompt(series.episodes[2], series, "", False, True)

        assert "This is the season finale - resolve major plot threads" in prompt
        assert "Characters:" not in prompt

    def test_single_episode_is_premiere_only(self, series):
        prompt = build_episode_prompt(series.episodes[0], series, "", True, True)

        assert "series premiere" in prompt
        assert "season finale" not in prompt

    def test_act_guidance_follows_position(self):
        movie = MovieConfig(title="Drift", genre="thriller", target_duration=12)
        act = ActConfig(act_number=2, title="The Heist", synopsis="They go in.", duration=4)

        first = build_act_prompt(act, movie, "", True, False)
        middle = build_act_prompt(act, movie, "", False, False)
        last = build_act_prompt(act, movie, "", False, True)

        assert first.startswith('thriller film: "Drift". Act 2: "The Heist". They go in.')
        assert first.endswith("Act 1 - Setup: Establish the world, introduce characters, present the inciting incident")
        assert middle.endswith("Act 2 - Confrontation: Rising action, obstacles, character development")
        assert last.endswith("Act 3 - Resolution: Climax and resolution, character arcs complete")


class TestDefaultActs:
    """Tests for the default three-act split."""

    def test_twenty_minutes(self):
        acts = generate_default_acts(MovieConfig(title="Drift", synopsis="Two thieves.", target_duration=20))

        assert [a.duration for a in acts] == [5, 10, 5]
        assert [a.title for a in acts] == ["Setup", "Confrontation", "Resolution"]
        assert acts[0].synopsis == (
            'Opening of "Drift". Two thieves. Establish the world and introduce the main characters.'
        )
        assert acts[2].synopsis == 'Climax and ending of "Drift". Final confrontation and resolution.'

    def test_halves_round_up(self):
        acts = generate_default_acts(MovieConfig(title="Drift", target_duration=10))
        assert [a.duration for a in acts] == [3, 5, 3]


class TestProduceSeries:
    """Tests for produce_series."""

    @pytest.mark.asyncio
    async def test_all_episodes(self, series):
        pipeline = ScriptedPipeline()
        result = await BatchSegmentOrchestrator(pipeline).produce_series("proj-1", series, user_id="user-1")

        assert result.success is True
        assert result.type == ProductionType.SERIES
        assert [v.segment_id for v in result.videos] == ["episode-1", "episode-2", "episode-3"]
        assert [v.title for v in result.videos] == ["S1E1: Fog", "S1E2: Tide", "S1E3: Beacon"]
        assert result.total_duration == 90
        assert result.total_credits_used == 150
        assert result.error is None

        request = pipeline.requests[0]
        assert request.target_duration == 60
        assert request.genre == "mystery"
        assert request.title == "Fog"
        assert request.user_id == "user-1"
        assert "series premiere" in request.prompt

    @pytest.mark.asyncio
    async def test_failed_episode_is_recorded(self, series):
        pipeline = ScriptedPipeline(fail_titles={"Tide"})

        result = await BatchSegmentOrchestrator(pipeline).produce_series("proj-1", series)

        assert result.success is True
        assert len(result.videos) == 2
        assert result.total_credits_used == 100
        slot = result.progress.segment_results[1]
        assert slot.status == SegmentStatus.FAILED
        assert slot.error == "No video clips were successfully generated"
        assert result.progress.errors == ("Episode 2 failed: No video clips were successfully generated",)

    @pytest.mark.asyncio
    async def test_nothing_produced(self, series):
        pipeline = ScriptedPipeline(fail_titles={"Fog", "Tide", "Beacon"})

        result = await BatchSegmentOrchestrator(pipeline).produce_series("proj-1", series)

        assert result.success is False
        assert result.error == "No episodes were successfully produced"
        assert result.total_credits_used == 0

    @pytest.mark.asyncio
    async def test_empty_series_is_rejected(self):
        pipeline = ScriptedPipeline()

        with pytest.raises(ValidationError):
            await BatchSegmentOrchestrator(pipeline).produce_series("proj-1", SeriesConfig(title="Empty"))

        assert pipeline.requests == []

    @pytest.mark.asyncio
    async def test_progress_snapshots(self, series):
        seen = []
        await BatchSegmentOrchestrator(ScriptedPipeline()).produce_series("proj-1", series, on_progress=seen.append)

        processing = [s for s in seen if s.completed_segments < s.total_segments and s.current_segment]
        assert [s.overall_progress for s in seen if any(
            r.status == SegmentStatus.PROCESSING for r in s.segment_results
        )] == [0, 33, 67]
        assert processing[0].current_segment == "Episode 1: Fog"
        assert seen[-1].overall_progress == 100
        assert seen[-1].completed_segments == 3
        # Earlier snapshots are not mutated by later transitions
        assert seen[0].segment_results[0].status == SegmentStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_quick_series(self):
        pipeline = ScriptedPipeline()

        result = await BatchSegmentOrchestrator(pipeline).quick_series("proj-1", "Harbor", "Boats and secrets", episode_count=3)

        assert result.success is True
        assert "Pilot: Boats and secrets" in pipeline.requests[0].prompt
        assert "Chapter 2 of Harbor" in pipeline.requests[1].prompt
        assert "Finale: Conclusion of Harbor" in pipeline.requests[2].prompt
        assert pipeline.requests[0].genre == "drama"

    @pytest.mark.asyncio
    async def test_long_synopsis_is_not_capped(self, series):
        pipeline = ScriptedPipeline()
        long_series = series.model_copy(update={"overarching_plot": "The keeper remembers. " * 150})

        result = await BatchSegmentOrchestrator(pipeline).produce_series("proj-1", long_series)

        assert result.success is True
        assert len(result.videos) == 3
        assert all(len(r.prompt) > 2000 for r in pipeline.requests)
        assert result.progress.errors == ()


class TestProduceMovie:
    """Tests for produce_movie."""

    @pytest.mark.asyncio
    async def test_act_two_fails(self):
        pipeline = ScriptedPipeline(fail_titles={"Drift - Act 2"})
        movie = MovieConfig(title="Drift", genre="thriller", synopsis="Two thieves.", target_duration=20)

        result = await BatchSegmentOrchestrator(pipeline).produce_movie("proj-1", movie)

        assert result.success is True
        assert [v.segment_id for v in result.videos] == ["act-1", "act-3"]
        assert [r.status for r in result.progress.segment_results] == [
            SegmentStatus.COMPLETED,
            SegmentStatus.FAILED,
            SegmentStatus.COMPLETED,
        ]
        assert result.progress.segment_results[1].error == "No video clips were successfully generated"
        assert result.progress.errors == ("Act 2 failed: No video clips were successfully generated",)
        assert [r.target_duration for r in pipeline.requests] == [300, 600, 300]

    @pytest.mark.asyncio
    async def test_raised_exception_is_recorded(self):
        pipeline = ScriptedPipeline(raise_titles={"Drift - Act 1"})
        movie = MovieConfig(title="Drift", target_duration=20)

        result = await BatchSegmentOrchestrator(pipeline).produce_movie("proj-1", movie)

        assert result.success is True
        assert len(result.videos) == 2
        assert result.progress.segment_results[0].error == "worker lost"
        assert result.progress.errors == ("Act 1 failed: worker lost",)

    @pytest.mark.asyncio
    async def test_all_acts_fail(self):
        pipeline = ScriptedPipeline(fail_titles={"Drift - Act 1", "Drift - Act 2", "Drift - Act 3"})

        result = await BatchSegmentOrchestrator(pipeline).produce_movie("proj-1", MovieConfig(title="Drift"))

        assert result.success is False
        assert result.error == "No acts were successfully produced"

    @pytest.mark.asyncio
    async def test_custom_acts_keep_order(self):
        pipeline = ScriptedPipeline()
        movie = MovieConfig(
            title="Drift",
            target_duration=6,
            acts=[
                ActConfig(act_number=1, title="Arrival", synopsis="They land.", duration=2),
                ActConfig(act_number=2, title="Escape", synopsis="They run.", duration=4),
            ],
        )

        result = await BatchSegmentOrchestrator(pipeline).produce_movie("proj-1", movie)

        assert [v.title for v in result.videos] == ["Act 1: Arrival", "Act 2: Escape"]
        assert pipeline.requests[1].prompt.endswith("Act 3 - Resolution: Climax and resolution, character arcs complete")

    @pytest.mark.asyncio
    async def test_cancellation_stops_remaining_acts(self):
        token = CancellationToken()
        pipeline = ScriptedPipeline(on_produce=lambda request: token.cancel("Stopped by user"))

        result = await BatchSegmentOrchestrator(pipeline).produce_movie(
            "proj-1", MovieConfig(title="Drift", target_duration=20), token=token,
        )

        assert len(pipeline.requests) == 1
        assert len(result.videos) == 1
        assert [r.status for r in result.progress.segment_results][1:] == [
            SegmentStatus.PENDING,
            SegmentStatus.PENDING,
        ]
        assert "Stopped by user" in result.progress.errors

    @pytest.mark.asyncio
    async def test_quick_movie(self):
        pipeline = ScriptedPipeline()

        result = await BatchSegmentOrchestrator(pipeline).quick_movie("proj-1", "Drift", "Two thieves.")

        assert result.success is True
        # 5 minutes: 1.25 -> 1, 2.5 -> 3, 1.25 -> 1
        assert [r.target_duration for r in pipeline.requests] == [60, 180, 60]

    @pytest.mark.asyncio
    async def test_oversized_act_fails_alone(self):
        pipeline = ScriptedPipeline()
        crowded = [SceneInput(id=f"s{n}", description=f"Beat {n}") for n in range(25)]
        movie = MovieConfig(
            title="Drift",
            target_duration=6,
            acts=[
                ActConfig(act_number=1, title="Arrival", duration=2),
                ActConfig(act_number=2, title="Crowd", duration=2, scenes=crowded),
                ActConfig(act_number=3, title="Escape", duration=2),
            ],
        )

        result = await BatchSegmentOrchestrator(pipeline).produce_movie("proj-1", movie)

        assert result.success is True
        assert [v.segment_id for v in result.videos] == ["act-1", "act-3"]
        assert [r.status for r in result.progress.segment_results] == [
            SegmentStatus.COMPLETED,
            SegmentStatus.FAILED,
            SegmentStatus.COMPLETED,
        ]
        assert "at most 20 scenes" in result.progress.segment_results[1].error
        assert len(result.progress.errors) == 1
        assert result.progress.errors[0].startswith("Act 2 failed: ")
        assert len(pipeline.requests) == 2
