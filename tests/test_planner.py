"""
Tests for shot planning.
"""
import pytest

from studio.config import config
from studio.production.models import SceneInput
from studio.production.planner import (
    QUALITY_SUFFIX,
    build_shot_description,
    normalize_target_duration,
    plan_scene,
    plan_shots,
    planned_shot_count,
    scenes_from_prompt,
    shots_for_duration,
)


class TestShotCounts:
    """Tests for shots per scene."""

    @pytest.mark.parametrize("duration,expected", [
        (1, 1),
        (5, 1),
        (10, 2),
        (12, 3),
        (30, 6),
    ])
    def test_shots_for_duration(self, duration, expected):
        assert shots_for_duration(duration) == expected

    def test_missing_duration_defaults_to_ten_seconds(self):
        scene = SceneInput(id="s", description="An empty street")
        assert len(plan_scene(scene)) == 2

    def test_planned_count_matches_plan(self):
        scenes = [
            SceneInput(id="a", description="a", duration=12),
            SceneInput(id="b", description="b", duration=4),
            SceneInput(id="c", description="c"),
        ]
        assert planned_shot_count(scenes) == len(plan_shots(scenes)) == 6


class TestShotDescriptions:
    """Tests for the visual prompt of each shot."""

    def test_full_description(self):
        scene = SceneInput(
            id="s1",
            description="A hero crosses the dunes",
            setting="a red desert",
            mood="tense",
            duration=10,
        )
        shots = plan_scene(scene)

        assert shots[0].description == (
            "Opening, establishing wide shot, A hero crosses the dunes, "
            "in a red desert, tense mood, cinematic, high quality, 8K"
        )
        assert shots[1].description.startswith("Final, medium shot, A hero crosses the dunes")

    def test_middle_shots_have_no_position_prefix(self):
        scene = SceneInput(id="s", description="Rain on glass", duration=15)
        description = build_shot_description(scene, 1, 3)

        assert description == f"medium shot, Rain on glass, {QUALITY_SUFFIX}"

    def test_shot_types_rotate(self):
        scene = SceneInput(id="s", description="Market", duration=30)
        shots = plan_scene(scene)

        assert "close-up" in shots[2].description
        assert "dynamic tracking shot" in shots[3].description
        assert shots[4].description.startswith("establishing wide shot")

    def test_single_shot_scene_is_opening(self):
        scene = SceneInput(id="s", description="Flash", duration=3)
        assert plan_scene(scene)[0].description.startswith("Opening, ")


class TestPlanShots:
    """Tests for plan_shots ordering and ids."""

    def test_ids_and_order(self):
        scenes = [
            SceneInput(id="a", description="first", duration=10),
            SceneInput(id="b", description="second", duration=5),
        ]
        shots = plan_shots(scenes)

        assert [s.id for s in shots] == ["shot-a-0", "shot-a-1", "shot-b-0"]
        assert [s.order for s in shots] == [0, 1, 2]
        assert [s.scene_id for s in shots] == ["a", "a", "b"]
        assert all(s.duration == 5 for s in shots)
        assert all(s.video_url is None for s in shots)

    def test_planning_is_deterministic(self):
        scenes = [SceneInput(id="a", description="first", mood="calm", duration=20)]
        assert [s.description for s in plan_shots(scenes)] == [s.description for s in plan_shots(scenes)]

    def test_attach_video_only_once(self):
        shot = plan_shots([SceneInput(id="a", description="first")])[0]
        shot.attach_video("https://cdn.test/a.mp4")

        with pytest.raises(ValueError):
            shot.attach_video("https://cdn.test/b.mp4")
        assert shot.video_url == "https://cdn.test/a.mp4"


class TestScenesFromPrompt:
    """Tests for prompt-only scene synthesis."""

    def test_one_minute_prompt(self):
        scenes = scenes_from_prompt("A city wakes up", 60)

        assert [s.id for s in scenes] == ["scene-1", "scene-2", "scene-3"]
        assert scenes[0].description == "Opening: A city wakes up"
        assert scenes[1].description == "Development: A city wakes up"
        assert scenes[2].description == "Conclusion: A city wakes up"
        assert all(s.mood == "cinematic" for s in scenes)
        assert planned_shot_count(scenes) == 12

    def test_two_scenes_have_no_development(self):
        scenes = scenes_from_prompt("A city wakes up", 30)

        assert [s.description.split(":")[0] for s in scenes] == ["Opening", "Conclusion"]
        assert planned_shot_count(scenes) == 6

    def test_short_target(self):
        scenes = scenes_from_prompt("Spark", 7)

        assert len(scenes) == 1
        assert scenes[0].description == "Opening: Spark"
        assert planned_shot_count(scenes) == 2

    def test_default_target(self):
        assert planned_shot_count(scenes_from_prompt("Spark")) == 12

    @pytest.mark.parametrize("target", [10, 45, 61, 99, 300])
    def test_shot_count_matches_estimate(self, target):
        import math
        assert planned_shot_count(scenes_from_prompt("x", target)) == math.ceil(target / 5)


class TestNormalizeTargetDuration:
    """Tests for target duration clamping."""

    @pytest.mark.parametrize("value,expected", [
        (None, 60),
        (5, 10),
        (45, 45),
        (500, 300),
    ])
    def test_clamp(self, value, expected):
        assert normalize_target_duration(value) == expected

    def test_clamp_follows_configured_limits(self, monkeypatch):
        monkeypatch.setattr(config.limits, "min_duration_seconds", 20.0)
        monkeypatch.setattr(config.limits, "max_duration_seconds", 120.0)

        assert normalize_target_duration(5) == 20
        assert normalize_target_duration(500) == 120
