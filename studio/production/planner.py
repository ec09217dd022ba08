"""
Shot planning.

Breaks scenes into fixed-length shots and writes a visual prompt for each.
Everything here is pure and deterministic.
"""
import math
from typing import List, Optional

from studio.config import config

from .models import SceneInput, GeneratedShot, SHOT_DURATION

SHOT_TYPES = (
    "establishing wide shot",
    "medium shot",
    "close-up",
    "dynamic tracking shot",
)
QUALITY_SUFFIX = "cinematic, high quality, 8K"

DEFAULT_TARGET_DURATION = 60.0
PROMPT_SCENE_SECONDS = 20.0


def shots_for_duration(duration: float) -> int:
    """Number of shots needed to cover ``duration`` seconds (at least one)."""
    return max(1, math.ceil(duration / SHOT_DURATION))


def planned_shot_count(scenes: List[SceneInput]) -> int:
    return sum(shots_for_duration(scene.effective_duration) for scene in scenes)


def build_shot_description(scene: SceneInput, shot_index: int, total_shots: int) -> str:
    shot_type = SHOT_TYPES[shot_index % len(SHOT_TYPES)]

    parts = [shot_type, scene.description]
    if scene.setting:
        parts.append(f"in {scene.setting}")
    if scene.mood:
        parts.append(f"{scene.mood} mood")
    parts.append(QUALITY_SUFFIX)

    if shot_index == 0:
        parts.insert(0, "Opening")
    elif shot_index == total_shots - 1:
        parts.insert(0, "Final")

    return ", ".join(parts)


def plan_scene(scene: SceneInput, start_order: int = 0) -> List[GeneratedShot]:
    """Plan the shots for one scene; ``order`` continues from ``start_order``."""
    count = shots_for_duration(scene.effective_duration)
    return [
        GeneratedShot(
            id=f"shot-{scene.id}-{i}",
            scene_id=scene.id,
            description=build_shot_description(scene, i, count),
            order=start_order + i,
        )
        for i in range(count)
    ]


def plan_shots(scenes: List[SceneInput]) -> List[GeneratedShot]:
    """Plan every scene in order. ``order`` is the assembly order key."""
    shots: List[GeneratedShot] = []
    for scene in scenes:
        shots.extend(plan_scene(scene, start_order=len(shots)))
    return shots


def scenes_from_prompt(prompt: str, target_duration: Optional[float] = None) -> List[SceneInput]:
    """
    Synthesize a scene list from a free-text prompt.

    Scenes cover roughly 20 seconds each. The ``ceil(target / 5)`` shots
    a prompt-only request is estimated at are spread across the scenes, so
    the planned shot count matches the estimate exactly.
    """
    target = target_duration or DEFAULT_TARGET_DURATION
    prompt = prompt.strip()

    total_shots = max(1, math.ceil(target / SHOT_DURATION))
    scene_count = min(total_shots, max(1, math.ceil(target / PROMPT_SCENE_SECONDS)))
    base, extra = divmod(total_shots, scene_count)

    scenes = []
    for i in range(scene_count):
        if i == 0:
            description = f"Opening: {prompt}"
        elif i == scene_count - 1:
            description = f"Conclusion: {prompt}"
        else:
            description = f"Development: {prompt}"

        shot_count = base + (1 if i < extra else 0)
        scenes.append(SceneInput(
            id=f"scene-{i + 1}",
            title=f"Scene {i + 1}",
            description=description,
            duration=shot_count * SHOT_DURATION,
            mood="cinematic",
        ))

    return scenes


def normalize_target_duration(value: Optional[float]) -> float:
    """Clamp a requested duration to the configured range (10-300 seconds by default)."""
    if value is None:
        return DEFAULT_TARGET_DURATION
    limits = config.limits
    return min(limits.max_duration_seconds, max(limits.min_duration_seconds, float(value)))
