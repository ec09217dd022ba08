"""
Credit estimation for productions.

Pure functions: no provider calls, no side effects. The same request
always yields the same estimate.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TYPE_CHECKING

from .models import ProductionRequest, ProductionSettings, SHOT_DURATION
from .planner import DEFAULT_TARGET_DURATION, planned_shot_count

if TYPE_CHECKING:
    from studio.assembly.models import AssemblyOptions
    from studio.batch.models import MovieConfig, SeriesConfig


CREDITS_PER_SHOT = 10
MUSIC_CREDITS = 5
VOICEOVER_CREDITS_PER_1000_CHARS = 2
MIN_VOICEOVER_CREDITS = 2
NARRATION_CHARS_PER_MINUTE = 500
ASSEMBLY_CREDITS_PER_MINUTE = 50
MIN_ASSEMBLY_MINUTES = 0.5


@dataclass
class CostBreakdown:
    video: int = 0
    music: int = 0
    voiceover: int = 0
    assembly: int = 0

    @property
    def total(self) -> int:
        return self.video + self.music + self.voiceover + self.assembly

    def scaled(self, factor: int) -> "CostBreakdown":
        return CostBreakdown(
            video=self.video * factor,
            music=self.music * factor,
            voiceover=self.voiceover * factor,
            assembly=self.assembly * factor,
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "video": self.video,
            "music": self.music,
            "voiceover": self.voiceover,
            "assembly": self.assembly,
        }


@dataclass
class CreditEstimate:
    total: int
    breakdown: CostBreakdown = field(default_factory=CostBreakdown)
    shot_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "breakdown": self.breakdown.to_dict(),
            "shot_count": self.shot_count,
        }


def voiceover_credits(char_count: float) -> int:
    """2 credits per started 1000 characters, minimum 2."""
    return max(
        MIN_VOICEOVER_CREDITS,
        math.ceil(char_count / 1000) * VOICEOVER_CREDITS_PER_1000_CHARS,
    )


def assembly_credits_for_seconds(seconds: float) -> int:
    """50 credits per minute of output, billed for at least half a minute."""
    minutes = max(MIN_ASSEMBLY_MINUTES, seconds / 60)
    return math.ceil(minutes * ASSEMBLY_CREDITS_PER_MINUTE)


def estimate_assembly_credits(options: "AssemblyOptions") -> int:
    seconds = options.total_clip_seconds
    boundaries = max(0, len(options.clips) - 1)
    if options.transition_type != "cut":
        seconds -= boundaries * options.transition_duration / 2
    return assembly_credits_for_seconds(seconds)


def estimate_production_credits(request: ProductionRequest) -> CreditEstimate:
    """
    Estimate the cost of a single production before any provider is called.

    Explicit scenes are estimated at their planned shot count; prompt-only
    requests at one shot per 5 seconds of target duration.
    """
    target = request.target_duration or DEFAULT_TARGET_DURATION

    if request.scenes:
        shot_count = planned_shot_count(request.scenes)
    else:
        shot_count = math.ceil(target / SHOT_DURATION)

    breakdown = CostBreakdown(
        video=shot_count * CREDITS_PER_SHOT,
        assembly=assembly_credits_for_seconds(shot_count * SHOT_DURATION),
    )

    if request.wants_music:
        breakdown.music = MUSIC_CREDITS

    if request.wants_voiceover:
        lines = request.dialogue_lines()
        if lines:
            chars = len(". ".join(lines))
        else:
            chars = (target / 60) * NARRATION_CHARS_PER_MINUTE
        breakdown.voiceover = voiceover_credits(chars)

    return CreditEstimate(total=breakdown.total, breakdown=breakdown, shot_count=shot_count)


def _scaled_estimate(per_segment: CreditEstimate, count: int) -> CreditEstimate:
    breakdown = per_segment.breakdown.scaled(count)
    return CreditEstimate(
        total=per_segment.total * count,
        breakdown=breakdown,
        shot_count=per_segment.shot_count * count,
    )


def estimate_series_credits(
    config: "SeriesConfig",
    settings: Optional[ProductionSettings] = None,
) -> CreditEstimate:
    """Per-episode estimate times the number of episodes."""
    per_episode = estimate_production_credits(ProductionRequest(
        project_id="estimate",
        target_duration=config.episode_duration,
        settings=settings or ProductionSettings(),
    ))
    count = len(config.episodes) or config.episode_count
    return _scaled_estimate(per_episode, count)


def estimate_movie_credits(
    config: "MovieConfig",
    settings: Optional[ProductionSettings] = None,
) -> CreditEstimate:
    """Per-act estimate times the number of acts (three when none are given)."""
    act_count = len(config.acts) or 3
    per_act = estimate_production_credits(ProductionRequest(
        project_id="estimate",
        target_duration=config.target_duration * 60 / act_count,
        settings=settings or ProductionSettings(),
    ))
    return _scaled_estimate(per_act, act_count)
