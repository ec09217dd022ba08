"""
Batch production: TV series (episodes) and movies (acts).
"""
from .models import (
    CharacterProfile,
    EpisodeConfig,
    SeriesConfig,
    ActConfig,
    MovieConfig,
    SegmentResult,
    BatchProductionProgress,
    BatchProductionResult,
    SegmentVideo,
)
from .prompts import (
    build_continuity_context,
    build_episode_prompt,
    build_act_prompt,
    generate_default_acts,
)
from .orchestrator import BatchSegmentOrchestrator

__all__ = [
    "CharacterProfile",
    "EpisodeConfig",
    "SeriesConfig",
    "ActConfig",
    "MovieConfig",
    "SegmentResult",
    "BatchProductionProgress",
    "BatchProductionResult",
    "SegmentVideo",
    "build_continuity_context",
    "build_episode_prompt",
    "build_act_prompt",
    "generate_default_acts",
    "BatchSegmentOrchestrator",
]
