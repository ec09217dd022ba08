"""
Batch production models: series and movie configs, progress snapshots
and results.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from studio.production.enums import ProductionType, SegmentStatus
from studio.production.models import SceneInput


class CharacterProfile(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    role: Literal["protagonist", "antagonist", "supporting", "minor"] = Field(default="supporting")
    traits: Optional[list[str]] = Field(default=None)


class EpisodeConfig(BaseModel):
    episode_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    synopsis: str = Field(default="")
    scenes: Optional[list[SceneInput]] = Field(default=None)
    plot_points: Optional[list[str]] = Field(default=None)


class SeriesConfig(BaseModel):
    title: str = Field(..., min_length=1)
    genre: str = Field(default="drama")
    synopsis: str = Field(default="")
    season_number: int = Field(default=1, ge=1)
    episode_count: int = Field(default=0, ge=0)
    episode_duration: float = Field(default=60, gt=0)  # seconds per episode
    main_characters: list[CharacterProfile] = Field(default_factory=list)
    setting: Optional[str] = Field(default=None)
    overarching_plot: Optional[str] = Field(default=None)
    episodes: list[EpisodeConfig] = Field(default_factory=list)


class ActConfig(BaseModel):
    act_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    synopsis: str = Field(default="")
    duration: float = Field(default=0, ge=0)  # minutes
    scenes: Optional[list[SceneInput]] = Field(default=None)
    plot_points: Optional[list[str]] = Field(default=None)


class MovieConfig(BaseModel):
    title: str = Field(..., min_length=1)
    genre: str = Field(default="drama")
    synopsis: str = Field(default="")
    target_duration: float = Field(default=5, gt=0)  # total minutes
    main_characters: list[CharacterProfile] = Field(default_factory=list)
    setting: Optional[str] = Field(default=None)
    acts: list[ActConfig] = Field(default_factory=list)


@dataclass(frozen=True)
class SegmentResult:
    segment_id: str
    title: str
    status: SegmentStatus = SegmentStatus.PENDING
    video_url: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segment_id": self.segment_id,
            "title": self.title,
            "status": self.status.value,
            "video_url": self.video_url,
            "error": self.error,
        }


@dataclass(frozen=True)
class BatchProductionProgress:
    """Immutable snapshot of a batch run."""
    type: ProductionType
    title: str
    total_segments: int
    completed_segments: int = 0
    current_segment: Optional[str] = None
    overall_progress: int = 0
    segment_results: Tuple[SegmentResult, ...] = ()
    errors: Tuple[str, ...] = ()

    def with_segment(self, index: int, **changes) -> "BatchProductionProgress":
        results = list(self.segment_results)
        results[index] = replace(results[index], **changes)
        return replace(self, segment_results=tuple(results))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "total_segments": self.total_segments,
            "completed_segments": self.completed_segments,
            "current_segment": self.current_segment,
            "overall_progress": self.overall_progress,
            "segment_results": [r.to_dict() for r in self.segment_results],
            "errors": list(self.errors),
        }


BatchProgressObserver = Callable[[BatchProductionProgress], None]


@dataclass
class SegmentVideo:
    segment_id: str
    title: str
    video_url: str
    duration: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segment_id": self.segment_id,
            "title": self.title,
            "video_url": self.video_url,
            "duration": self.duration,
        }


@dataclass
class BatchProductionResult:
    success: bool
    type: ProductionType
    title: str
    progress: BatchProductionProgress
    videos: List[SegmentVideo] = field(default_factory=list)
    total_duration: float = 0.0
    total_credits_used: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "type": self.type.value,
            "title": self.title,
            "videos": [v.to_dict() for v in self.videos],
            "total_duration": self.total_duration,
            "total_credits_used": self.total_credits_used,
            "progress": self.progress.to_dict(),
            "error": self.error,
        }
