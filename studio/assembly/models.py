"""
Assembly data model.

Declarative, provider-agnostic description of the final edit:
AssemblyOptions (what the caller wants) -> Timeline (what a render provider receives).
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional


DEFAULT_CLIP_DURATION = 5.0

Resolution = Literal["720p", "1080p", "4k"]
TransitionType = Literal["cut", "fade", "dissolve", "wipe"]
AudioTrackType = Literal["music", "voiceover", "sfx"]


class RenderStatus(str, Enum):
    """Normalized render job state: queued -> rendering -> (completed | failed)."""
    QUEUED = "queued"
    RENDERING = "rendering"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RenderStatus.COMPLETED, RenderStatus.FAILED)

    @classmethod
    def normalize(
        cls,
        provider_status: Optional[str],
        mapping: Dict[str, "RenderStatus"],
    ) -> "RenderStatus":
        """
        Map a provider-native state onto the closed enum.

        Unknown or missing states resolve to RENDERING, so a new provider state
        keeps the poll loop alive instead of ending the job.
        """
        if not provider_status:
            return cls.RENDERING
        return mapping.get(provider_status.lower(), cls.RENDERING)


@dataclass
class VideoClip:
    url: str
    start_time: Optional[float] = None  # Position in the timeline (seconds)
    duration: Optional[float] = None
    trim_start: Optional[float] = None
    trim_end: Optional[float] = None

    @property
    def effective_duration(self) -> float:
        return self.duration or DEFAULT_CLIP_DURATION


@dataclass
class AudioTrack:
    url: str
    type: AudioTrackType = "music"
    volume: Optional[float] = None  # 0-1
    start_time: Optional[float] = None
    fade_in: Optional[float] = None
    fade_out: Optional[float] = None
    loop: bool = False

    @property
    def effective_volume(self) -> float:
        if self.volume is not None:
            return self.volume
        return 0.3 if self.type == "music" else 1.0


@dataclass
class TextOverlay:
    text: str
    start_time: float
    duration: float
    position: Literal["top", "center", "bottom"] = "bottom"
    style: Literal["title", "subtitle", "caption"] = "subtitle"
    font_size: Optional[int] = None
    color: Optional[str] = None


@dataclass
class AssemblyOptions:
    """Everything the assembly stage needs to produce one final video."""
    project_id: str
    clips: List[VideoClip]
    scene_id: Optional[str] = None
    audio_tracks: List[AudioTrack] = field(default_factory=list)
    text_overlays: List[TextOverlay] = field(default_factory=list)
    resolution: Resolution = "1080p"
    aspect_ratio: str = "16:9"
    fps: int = 30
    transition_type: TransitionType = "fade"
    transition_duration: float = 0.5
    format: Literal["mp4", "webm", "gif"] = "mp4"
    quality: Optional[Literal["low", "medium", "high"]] = "high"

    @property
    def total_clip_seconds(self) -> float:
        return sum(clip.effective_duration for clip in self.clips)


@dataclass
class TimelineClip:
    """One entry on a timeline track."""
    asset_type: Literal["video", "audio", "title"]
    start: float
    length: float
    src: Optional[str] = None
    text: Optional[str] = None
    volume: Optional[float] = None
    trim: Optional[float] = None
    transition_in: Optional[str] = None
    transition_out: Optional[str] = None
    fade_in: Optional[float] = None
    fade_out: Optional[float] = None
    loop: bool = False
    position: Optional[str] = None
    style: Optional[str] = None
    font_size: Optional[int] = None
    color: Optional[str] = None


@dataclass
class TimelineTrack:
    kind: Literal["video", "music", "voiceover", "sfx", "text"]
    clips: List[TimelineClip] = field(default_factory=list)


@dataclass
class Timeline:
    """Declarative edit handed to an assembly provider."""
    tracks: List[TimelineTrack]
    duration: float
    resolution: Resolution = "1080p"
    aspect_ratio: str = "16:9"
    fps: int = 30
    format: str = "mp4"
    quality: Optional[str] = None
    background: str = "#000000"

    def track(self, kind: str) -> Optional[TimelineTrack]:
        for t in self.tracks:
            if t.kind == kind:
                return t
        return None


@dataclass
class RenderSubmission:
    success: bool
    render_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class AssemblyStatus:
    status: RenderStatus
    progress: Optional[float] = None
    video_url: Optional[str] = None
    error: Optional[str] = None


@dataclass
class AssemblyResult:
    success: bool
    video_url: Optional[str] = None
    render_id: Optional[str] = None
    duration: Optional[float] = None
    credits_used: int = 0
    status: Optional[RenderStatus] = None
    progress: Optional[float] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "video_url": self.video_url,
            "render_id": self.render_id,
            "duration": self.duration,
            "credits_used": self.credits_used,
            "status": self.status.value if self.status else None,
            "progress": self.progress,
            "error": self.error,
        }
