"""
Pydantic models and result types for a single production run.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from studio.config import config

from .progress import ProductionProgress


DEFAULT_SCENE_DURATION = 10.0
SHOT_DURATION = 5.0


class SceneInput(BaseModel):
    """One narrative scene supplied by the caller (or synthesized from a prompt)."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: Optional[str] = Field(default=None)
    description: str = Field(..., min_length=1)
    dialogue: Optional[list[str]] = Field(default=None)
    duration: Optional[float] = Field(default=None, gt=0)
    mood: Optional[str] = Field(default=None)
    setting: Optional[str] = Field(default=None)

    @property
    def effective_duration(self) -> float:
        return self.duration or DEFAULT_SCENE_DURATION


class AudioPreferences(BaseModel):
    include_music_track: bool = Field(default=True)
    include_voiceover: bool = Field(default=True)
    music_volume: float = Field(default=0.3, ge=0, le=1)
    voiceover_volume: float = Field(default=1.0, ge=0, le=1)
    default_voice: str = Field(default="nova")


class GenerationPreferences(BaseModel):
    music_mood: Optional[str] = Field(default=None)
    music_genre: Optional[str] = Field(default=None)
    video_aspect_ratio: Literal["16:9", "9:16", "1:1"] = Field(default="16:9")


class AssemblyPreferences(BaseModel):
    resolution: Literal["720p", "1080p", "4k"] = Field(default="1080p")
    aspect_ratio: str = Field(default="16:9")
    transition_type: Literal["cut", "fade", "dissolve", "wipe"] = Field(default="fade")
    transition_duration: float = Field(default=0.5, ge=0, le=2.0)
    format: Literal["mp4", "webm", "gif"] = Field(default="mp4")
    quality: Literal["low", "medium", "high"] = Field(default="high")
    fps: int = Field(default=30, gt=0, le=60)


class ProductionSettings(BaseModel):
    audio_preferences: AudioPreferences = Field(default_factory=AudioPreferences)
    generation_preferences: GenerationPreferences = Field(default_factory=GenerationPreferences)
    assembly_preferences: AssemblyPreferences = Field(default_factory=AssemblyPreferences)


class ProductionRequest(BaseModel):
    """
    Request to produce one finished video.

    Either ``scenes`` or ``prompt`` must yield work; a request with neither
    is rejected by the pipeline with a validation failure rather than here,
    so the caller still gets a ProductionResult back.

    Prompt length and scene count are capped by ``config.limits``. Requests
    built internally can lift the prompt cap by validating with
    ``context={"max_prompt_length": None}``.
    """
    project_id: str = Field(..., min_length=1)
    user_id: Optional[str] = Field(default=None)
    prompt: Optional[str] = Field(default=None)
    scenes: Optional[list[SceneInput]] = Field(default=None)
    settings: ProductionSettings = Field(default_factory=ProductionSettings)
    title: Optional[str] = Field(default=None)
    genre: Optional[str] = Field(default=None)
    target_duration: Optional[float] = Field(default=None, gt=0)

    @field_validator("prompt")
    @classmethod
    def validate_prompt_length(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        context = info.context or {}
        limit = context.get("max_prompt_length", config.limits.max_prompt_length)
        if value is not None and limit is not None and len(value) > limit:
            raise ValueError(f"prompt must be at most {limit} characters")
        return value

    @field_validator("scenes")
    @classmethod
    def validate_scene_count(cls, value: Optional[list[SceneInput]]) -> Optional[list[SceneInput]]:
        limit = config.limits.max_scenes
        if value is not None and len(value) > limit:
            raise ValueError(f"at most {limit} scenes are allowed per production")
        return value

    @model_validator(mode="after")
    def validate_scene_ids(self) -> Self:
        if self.scenes:
            ids = [s.id for s in self.scenes]
            if len(ids) != len(set(ids)):
                raise ValueError("scene ids must be unique")
        return self

    @property
    def has_scenes(self) -> bool:
        return bool(self.scenes)

    @property
    def has_prompt(self) -> bool:
        return bool(self.prompt and self.prompt.strip())

    @property
    def wants_music(self) -> bool:
        return self.settings.audio_preferences.include_music_track is not False

    @property
    def wants_voiceover(self) -> bool:
        return self.settings.audio_preferences.include_voiceover is not False

    def dialogue_lines(self) -> list[str]:
        lines: list[str] = []
        for scene in self.scenes or []:
            lines.extend(scene.dialogue or [])
        return lines


@dataclass
class GeneratedShot:
    """One planned shot. ``video_url`` is set exactly once, on success."""
    id: str
    scene_id: str
    description: str
    order: int
    video_url: Optional[str] = None
    duration: float = SHOT_DURATION

    @property
    def is_generated(self) -> bool:
        return self.video_url is not None

    def attach_video(self, url: str) -> None:
        if self.video_url is not None:
            raise ValueError(f"Shot {self.id} already has a video attached")
        self.video_url = url


@dataclass
class ClipAsset:
    scene_id: str
    url: str
    duration: float = SHOT_DURATION

    def to_dict(self) -> Dict[str, Any]:
        return {"scene_id": self.scene_id, "url": self.url, "duration": self.duration}


@dataclass
class AudioAsset:
    url: str
    duration: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "duration": self.duration}


@dataclass
class ProductionAssets:
    """Every intermediate asset a run produced."""
    video_clips: List[ClipAsset] = field(default_factory=list)
    music_track: Optional[AudioAsset] = None
    voiceover_track: Optional[AudioAsset] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "video_clips": [c.to_dict() for c in self.video_clips],
            "music_track": self.music_track.to_dict() if self.music_track else None,
            "voiceover_track": self.voiceover_track.to_dict() if self.voiceover_track else None,
        }


@dataclass
class ProductionResult:
    """Outcome of a single production run."""
    success: bool
    progress: ProductionProgress
    credits_used: int = 0
    estimated_credits: int = 0
    video_url: Optional[str] = None
    duration: Optional[float] = None
    render_id: Optional[str] = None
    error: Optional[str] = None
    assets: Optional[ProductionAssets] = None

    @property
    def errors(self) -> List[str]:
        return list(self.progress.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "video_url": self.video_url,
            "duration": self.duration,
            "credits_used": self.credits_used,
            "estimated_credits": self.estimated_credits,
            "render_id": self.render_id,
            "error": self.error,
            "progress": self.progress.to_dict(),
            "assets": self.assets.to_dict() if self.assets else None,
        }
