"""
Production enumerations.

Stages of a single production run, per-segment status for batch runs,
and the supported batch production types.
"""
from enum import Enum


class ProductionStage(str, Enum):
    """
    Stages of a production run, in the order they are entered.

    FAILED can be entered from any stage.
    """
    INITIALIZING = "initializing"
    GENERATING_SCRIPT = "generating-script"
    GENERATING_SHOTS = "generating-shots"
    GENERATING_VIDEO = "generating-video"
    GENERATING_MUSIC = "generating-music"
    GENERATING_VOICEOVER = "generating-voiceover"
    ASSEMBLING = "assembling"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_string(cls, value: str) -> "ProductionStage":
        """Get stage from string value."""
        value_lower = value.lower().replace("_", "-")
        for stage in cls:
            if stage.value == value_lower:
                return stage
        raise ValueError(f"Unknown production stage: {value}")

    @property
    def is_terminal(self) -> bool:
        return self in (ProductionStage.COMPLETED, ProductionStage.FAILED)

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            self.INITIALIZING: "Initializing",
            self.GENERATING_SCRIPT: "Preparing Scenes",
            self.GENERATING_SHOTS: "Planning Shots",
            self.GENERATING_VIDEO: "Generating Video",
            self.GENERATING_MUSIC: "Generating Music",
            self.GENERATING_VOICEOVER: "Generating Voiceover",
            self.ASSEMBLING: "Assembling",
            self.COMPLETED: "Completed",
            self.FAILED: "Failed",
        }
        return names.get(self, self.value)


class SegmentStatus(str, Enum):
    """Status of one episode or act within a batch run."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ProductionType(str, Enum):
    """Batch production types."""
    SERIES = "series"
    MOVIE = "movie"

    @classmethod
    def from_string(cls, value: str) -> "ProductionType":
        """Get production type from string value."""
        value_lower = value.lower()
        for kind in cls:
            if kind.value == value_lower:
                return kind
        raise ValueError(f"Unknown production type: {value}")

    @property
    def display_name(self) -> str:
        names = {
            self.SERIES: "TV Series",
            self.MOVIE: "Movie",
        }
        return names.get(self, self.value)

    @property
    def segment_label(self) -> str:
        """Name of one segment of this production type."""
        return "Episode" if self == ProductionType.SERIES else "Act"
