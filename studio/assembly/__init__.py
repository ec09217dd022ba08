"""
Assembly layer: timeline model and the render coordinator.
"""
from .models import (
    RenderStatus,
    VideoClip,
    AudioTrack,
    TextOverlay,
    AssemblyOptions,
    Timeline,
    TimelineTrack,
    TimelineClip,
    RenderSubmission,
    AssemblyStatus,
    AssemblyResult,
)
from .coordinator import AssemblyCoordinator, build_timeline

__all__ = [
    "RenderStatus",
    "VideoClip",
    "AudioTrack",
    "TextOverlay",
    "AssemblyOptions",
    "Timeline",
    "TimelineTrack",
    "TimelineClip",
    "RenderSubmission",
    "AssemblyStatus",
    "AssemblyResult",
    "AssemblyCoordinator",
    "build_timeline",
]
