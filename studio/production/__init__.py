"""
Production layer.

Single-run building blocks: shot planning, credit estimation, generation
and progress tracking. The pipeline that ties them together lives in
studio.production.pipeline.
"""
from .enums import ProductionStage, SegmentStatus, ProductionType
from .exceptions import (
    ProductionError,
    ConfigurationError,
    ValidationError,
    UnitGenerationError,
    AssemblyError,
    ProductionCancelled,
    PersistenceWarning,
)
from .context import CancellationToken
from .progress import ProductionProgress, ProgressReporter, ProgressObserver
from .models import (
    SceneInput,
    AudioPreferences,
    GenerationPreferences,
    AssemblyPreferences,
    ProductionSettings,
    ProductionRequest,
    GeneratedShot,
    ClipAsset,
    AudioAsset,
    ProductionAssets,
    ProductionResult,
)
from .planner import (
    SHOT_TYPES,
    QUALITY_SUFFIX,
    build_shot_description,
    plan_scene,
    plan_shots,
    scenes_from_prompt,
    normalize_target_duration,
)
from .cost import (
    CostBreakdown,
    CreditEstimate,
    estimate_production_credits,
    estimate_assembly_credits,
    estimate_series_credits,
    estimate_movie_credits,
    voiceover_credits,
)
from .generation import GenerationCoordinator, GenerationOutcome

__all__ = [
    # Enums
    "ProductionStage",
    "SegmentStatus",
    "ProductionType",

    # Exceptions
    "ProductionError",
    "ConfigurationError",
    "ValidationError",
    "UnitGenerationError",
    "AssemblyError",
    "ProductionCancelled",
    "PersistenceWarning",

    # Progress / cancellation
    "CancellationToken",
    "ProductionProgress",
    "ProgressReporter",
    "ProgressObserver",

    # Models
    "SceneInput",
    "AudioPreferences",
    "GenerationPreferences",
    "AssemblyPreferences",
    "ProductionSettings",
    "ProductionRequest",
    "GeneratedShot",
    "ClipAsset",
    "AudioAsset",
    "ProductionAssets",
    "ProductionResult",

    # Planning
    "SHOT_TYPES",
    "QUALITY_SUFFIX",
    "build_shot_description",
    "plan_scene",
    "plan_shots",
    "scenes_from_prompt",
    "normalize_target_duration",

    # Cost
    "CostBreakdown",
    "CreditEstimate",
    "estimate_production_credits",
    "estimate_assembly_credits",
    "estimate_series_credits",
    "estimate_movie_credits",
    "voiceover_credits",

    # Generation
    "GenerationCoordinator",
    "GenerationOutcome",
]
