"""
Production exceptions.
"""
from typing import List, Optional


class ProductionError(Exception):
    """Base production error."""

    def __init__(self, message: str, code: str = "PRODUCTION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ConfigurationError(ProductionError):
    """Raised when a required provider is not configured."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            message=f"Production not fully configured. Missing: {', '.join(self.missing)}",
            code="CONFIGURATION_ERROR",
        )


class ValidationError(ProductionError):
    """Raised when a request cannot be turned into work."""

    def __init__(self, message: str):
        super().__init__(message=message, code="VALIDATION_ERROR")


class UnitGenerationError(ProductionError):
    """A single shot, music or voiceover call failed."""

    def __init__(self, unit: str, message: str):
        self.unit = unit
        super().__init__(message=message, code="UNIT_GENERATION_ERROR")


class AssemblyError(ProductionError):
    """Render submission failed, the render failed, or polling timed out."""

    def __init__(self, message: str, render_id: Optional[str] = None):
        self.render_id = render_id
        super().__init__(message=message, code="ASSEMBLY_ERROR")


class ProductionCancelled(ProductionError):
    """Raised when a run is cancelled or its deadline passes."""

    def __init__(self, message: str = "Production cancelled"):
        super().__init__(message=message, code="CANCELLED")


class PersistenceWarning(UserWarning):
    """Durable storage handoff failed; the transient URL is kept."""
