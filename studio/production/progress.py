"""
Progress snapshots for production runs.

Each transition produces a new immutable ProductionProgress; the
ProgressReporter owns the current snapshot and pushes every new one
to the caller's observer.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional, Tuple

from .enums import ProductionStage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductionProgress:
    stage: ProductionStage = ProductionStage.INITIALIZING
    progress: int = 0
    current_step: str = "Starting production..."
    completed_steps: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "progress": self.progress,
            "current_step": self.current_step,
            "completed_steps": list(self.completed_steps),
            "errors": list(self.errors),
        }


ProgressObserver = Callable[[ProductionProgress], None]


class ProgressReporter:
    """
    Tracks progress for one run.

    Percent never decreases: a lower value than the current one is raised
    to the current one.
    """

    def __init__(self, observer: Optional[ProgressObserver] = None):
        self._observer = observer
        self._snapshot = ProductionProgress()

    @property
    def snapshot(self) -> ProductionProgress:
        return self._snapshot

    def update(
        self,
        stage: ProductionStage,
        progress: float,
        current_step: str,
        completed_step: Optional[str] = None,
    ) -> ProductionProgress:
        percent = int(round(min(100.0, max(0.0, progress))))
        percent = max(self._snapshot.progress, percent)

        completed = self._snapshot.completed_steps
        if completed_step:
            completed = completed + (completed_step,)

        return self._publish(replace(
            self._snapshot,
            stage=stage,
            progress=percent,
            current_step=current_step,
            completed_steps=completed,
        ))

    def add_error(self, message: str) -> ProductionProgress:
        return self._publish(replace(self._snapshot, errors=self._snapshot.errors + (message,)))

    def fail(self, message: str) -> ProductionProgress:
        return self._publish(replace(
            self._snapshot,
            stage=ProductionStage.FAILED,
            current_step=message,
            errors=self._snapshot.errors + (message,),
        ))

    def _publish(self, snapshot: ProductionProgress) -> ProductionProgress:
        self._snapshot = snapshot
        if self._observer is not None:
            try:
                self._observer(snapshot)
            except Exception as e:
                logger.warning(f"[PRODUCTION] Progress observer raised: {e}")
        return snapshot
