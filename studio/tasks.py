"""
Celery tasks for production runs.

Each task runs one production (or one batch) to completion inside the
worker, publishing progress snapshots through update_state.
"""
import asyncio
import logging
from typing import Any, Optional

from celery import Task
from celery.exceptions import SoftTimeLimitExceeded

from studio.batch.models import BatchProductionProgress, MovieConfig, SeriesConfig
from studio.batch.orchestrator import BatchSegmentOrchestrator
from studio.celery_app import celery_app
from studio.credits import CreditGate, InsufficientCreditsError
from studio.production.context import CancellationToken
from studio.production.cost import estimate_production_credits
from studio.production.exceptions import ValidationError
from studio.production.models import ProductionRequest, ProductionSettings
from studio.production.pipeline import ProductionPipeline
from studio.production.progress import ProductionProgress

logger = logging.getLogger(__name__)

# Leave the worker time to report before the soft limit fires
RUN_DEADLINE_SECONDS = 6600


class ProductionTask(Task):
    """
    Base Celery task with pipeline construction and lifecycle logging.

    Each run gets a fresh pipeline: provider HTTP clients are bound to the
    event loop of the asyncio.run call that created them.
    """

    abstract = True
    track_started = True
    acks_late = True
    reject_on_worker_lost = True

    def build_pipeline(self) -> ProductionPipeline:
        return ProductionPipeline()

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(f"Task {task_id} failed: {exc}")
        super().on_failure(exc, task_id, args, kwargs, einfo)

    def on_success(self, retval, task_id, args, kwargs):
        logger.info(f"Task {task_id} finished (success={retval.get('success')})")
        super().on_success(retval, task_id, args, kwargs)


def create_progress_callback(task: Task, task_id: str):
    """
    Factory for creating Celery progress callback.
    Updates task state with production progress.
    """
    def callback(progress: ProductionProgress) -> None:
        task.update_state(
            task_id=task_id,
            state="PROGRESS",
            meta=progress.to_dict(),
        )

    return callback


def create_batch_progress_callback(task: Task, task_id: str):
    """Same as create_progress_callback, for batch snapshots."""
    def callback(progress: BatchProductionProgress) -> None:
        task.update_state(
            task_id=task_id,
            state="PROGRESS",
            meta=progress.to_dict(),
        )

    return callback


def _failure(error: str, **extra: Any) -> dict[str, Any]:
    return {"success": False, "error": error, "credits_used": 0, **extra}


@celery_app.task(
    base=ProductionTask,
    bind=True,
    name="production.produce_episode",
    time_limit=7200,
    soft_time_limit=6900,
)
def produce_episode_task(
    self,
    request_json: dict[str, Any],
    available_credits: Optional[int] = None,
    unlimited_credits: bool = False,
) -> dict[str, Any]:
    """
    Run a single production.

    Args:
        request_json: ProductionRequest as a dictionary
        available_credits: Caller's balance; checked against the estimate when given
        unlimited_credits: Skip the balance check

    Returns:
        ProductionResult as dictionary
    """
    task_id = self.request.id

    try:
        request = ProductionRequest.model_validate(request_json)
    except ValueError as e:
        logger.error(f"Invalid production request for task {task_id}: {e}")
        return _failure(f"Invalid input: {e}")

    logger.info(f"Starting production task {task_id} for project {request.project_id}")

    if available_credits is not None:
        estimate = estimate_production_credits(request)
        try:
            CreditGate().require(available_credits, estimate, request.user_id, unlimited_credits)
        except InsufficientCreditsError as e:
            return _failure(e.message, code=e.code, required=e.required, available=e.available)

    try:
        token = CancellationToken(timeout=RUN_DEADLINE_SECONDS)
        result = asyncio.run(self.build_pipeline().produce(
            request,
            on_progress=create_progress_callback(self, task_id),
            token=token,
        ))
        return result.to_dict()

    except SoftTimeLimitExceeded:
        logger.error(f"Task {task_id} exceeded soft time limit for project {request.project_id}")
        return _failure("Task exceeded time limit")


def _run_batch(task: ProductionTask, coro_factory) -> dict[str, Any]:
    task_id = task.request.id
    try:
        result = asyncio.run(coro_factory(
            BatchSegmentOrchestrator(task.build_pipeline()),
            create_batch_progress_callback(task, task_id),
        ))
        return result.to_dict()
    except ValidationError as e:
        logger.error(f"Invalid batch for task {task_id}: {e.message}")
        return _failure(e.message)
    except SoftTimeLimitExceeded:
        logger.error(f"Task {task_id} exceeded soft time limit")
        return _failure("Task exceeded time limit")


@celery_app.task(
    base=ProductionTask,
    bind=True,
    name="production.produce_series",
    time_limit=43200,
    soft_time_limit=42900,
)
def produce_series_task(
    self,
    project_id: str,
    config_json: dict[str, Any],
    user_id: Optional[str] = None,
    settings_json: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Produce every episode of a series in order."""
    try:
        config = SeriesConfig.model_validate(config_json)
        settings = ProductionSettings.model_validate(settings_json) if settings_json else None
    except ValueError as e:
        return _failure(f"Invalid input: {e}")

    logger.info(f"Starting series task {self.request.id}: {config.title} ({len(config.episodes)} episodes)")

    return _run_batch(self, lambda orchestrator, callback: orchestrator.produce_series(
        project_id, config, user_id=user_id, settings=settings, on_progress=callback,
    ))


@celery_app.task(
    base=ProductionTask,
    bind=True,
    name="production.produce_movie",
    time_limit=43200,
    soft_time_limit=42900,
)
def produce_movie_task(
    self,
    project_id: str,
    config_json: dict[str, Any],
    user_id: Optional[str] = None,
    settings_json: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Produce every act of a movie in order."""
    try:
        config = MovieConfig.model_validate(config_json)
        settings = ProductionSettings.model_validate(settings_json) if settings_json else None
    except ValueError as e:
        return _failure(f"Invalid input: {e}")

    logger.info(f"Starting movie task {self.request.id}: {config.title}")

    return _run_batch(self, lambda orchestrator, callback: orchestrator.produce_movie(
        project_id, config, user_id=user_id, settings=settings, on_progress=callback,
    ))


@celery_app.task(name="production.get_task_status")
def get_task_status(task_id: str) -> dict[str, Any]:
    """
    Get status of a production task.

    Args:
        task_id: Celery task ID

    Returns:
        Task status and metadata
    """
    result = celery_app.AsyncResult(task_id)

    response = {
        "task_id": task_id,
        "status": result.status,
        "ready": result.ready(),
    }

    if result.status == "PROGRESS":
        response["progress"] = result.info
    elif result.ready():
        response["result"] = result.result if result.successful() else None
        if result.failed():
            response["error"] = str(result.result)

    return response
