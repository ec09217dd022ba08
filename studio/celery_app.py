"""
Celery application configuration.
Settings for production workers.
"""
import os

from celery import Celery
from kombu import Queue

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

celery_app = Celery(
    "studio_production",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
    include=["studio.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    task_track_started=True,
    task_time_limit=7200,
    task_soft_time_limit=6900,

    worker_prefetch_multiplier=1,
    worker_concurrency=2,

    task_acks_late=True,
    task_reject_on_worker_lost=True,

    result_expires=86400,
    result_extended=True,

    task_queues=(
        Queue("default", routing_key="default"),
        Queue("production", routing_key="production.#"),
    ),
    task_default_queue="default",
    task_default_exchange="tasks",
    task_default_routing_key="default",

    task_routes={
        "production.*": {"queue": "production"},
    },
)

celery_app.conf.broker_transport_options = {
    "visibility_timeout": 43200,
    "socket_timeout": 30,
    "socket_connect_timeout": 30,
}
