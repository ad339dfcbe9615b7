"""
Celery application configuration.
Settings for long-running animation generation workers.
"""
from celery import Celery
from kombu import Queue

from .config import config

celery_app = Celery(
    "animation_generation",
    broker=config.celery_broker_url,
    backend=config.celery_result_backend,
    include=["animator.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    task_track_started=True,
    # Video polling alone can take ~10 minutes per scene
    task_time_limit=7200,
    task_soft_time_limit=6900,

    worker_prefetch_multiplier=1,
    worker_concurrency=1,

    task_acks_late=True,
    task_reject_on_worker_lost=True,

    result_expires=86400,
    result_extended=True,

    task_queues=(
        Queue("default", routing_key="default"),
        Queue("animation", routing_key="animation.#"),
    ),
    task_default_queue="default",
    task_default_exchange="tasks",
    task_default_routing_key="default",

    task_routes={
        "animation.generate_animation": {"queue": "animation"},
        "animation.*": {"queue": "animation"},
    },
)

celery_app.conf.broker_transport_options = {
    "visibility_timeout": 43200,
    "socket_timeout": 30,
    "socket_connect_timeout": 30,
}
