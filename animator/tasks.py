"""
Celery tasks for animation generation.
"""
import logging
from typing import Any, Optional

from celery import Task

from .celery_app import celery_app
from .exceptions import InputValidationError, JobFailedError
from .models import GenerationRequest
from .orchestration import JobProgress, PipelineOrchestrator, create_orchestrator
from .services import notify_webhook

logger = logging.getLogger(__name__)


class AnimationTask(Task):
    """
    Base Celery task with progress tracking and error handling.
    """

    abstract = True
    track_started = True
    acks_late = True
    reject_on_worker_lost = True

    _orchestrator: Optional[PipelineOrchestrator] = None

    @property
    def orchestrator(self) -> PipelineOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = create_orchestrator()
        return self._orchestrator

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(f"Task {task_id} failed: {exc}")
        super().on_failure(exc, task_id, args, kwargs, einfo)

    def on_success(self, retval, task_id, args, kwargs):
        status = "completed" if retval and retval.get("success") else "finished with failure"
        logger.info(f"Task {task_id} {status}")
        super().on_success(retval, task_id, args, kwargs)

    def on_retry(self, exc, task_id, args, kwargs, einfo):
        logger.warning(f"Task {task_id} retrying: {exc}")
        super().on_retry(exc, task_id, args, kwargs, einfo)


def create_progress_callback(task: Task, task_id: str):
    """
    Factory for creating Celery progress callback.
    Updates task state with pipeline phase progress.
    """
    def callback(progress: JobProgress) -> None:
        task.update_state(
            task_id=task_id,
            state="PROGRESS",
            meta={
                "job_id": progress.job_id,
                "phase": progress.phase.value,
                "phase_name": progress.phase.display_name,
                "progress": progress.progress,
                "current_scene": progress.current_scene,
                "total_scenes": progress.total_scenes,
                "message": progress.message,
            },
        )

    return callback


def _failure(job_id: Optional[str], phase: str, error: str) -> dict[str, Any]:
    return {
        "job_id": job_id,
        "success": False,
        "failed_phase": phase,
        "error": error,
    }


@celery_app.task(
    base=AnimationTask,
    bind=True,
    name="animation.generate_animation",
    time_limit=7200,
    soft_time_limit=6900,
)
def generate_animation_task(self, request_json: dict[str, Any]) -> dict[str, Any]:
    """
    Celery task running one full animation job.

    Args:
        request_json: {"article": str, "scene_count": int, "webhook_url": optional str}

    Returns:
        JobResult as dictionary, or a failure dictionary with
        ``failed_phase`` and ``error``
    """
    task_id = self.request.id
    logger.info(f"Starting animation task {task_id}")

    webhook_url = request_json.get("webhook_url") if isinstance(request_json, dict) else None

    try:
        request = GenerationRequest.parse(request_json)
    except InputValidationError as e:
        logger.error(f"Invalid request for task {task_id}: {e}")
        result = _failure(task_id, "validation", str(e))
        notify_webhook(webhook_url, result)
        return result

    try:
        job_result = self.orchestrator.run(
            request,
            job_id=task_id,
            progress_callback=create_progress_callback(self, task_id),
        )
        result = job_result.model_dump(mode="json")

    except JobFailedError as e:
        logger.error(f"Animation job {task_id} failed during {e.phase}: {e.cause}")
        result = _failure(task_id, e.phase, e.cause)

    notify_webhook(request.webhook_url, result)
    return result


@celery_app.task(name="animation.get_task_status")
def get_task_status(task_id: str) -> dict[str, Any]:
    """
    Get status of an animation task.

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
        "successful": result.successful() if result.ready() else None,
    }

    if result.status == "PROGRESS":
        response["progress"] = result.info
    elif result.ready():
        if result.successful():
            response["result"] = result.result
        else:
            response["error"] = str(result.result)
    elif result.status == "PENDING":
        response["message"] = "Task is pending or unknown"
    elif result.status == "STARTED":
        response["message"] = "Task has started"

    return response
