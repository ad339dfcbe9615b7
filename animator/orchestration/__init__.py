"""
Orchestration Layer.

Drives animation jobs through their phases and owns the per-job working
area. Knows nothing about Celery or HTTP; progress is reported through a
plain callback.
"""
from .enums import JobPhase, JobStatus
from .job import Job, JobProgress
from .workspace import WorkingArea
from .pipeline import PipelineOrchestrator, create_orchestrator

__all__ = [
    "JobPhase",
    "JobStatus",
    "Job",
    "JobProgress",
    "WorkingArea",
    "PipelineOrchestrator",
    "create_orchestrator",
]
