"""
Job record and progress models.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from .enums import JobPhase, JobStatus


def _now() -> datetime:
    return datetime.now(timezone.utc)


class JobProgress(BaseModel):
    job_id: str
    phase: JobPhase
    progress: float = Field(..., ge=0, le=100)
    current_scene: Optional[int] = None
    total_scenes: Optional[int] = None
    message: str = ""


class Job(BaseModel):
    """One end-to-end animation request. Mutated only by the orchestrator."""
    job_id: str = Field(..., min_length=1)
    article: str
    scene_count: int = Field(..., ge=1)
    phase: JobPhase = JobPhase.CREATED
    status: JobStatus = JobStatus.RUNNING
    work_dir: Optional[str] = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    failed_phase: Optional[str] = None
    error: Optional[str] = None
    final_path: Optional[str] = None

    def advance(self, to: JobPhase) -> None:
        """Move to the next phase. Only the immediate successor is allowed."""
        if self.phase.next_phase != to:
            raise ValueError(f"Illegal transition {self.phase.value} -> {to.value}")
        self.phase = to
        if to == JobPhase.FINALIZED:
            self.status = JobStatus.COMPLETED
        self.updated_at = _now()

    def fail(self, cause: str) -> str:
        """Mark the job failed; returns the name of the phase that was running."""
        if self.phase.is_terminal:
            raise ValueError(f"Job already {self.phase.value}")
        failed_phase = self.phase.work_label
        self.failed_phase = failed_phase
        self.error = cause
        self.phase = JobPhase.FAILED
        self.status = JobStatus.FAILED
        self.updated_at = _now()
        return failed_phase
