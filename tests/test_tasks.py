"""
Tests for the Celery task wrapper (run in-process, no broker).
"""
import pytest
from unittest.mock import MagicMock


@pytest.fixture
def webhook_calls(monkeypatch):
    calls = []
    monkeypatch.setattr("animator.tasks.notify_webhook", lambda url, payload: calls.append((url, payload)) or True)
    return calls


@pytest.fixture
def fake_orchestrator(monkeypatch):
    from animator.tasks import generate_animation_task

    orchestrator = MagicMock()
    monkeypatch.setattr(generate_animation_task, "_orchestrator", orchestrator)
    return orchestrator


class TestGenerateAnimationTask:
    """Tests for generate_animation_task."""

    def test_invalid_request_reports_validation_failure(self, webhook_calls, fake_orchestrator):
        from animator.tasks import generate_animation_task

        result = generate_animation_task.run({
            "article": "too short",
            "scene_count": 3,
            "webhook_url": "https://hooks.test/done",
        })

        assert result["success"] is False
        assert result["failed_phase"] == "validation"
        assert "at least 100 characters" in result["error"]
        assert webhook_calls == [("https://hooks.test/done", result)]
        fake_orchestrator.run.assert_not_called()

    def test_success_returns_job_result(self, webhook_calls, fake_orchestrator, sample_article):
        from animator.models import JobResult
        from animator.tasks import generate_animation_task

        fake_orchestrator.run.return_value = JobResult(
            job_id="job-1",
            video_path="/data/public/mood_animation_1.mp4",
            title="A Park by the River",
            processing_time_ms=1200,
            scene_count=3,
            clip_count=3,
            duration_seconds=14.0,
            overall_mood="hopeful",
        )

        result = generate_animation_task.run({
            "article": sample_article,
            "scene_count": 3,
            "webhook_url": "https://hooks.test/done",
        })

        assert result["success"] is True
        assert result["video_path"] == "/data/public/mood_animation_1.mp4"
        assert webhook_calls == [("https://hooks.test/done", result)]
        request = fake_orchestrator.run.call_args[0][0]
        assert request.scene_count == 3
        assert callable(fake_orchestrator.run.call_args.kwargs["progress_callback"])
        # The shared orchestrator is never mutated per task
        assert isinstance(fake_orchestrator.progress_callback, MagicMock)

    def test_job_failure_returns_phase_and_cause(self, webhook_calls, fake_orchestrator, sample_article):
        from animator.exceptions import JobFailedError
        from animator.tasks import generate_animation_task

        fake_orchestrator.run.side_effect = JobFailedError("videos", "Video generation failed after 6 attempts", "job-2")

        result = generate_animation_task.run({"article": sample_article, "scene_count": 2})

        assert result["success"] is False
        assert result["failed_phase"] == "videos"
        assert result["error"] == "Video generation failed after 6 attempts"
        assert webhook_calls == [(None, result)]


class TestProgressCallback:
    """Tests for Celery progress reporting."""

    def test_updates_task_state(self):
        from animator.orchestration import JobPhase, JobProgress
        from animator.tasks import create_progress_callback

        task = MagicMock()
        callback = create_progress_callback(task, "task-1")

        callback(JobProgress(
            job_id="job-1",
            phase=JobPhase.SCENES_READY,
            progress=JobPhase.SCENES_READY.progress,
            current_scene=2,
            total_scenes=3,
            message="Scene video 2 ready",
        ))

        kwargs = task.update_state.call_args.kwargs
        assert kwargs["task_id"] == "task-1"
        assert kwargs["state"] == "PROGRESS"
        assert kwargs["meta"]["phase"] == "scenes-ready"
        assert kwargs["meta"]["phase_name"] == "Scene images generated"
        assert kwargs["meta"]["current_scene"] == 2
