"""
Working example: Submit animation job to Celery.
Requires Redis and Celery worker running:

    celery -A animator.celery_app worker -Q animation -l info
"""
import time
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))


def submit_job(article_path: str, scene_count: int = 3):
    """Submit animation job to Celery worker."""
    from animator.tasks import generate_animation_task, get_task_status

    article = Path(article_path).read_text(encoding="utf-8")

    print(f"Submitting job ({len(article)} chars, {scene_count} scenes)...")

    task = generate_animation_task.apply_async(
        args=[{"article": article, "scene_count": scene_count}],
        queue="animation",
    )

    print(f"Task submitted: {task.id}")
    print("Monitoring progress...")
    print("-" * 50)

    while not task.ready():
        status = get_task_status(task.id)

        if status["status"] == "PROGRESS":
            progress = status.get("progress", {})
            pct = progress.get("progress", 0)
            phase = progress.get("phase_name", "unknown")
            msg = progress.get("message", "")
            print(f"[{pct:5.1f}%] {phase}: {msg}")
        else:
            print(f"Status: {status['status']}")

        time.sleep(5)

    print("-" * 50)

    if task.successful():
        result = task.result
        if result["success"]:
            print(f"SUCCESS!")
            print(f"Title: {result['title']}")
            print(f"Output: {result['video_path']}")
            print(f"Clips: {result['clip_count']}/{result['scene_count']}")
            print(f"Time: {result['processing_time_ms'] / 1000:.1f}s")
        else:
            print(f"JOB FAILED during {result['failed_phase']}: {result['error']}")
    else:
        print(f"TASK FAILED: {task.result}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        print("Usage: python run_celery_example.py article.txt [scene_count]")
    else:
        submit_job(sys.argv[1], int(sys.argv[2]) if len(sys.argv) > 2 else 3)
