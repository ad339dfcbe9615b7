"""
Working example: run one animation job directly, without Celery.

Usage:
    python run_example.py article.txt [scene_count]

Requires OPENAI_API_KEY, a video provider (REPLICATE_API_TOKEN or
KLING_ACCESS_KEY/KLING_SECRET_KEY) and ELEVENLABS_API_KEY in .env.
"""
import logging
import sys
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

sys.path.insert(0, str(Path(__file__).parent))

from animator.config import config
from animator.exceptions import InputValidationError, JobFailedError
from animator.orchestration import JobProgress, create_orchestrator


def on_progress(progress: JobProgress):
    """Progress callback."""
    bar_length = 30
    filled = int(bar_length * progress.progress / 100)
    bar = "=" * filled + "-" * (bar_length - filled)
    scene = f" [{progress.current_scene}/{progress.total_scenes}]" if progress.current_scene else ""
    print(f"[{bar}] {progress.progress:5.1f}% | {progress.phase.display_name}{scene}: {progress.message}", flush=True)


def main():
    """Run example generation."""
    if len(sys.argv) < 2:
        print(__doc__)
        return None

    article = Path(sys.argv[1]).read_text(encoding="utf-8")
    scene_count = int(sys.argv[2]) if len(sys.argv) > 2 else 3

    print("=" * 60)
    print("MOOD ANIMATION PIPELINE - TEST")
    print("=" * 60)
    config.log_status()

    print(f"\nArticle: {len(article)} chars")
    print(f"Scenes: {scene_count}")
    print()

    orchestrator = create_orchestrator(progress_callback=on_progress)

    print("Starting generation...")
    print("-" * 60)

    try:
        result = orchestrator.run({"article": article, "scene_count": scene_count})
    except InputValidationError as e:
        print(f"\nINVALID REQUEST: {e}")
        return None
    except JobFailedError as e:
        print("-" * 60)
        print(f"\nFAILED during {e.phase}: {e.cause}")
        return None

    print("-" * 60)
    print(f"\nSUCCESS!")
    print(f"Title: {result.title}")
    print(f"Output: {result.video_path}")
    print(f"Clips: {result.clip_count}/{result.scene_count} ({result.duration_seconds:.1f}s)")
    print(f"Mood: {result.overall_mood} ({' -> '.join(b.mood for b in result.mood_progression)})")
    print(f"Time: {result.processing_time_ms / 1000:.1f}s")
    return result


if __name__ == "__main__":
    main()
