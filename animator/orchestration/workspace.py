"""
Per-job transient working area.
"""
import logging
import re
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

SUBAREAS = ("characters", "scenes", "videos", "audio", "processed")


def safe_name(label: str, fallback: str = "untitled") -> str:
    """File-name-safe form of a model-produced label (mood, character name)."""
    slug = re.sub(r"[^\w-]+", "_", label.strip()).strip("_")
    return slug or fallback


class WorkingArea:
    """Job-exclusive directory tree; each phase writes into its own subarea."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def create(self) -> "WorkingArea":
        for name in SUBAREAS:
            (self.root / name).mkdir(parents=True, exist_ok=True)
        logger.info(f"[WORK] Created working area {self.root}")
        return self

    def path_for(self, subarea: str, filename: str) -> Path:
        if subarea not in SUBAREAS:
            raise ValueError(f"Unknown subarea: {subarea}")
        return self.root / subarea / filename

    def file(self, filename: str) -> Path:
        """Path directly under the working area root."""
        return self.root / filename

    def reclaim(self) -> bool:
        """Remove the whole working area. Failure is logged, not raised."""
        try:
            shutil.rmtree(self.root)
        except OSError as e:
            logger.warning(f"[WORK] Could not reclaim {self.root}: {e}")
            return False
        logger.info(f"[WORK] Reclaimed working area {self.root}")
        return True
