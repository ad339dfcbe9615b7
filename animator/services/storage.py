"""
Durable storage for finished animations.
"""
import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import Optional

from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


class LocalDurableStorage:
    """Copies final deliverables into a permanent output directory."""

    def __init__(self, output_dir: Optional[Path] = None):
        if output_dir is None:
            from ..config import config
            output_dir = config.paths.output_dir
        self.output_dir = Path(output_dir)

    def persist_final(self, local_path: Path) -> Path:
        """
        Copy the final video to durable storage under a unique name.

        Raises:
            PersistenceError: if the copy fails
        """
        local_path = Path(local_path)
        filename = f"mood_animation_{int(time.time() * 1000)}_{uuid.uuid4()}.mp4"
        destination = self.output_dir / filename

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(local_path, destination)
        except OSError as e:
            raise PersistenceError(f"Failed to persist {local_path.name}: {e}") from e

        logger.info(f"[STORAGE] Final video saved: {destination}")
        return destination

    def is_durable(self, path: Path) -> bool:
        try:
            Path(path).resolve().relative_to(self.output_dir.resolve())
        except ValueError:
            return False
        return True
