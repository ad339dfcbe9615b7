"""
Application Configuration - Environment Variable Management.
Loads and validates configuration from .env file.
"""
import os
import shutil
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

import imageio_ffmpeg
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from project root
PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
    logger.info(f"Loaded environment from {ENV_FILE}")
else:
    logger.warning(f".env file not found at {ENV_FILE}")


def _is_set(value: Optional[str]) -> bool:
    return bool(value and not value.startswith("PASTE_"))


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return int(raw)


@dataclass
class AIConfig:
    """External generation services configuration."""
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-2024-08-06"
    openai_image_model: str = "gpt-image-1"
    replicate_api_token: Optional[str] = None
    kling_access_key: Optional[str] = None
    kling_secret_key: Optional[str] = None
    elevenlabs_api_key: Optional[str] = None

    @property
    def has_openai(self) -> bool:
        return _is_set(self.openai_api_key)

    @property
    def has_replicate(self) -> bool:
        return _is_set(self.replicate_api_token)

    @property
    def has_kling(self) -> bool:
        return _is_set(self.kling_access_key) and _is_set(self.kling_secret_key)

    @property
    def has_elevenlabs(self) -> bool:
        return _is_set(self.elevenlabs_api_key)

    @property
    def has_any_video(self) -> bool:
        return self.has_replicate or self.has_kling


@dataclass
class GenerationConfig:
    """Retry, polling and media timing constants."""
    strategy_attempts: int = 3
    strategy_backoff_base: float = 2.0
    poll_interval: float = 10.0
    max_poll_attempts: int = 60  # ~10 minutes at the default interval
    poll_error_backoff_cap: float = 30.0
    request_retries: int = 3
    request_backoff_base: float = 1.0
    http_timeout: float = 60.0
    download_timeout: float = 300.0

    fade_duration: float = 0.5
    subtitle_lead_out: float = 0.35
    trim_padding: float = 0.3
    ffmpeg_timeout: int = 600
    ffprobe_timeout: int = 60
    fps: int = 30
    width: int = 1920
    height: int = 1080

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        return cls(
            strategy_attempts=_env_int("STRATEGY_ATTEMPTS", 3),
            strategy_backoff_base=_env_float("STRATEGY_BACKOFF_BASE", 2.0),
            poll_interval=_env_float("POLL_INTERVAL", 10.0),
            max_poll_attempts=_env_int("MAX_POLL_ATTEMPTS", 60),
            poll_error_backoff_cap=_env_float("POLL_ERROR_BACKOFF_CAP", 30.0),
            request_retries=_env_int("REQUEST_RETRIES", 3),
            request_backoff_base=_env_float("REQUEST_BACKOFF_BASE", 1.0),
            http_timeout=_env_float("HTTP_TIMEOUT", 60.0),
            download_timeout=_env_float("DOWNLOAD_TIMEOUT", 300.0),
            fade_duration=_env_float("FADE_DURATION", 0.5),
            ffmpeg_timeout=_env_int("FFMPEG_TIMEOUT", 600),
            ffprobe_timeout=_env_int("FFPROBE_TIMEOUT", 60),
        )


@dataclass
class PathsConfig:
    """File system paths configuration."""
    data_dir: Path
    work_dir: Path
    output_dir: Path
    ffmpeg_path: str
    ffprobe_path: str

    @classmethod
    def detect(cls) -> "PathsConfig":
        """Auto-detect paths based on environment and system."""
        data_dir = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))
        data_dir.mkdir(parents=True, exist_ok=True)

        # Per-job working areas are created below this directory
        work_dir = Path(os.getenv("WORK_DIR", str(data_dir / "work")))
        work_dir.mkdir(parents=True, exist_ok=True)

        # Durable storage for finished animations
        output_dir = Path(os.getenv("OUTPUT_DIR", str(PROJECT_ROOT / "public" / "animations")))
        output_dir.mkdir(parents=True, exist_ok=True)

        return cls(
            data_dir=data_dir,
            work_dir=work_dir,
            output_dir=output_dir,
            ffmpeg_path=cls._find_ffmpeg(),
            ffprobe_path=cls._find_ffprobe(),
        )

    @staticmethod
    def _find_ffmpeg() -> str:
        """Find FFmpeg executable."""
        env_path = os.getenv("FFMPEG_PATH")
        if env_path and os.path.exists(env_path):
            return env_path

        common_paths = [
            r"C:\ffmpeg\bin\ffmpeg.exe",
            r"C:\Program Files\ffmpeg\bin\ffmpeg.exe",
            "/usr/bin/ffmpeg",
            "/usr/local/bin/ffmpeg",
        ]
        for path in common_paths:
            if os.path.exists(path):
                return path

        on_path = shutil.which("ffmpeg")
        if on_path:
            return on_path

        # Bundled binary shipped with imageio-ffmpeg
        return imageio_ffmpeg.get_ffmpeg_exe()

    @staticmethod
    def _find_ffprobe() -> str:
        """Find FFprobe executable."""
        env_path = os.getenv("FFPROBE_PATH")
        if env_path and os.path.exists(env_path):
            return env_path

        common_paths = [
            r"C:\ffmpeg\bin\ffprobe.exe",
            r"C:\Program Files\ffmpeg\bin\ffprobe.exe",
            "/usr/bin/ffprobe",
            "/usr/local/bin/ffprobe",
        ]
        for path in common_paths:
            if os.path.exists(path):
                return path

        on_path = shutil.which("ffprobe")
        if on_path:
            return on_path

        return "ffprobe"


@dataclass
class AppConfig:
    """Main Application Configuration."""
    ai: AIConfig
    paths: PathsConfig
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"
    debug: bool = False

    def validate(self) -> dict:
        """Validate configuration and return status."""
        return {
            "ai": {
                "openai_configured": self.ai.has_openai,
                "replicate_configured": self.ai.has_replicate,
                "kling_configured": self.ai.has_kling,
                "elevenlabs_configured": self.ai.has_elevenlabs,
            },
            "paths": {
                "work_dir": str(self.paths.work_dir),
                "output_dir": str(self.paths.output_dir),
                "ffmpeg": self.paths.ffmpeg_path,
                "ffprobe": self.paths.ffprobe_path,
            },
            "ready_for_generation": self.ai.has_openai and self.ai.has_any_video,
        }

    def log_status(self):
        """Log configuration status (without exposing keys)."""
        status = self.validate()

        logger.info("=" * 50)
        logger.info("Configuration Status:")
        logger.info(f"  OpenAI API: {'OK' if status['ai']['openai_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  Replicate API: {'OK' if status['ai']['replicate_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  Kling API: {'OK' if status['ai']['kling_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  ElevenLabs API: {'OK' if status['ai']['elevenlabs_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  Work Dir: {self.paths.work_dir}")
        logger.info(f"  Output Dir: {self.paths.output_dir}")
        logger.info(f"  FFmpeg: {self.paths.ffmpeg_path}")
        logger.info("=" * 50)

        if not status["ready_for_generation"]:
            logger.warning("OpenAI and at least one video provider are required to generate animations")
        if not self.ai.has_elevenlabs:
            logger.warning("ElevenLabs not configured - scenes will have no narration and be skipped at assembly")


def load_config() -> AppConfig:
    """Load configuration from environment variables."""
    ai_config = AIConfig(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-2024-08-06"),
        openai_image_model=os.getenv("OPENAI_IMAGE_MODEL", "gpt-image-1"),
        replicate_api_token=os.getenv("REPLICATE_API_TOKEN"),
        kling_access_key=os.getenv("KLING_ACCESS_KEY"),
        kling_secret_key=os.getenv("KLING_SECRET_KEY"),
        elevenlabs_api_key=os.getenv("ELEVENLABS_API_KEY"),
    )

    return AppConfig(
        ai=ai_config,
        paths=PathsConfig.detect(),
        generation=GenerationConfig.from_env(),
        celery_broker_url=os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0"),
        celery_result_backend=os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
        debug=os.getenv("DEBUG", "false").lower() == "true",
    )


# Global config instance
config = load_config()
