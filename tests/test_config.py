"""
Tests for configuration management.
"""
import os
import pytest


class TestPathsConfig:
    """Tests for PathsConfig auto-detection."""

    def test_data_dir_from_env(self):
        """DATA_DIR set by the test session should be honored."""
        from animator.config import PathsConfig

        config = PathsConfig.detect()
        assert str(config.data_dir) == os.environ["DATA_DIR"]
        assert config.data_dir.exists()

    def test_work_dir_defaults_under_data_dir(self, monkeypatch):
        """Working areas live below the data directory unless WORK_DIR is set."""
        monkeypatch.delenv("WORK_DIR", raising=False)
        from animator.config import PathsConfig

        config = PathsConfig.detect()
        assert config.work_dir == config.data_dir / "work"

    def test_custom_dirs_from_env(self, temp_dir, monkeypatch):
        """WORK_DIR and OUTPUT_DIR env vars should override defaults."""
        monkeypatch.setenv("WORK_DIR", str(temp_dir / "work"))
        monkeypatch.setenv("OUTPUT_DIR", str(temp_dir / "out"))

        from animator.config import PathsConfig

        config = PathsConfig.detect()
        assert config.work_dir == temp_dir / "work"
        assert config.output_dir == temp_dir / "out"
        assert config.output_dir.exists()

    def test_ffmpeg_path_detection(self):
        """FFmpeg path should always resolve to something runnable."""
        from animator.config import PathsConfig

        ffmpeg_path = PathsConfig._find_ffmpeg()
        assert ffmpeg_path
        assert os.path.exists(ffmpeg_path)

    def test_ffprobe_fallback(self, monkeypatch):
        """FFprobe falls back to the bare command name."""
        from animator.config import PathsConfig

        monkeypatch.delenv("FFPROBE_PATH", raising=False)
        monkeypatch.setattr(os.path, "exists", lambda p: False)
        monkeypatch.setattr("animator.config.shutil.which", lambda name: None)
        assert PathsConfig._find_ffprobe() == "ffprobe"


class TestAIConfig:
    """Tests for provider key detection."""

    def test_ai_config_properties(self):
        """Configured keys should be detected per provider."""
        from animator.config import AIConfig

        config = AIConfig(openai_api_key="sk-valid-key", replicate_api_token="r8_token")

        assert config.has_openai is True
        assert config.has_replicate is True
        assert config.has_kling is False
        assert config.has_elevenlabs is False
        assert config.has_any_video is True

    def test_kling_needs_both_keys(self):
        """Kling requires both the access key and the secret key."""
        from animator.config import AIConfig

        assert AIConfig(kling_access_key="ak").has_kling is False
        assert AIConfig(kling_access_key="ak", kling_secret_key="sk").has_kling is True

    def test_ai_config_rejects_placeholder_keys(self):
        """Placeholder keys starting with PASTE_ should not count as configured."""
        from animator.config import AIConfig

        config = AIConfig(openai_api_key="PASTE_YOUR_KEY_HERE", elevenlabs_api_key="PASTE_ME")

        assert config.has_openai is False
        assert config.has_elevenlabs is False


class TestGenerationConfig:
    """Tests for retry and media timing settings."""

    def test_defaults(self):
        """Defaults should match the documented pipeline constants."""
        from animator.config import GenerationConfig

        gen = GenerationConfig()
        assert gen.strategy_attempts == 3
        assert gen.poll_interval == 10.0
        assert gen.max_poll_attempts == 60
        assert gen.fade_duration == 0.5
        assert gen.subtitle_lead_out == 0.35
        assert gen.trim_padding == 0.3

    def test_from_env_overrides(self, monkeypatch):
        """Numeric settings should be read from the environment."""
        monkeypatch.setenv("POLL_INTERVAL", "2.5")
        monkeypatch.setenv("MAX_POLL_ATTEMPTS", "12")
        monkeypatch.setenv("STRATEGY_ATTEMPTS", "")

        from animator.config import GenerationConfig

        gen = GenerationConfig.from_env()
        assert gen.poll_interval == 2.5
        assert gen.max_poll_attempts == 12
        assert gen.strategy_attempts == 3

    def test_invalid_number_raises(self, monkeypatch):
        """A non-numeric value should fail loudly."""
        monkeypatch.setenv("POLL_INTERVAL", "soon")

        from animator.config import GenerationConfig

        with pytest.raises(ValueError):
            GenerationConfig.from_env()


class TestAppConfig:
    """Tests for AppConfig status reporting."""

    def test_validate_reports_readiness(self, temp_dir):
        """Generation is ready only with OpenAI plus a video provider."""
        from animator.config import AIConfig, AppConfig, PathsConfig

        paths = PathsConfig(
            data_dir=temp_dir,
            work_dir=temp_dir / "work",
            output_dir=temp_dir / "out",
            ffmpeg_path="ffmpeg",
            ffprobe_path="ffprobe",
        )
        not_ready = AppConfig(ai=AIConfig(openai_api_key="sk-key"), paths=paths)
        ready = AppConfig(ai=AIConfig(openai_api_key="sk-key", kling_access_key="a", kling_secret_key="s"), paths=paths)

        assert not_ready.validate()["ready_for_generation"] is False
        assert ready.validate()["ready_for_generation"] is True
        assert ready.validate()["ai"]["kling_configured"] is True
