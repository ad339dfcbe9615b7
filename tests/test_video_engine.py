"""
Tests for the layered video provider fallback.
"""
import pytest


def _engine(providers, no_sleep, attempts=3):
    from animator.providers.video import ProviderFallbackEngine
    return ProviderFallbackEngine(providers, strategy_attempts=attempts, backoff_base=2.0, sleep=no_sleep, clock=lambda: 0.0)


class TestStrategy:
    """Tests for strategy selection and camera control."""

    def test_strategy_order(self):
        from animator.providers.video import Strategy

        assert Strategy.for_attempt(1) == Strategy.CAMERA
        assert Strategy.for_attempt(2) == Strategy.STANDARD
        assert Strategy.for_attempt(3) == Strategy.DEGRADED
        assert Strategy.for_attempt(5) == Strategy.DEGRADED

    def test_camera_control_by_scene_type(self):
        from animator.models import SceneType
        from animator.providers.video import camera_control_for

        camera, mode = camera_control_for(SceneType.ACTION, 7)
        assert (camera.axis, camera.value, mode) == ("pan", 5, None)

        camera, mode = camera_control_for(SceneType.LANDSCAPE, 5)
        assert camera.axis == "zoom"
        assert camera.value == pytest.approx(-1 - 5 / 3)
        assert mode == "std"

        camera, _ = camera_control_for(SceneType.EMOTIONAL, 2)
        assert (camera.axis, camera.value) == ("zoom", 3)

        camera, _ = camera_control_for(SceneType.DIALOGUE, 9)
        assert camera.is_tilt
        assert camera.value == 0

    def test_degraded_request(self, no_sleep):
        from animator.models import SceneType
        from animator.providers.video import Strategy

        request = _engine([], no_sleep).build_request(
            Strategy.DEGRADED, "https://img.test/1.png", "a reporter walks, camera follows", 10.0,
            SceneType.ACTION, "serious", 5,
        )

        assert request.prompt == "Disney animation: a reporter walks with serious mood"
        assert request.mood_intensity == 3
        assert request.camera_control is None
        assert request.duration == 10

    def test_degraded_intensity_floor(self, no_sleep):
        from animator.models import SceneType
        from animator.providers.video import Strategy

        request = _engine([], no_sleep).build_request(
            Strategy.DEGRADED, "img", "walks", 10.0, SceneType.STANDARD, "hopeful", 2,
        )
        assert request.mood_intensity == 1


class TestProviderFallbackEngine:
    """Tests for resolve_video."""

    def test_primary_succeeds_first_try(self, video_provider_factory, no_sleep):
        primary = video_provider_factory("replicate", ["https://cdn.test/a.mp4"])
        secondary = video_provider_factory("kling", [])

        resolution = _engine([primary, secondary], no_sleep).resolve_video("img", "walks")

        assert resolution.video_url == "https://cdn.test/a.mp4"
        assert resolution.provider == "replicate"
        assert resolution.strategy == "camera"
        assert len(resolution.attempts) == 1
        assert secondary.requests == []
        assert no_sleep.calls == []

    def test_secondary_used_before_downgrading(self, video_provider_factory, no_sleep):
        from animator.providers.exceptions import ProviderTaskFailed

        primary = video_provider_factory("replicate", [ProviderTaskFailed("replicate", "nsfw")])
        secondary = video_provider_factory("kling", ["https://cdn.test/k.mp4"])

        resolution = _engine([primary, secondary], no_sleep).resolve_video("img", "walks")

        assert resolution.provider == "kling"
        assert resolution.strategy == "camera"
        assert [a.success for a in resolution.attempts] == [False, True]
        assert resolution.attempts[0].error == "[replicate] Task failed: nsfw"
        assert no_sleep.calls == []

    def test_falls_through_strategies(self, video_provider_factory, no_sleep):
        from animator.models import SceneType
        from animator.providers.exceptions import ProviderError

        # Primary fails twice, then succeeds on the degraded strategy; secondary always fails
        primary = video_provider_factory("replicate", [
            ProviderError("replicate", "HTTP 500"),
            ProviderError("replicate", "HTTP 500"),
            "https://cdn.test/degraded.mp4",
        ])
        secondary = video_provider_factory("kling", [])

        resolution = _engine([primary, secondary], no_sleep).resolve_video(
            "img", "a crowd cheers, camera pans", scene_type=SceneType.ACTION, mood="celebratory", mood_intensity=8
        )

        assert resolution.strategy == "degraded"
        assert resolution.provider == "replicate"
        assert [a.strategy for a in resolution.attempts] == [
            "camera", "camera", "standard", "standard", "degraded",
        ]
        assert no_sleep.calls == [4.0, 8.0]
        assert primary.requests[0].camera_control is not None
        assert primary.requests[1].camera_control is None
        assert primary.requests[2].prompt == "Disney animation: a crowd cheers with celebratory mood"

    def test_all_strategies_exhausted(self, video_provider_factory, no_sleep):
        from animator.exceptions import ProviderExhaustedError

        primary = video_provider_factory("replicate", [])
        secondary = video_provider_factory("kling", [])

        with pytest.raises(ProviderExhaustedError) as exc_info:
            _engine([primary, secondary], no_sleep).resolve_video("img", "walks")

        attempts = exc_info.value.attempts
        assert len(attempts) == 6
        assert [a.provider for a in attempts] == ["replicate", "kling"] * 3
        assert all(not a.success for a in attempts)
        assert [a.attempt for a in attempts] == [1, 2, 3, 4, 5, 6]
        assert no_sleep.calls == [4.0, 8.0]
        assert "after 6 attempts" in str(exc_info.value)

    def test_unavailable_providers_skipped(self, video_provider_factory, no_sleep):
        primary = video_provider_factory("replicate", ["https://cdn.test/r.mp4"], available=False)
        secondary = video_provider_factory("kling", ["https://cdn.test/k.mp4"])

        resolution = _engine([primary, secondary], no_sleep).resolve_video("img", "walks")

        assert resolution.provider == "kling"
        assert primary.requests == []
        assert len(resolution.attempts) == 1

    def test_no_provider_configured(self, video_provider_factory, no_sleep):
        from animator.exceptions import ProviderExhaustedError

        engine = _engine([video_provider_factory("kling", [], available=False)], no_sleep)

        with pytest.raises(ProviderExhaustedError) as exc_info:
            engine.resolve_video("img", "walks")

        assert exc_info.value.attempts == []
        assert no_sleep.calls == []

    def test_rejects_zero_strategy_attempts(self):
        from animator.providers.video import ProviderFallbackEngine

        with pytest.raises(ValueError):
            ProviderFallbackEngine([], strategy_attempts=0)
