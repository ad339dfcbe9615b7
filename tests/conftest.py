"""
Pytest configuration and fixtures for animator tests.
"""
import os
import pytest
import tempfile
from pathlib import Path

# Set test environment before importing animator modules
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="animator-tests-"))
os.environ["DATA_DIR"] = str(_TEST_ROOT / "data")
os.environ["OUTPUT_DIR"] = str(_TEST_ROOT / "animations")
os.environ["DEBUG"] = "true"
for _key in ("OPENAI_API_KEY", "REPLICATE_API_TOKEN", "KLING_ACCESS_KEY", "KLING_SECRET_KEY", "ELEVENLABS_API_KEY"):
    os.environ.pop(_key, None)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class SleepRecorder:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def no_sleep():
    return SleepRecorder()


class FakeMediaTool:
    """
    In-memory replacement for MediaToolAdapter.

    Durations are looked up by file name; an Exception value is raised
    instead of returned. Unlisted .mp4 files report the nominal raw video
    length. Output files are written so later phases see them.
    """

    def __init__(self, durations=None, default_duration=5.0, video_duration=10.0):
        self.durations = dict(durations or {})
        self.default_duration = default_duration
        self.video_duration = video_duration
        self.fail_transcode = False
        self.fail_concat = False
        self.transcode_calls = []
        self.concat_manifests = []
        self.subtitles = {}

    def probe_duration(self, path):
        path = Path(path)
        default = self.video_duration if path.suffix == ".mp4" else self.default_duration
        value = self.durations.get(path.name, default)
        if isinstance(value, Exception):
            raise value
        return value

    def transcode_and_mux(self, args):
        from animator.rendering import ToolResult

        self.transcode_calls.append(list(args))
        output = Path(args[-1])
        for srt in output.parent.glob("*.srt"):
            self.subtitles[srt.name] = srt.read_text(encoding="utf-8")
        if self.fail_transcode:
            return ToolResult(1, "", "Error while opening encoder")
        output.write_bytes(b"processed clip")
        return ToolResult(0, "", "")

    def concatenate(self, manifest, output_path, args=None):
        from animator.rendering import ToolResult

        self.concat_manifests.append(Path(manifest).read_text(encoding="utf-8"))
        if self.fail_concat:
            return ToolResult(1, "", "Non-monotonous DTS")
        Path(output_path).write_bytes(b"final animation")
        return ToolResult(0, "", "")


@pytest.fixture
def media_tool():
    return FakeMediaTool()


def make_video_provider(name, outcomes, available=True):
    """
    Fake video provider. Each outcome is either a URL string (success) or an
    exception instance (raised). Once outcomes run out every call fails.
    """
    from animator.providers.exceptions import ProviderError
    from animator.providers.video import SyncVideoProvider, VideoResult

    class FakeVideoProvider(SyncVideoProvider):
        def __init__(self):
            self.outcomes = list(outcomes)
            self.requests = []

        @property
        def name(self):
            return name

        @property
        def is_available(self):
            return available

        def run(self, request):
            self.requests.append(request)
            outcome = self.outcomes.pop(0) if self.outcomes else ProviderError(name, "Task failed: boom")
            if isinstance(outcome, Exception):
                raise outcome
            return VideoResult(video_url=outcome, provider=name)

    return FakeVideoProvider()


@pytest.fixture
def video_provider_factory():
    return make_video_provider


@pytest.fixture
def sample_article():
    """News article long enough to pass request validation."""
    return (
        "City officials in Lisbon opened a new riverside park on Saturday after three years of "
        "construction. Mayor Ana Costa thanked volunteers who planted more than two thousand trees, "
        "while families gathered along the water to celebrate the first public festival held there."
    )


@pytest.fixture
def sample_story_data():
    """Story structure as the text model returns it (camelCase)."""
    return {
        "title": "A Park by the River",
        "theme": "Community renewal",
        "characters": [
            {
                "name": "Ana",
                "description": "mayor in a navy suit",
                "personality": "warm and confident",
                "role": "mayor",
            },
        ],
        "scenes": [
            {
                "sceneNumber": 1,
                "description": "Construction crews finish the riverside paths",
                "characters": [],
                "location": "Lisbon riverside",
                "mood": "serious",
                "cameraAngle": "wide shot",
                "narration": "After three years of work, the riverside park is finally complete.",
                "duration": 10,
                "sceneType": "landscape",
                "moodIntensity": 4,
                "emotionalTone": "measured",
            },
            {
                "sceneNumber": 2,
                "description": "Ana thanks the volunteers at the park entrance",
                "characters": ["Ana"],
                "location": "Park entrance",
                "mood": "hopeful",
                "cameraAngle": "medium shot",
                "narration": "Mayor Ana Costa thanked the volunteers who planted two thousand trees.",
                "duration": 10,
                "sceneType": "dialogue",
                "moodIntensity": 6,
                "emotionalTone": "grateful",
            },
            {
                "sceneNumber": 3,
                "description": "Families celebrate along the water at sunset",
                "characters": [],
                "location": "Riverside promenade",
                "mood": "reflective",
                "cameraAngle": "slow aerial",
                "narration": "Families gathered by the water for the first festival.",
                "duration": 10,
                "sceneType": "emotional",
                "moodIntensity": 5,
                "emotionalTone": "peaceful",
            },
        ],
        "overallMood": "hopeful",
        "moodProgression": ["serious", "hopeful", "reflective"],
    }


@pytest.fixture
def sample_story(sample_story_data):
    from animator.models import StoryStructure
    return StoryStructure.model_validate(sample_story_data)
