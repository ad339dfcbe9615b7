"""
Tests for mood tables, content safety, story generation, storage and webhooks.
"""
import json
import re
import httpx
import pytest


class TestMoods:
    """Tests for mood resolution and derived settings."""

    def test_resolve_known_and_synonym_moods(self):
        from animator.services.moods import resolve_mood

        assert resolve_mood("Serious").name == "serious"
        assert resolve_mood("somewhat worried").name == "concerned"
        assert resolve_mood("cautiously optimistic").name == "hopeful"

    def test_unknown_mood_defaults_to_professional(self):
        from animator.services.moods import resolve_mood

        assert resolve_mood("zany").name == "professional"
        assert resolve_mood("").name == "professional"

    def test_video_settings_scale_with_intensity(self):
        from animator.services.moods import video_settings

        assert video_settings("serious", 0)["cfg_scale"] == pytest.approx(0.6)
        assert video_settings("serious", 10)["cfg_scale"] == pytest.approx(0.8)
        assert video_settings("urgent", 10)["preferred_mode"] == "std"

    def test_voice_settings_dynamic_moods(self):
        from animator.services.moods import voice_settings

        celebratory = voice_settings("celebratory", 10)
        assert celebratory["stability"] == pytest.approx(0.3)
        assert celebratory["style"] == pytest.approx(0.7)

        serious = voice_settings("serious", 10)
        assert serious["stability"] == pytest.approx(0.7)
        assert serious["use_speaker_boost"] is True

    def test_voice_for_mood(self):
        from animator.services.moods import VOICE_DANIEL, VOICE_SUNNY, voice_for_mood

        assert voice_for_mood("hopeful") == VOICE_SUNNY
        assert voice_for_mood("unknown") == VOICE_DANIEL

    def test_enhance_video_prompt(self):
        from animator.services.moods import enhance_video_prompt

        prompt = enhance_video_prompt("the crowd waves", "reflective", 2)
        assert prompt.startswith("the crowd waves, slow, contemplative movements")
        assert prompt.endswith("subtle, gentle reflective mood expression")

    def test_negative_prompt(self):
        from animator.services.moods import BASE_NEGATIVE_PROMPT, negative_prompt

        assert negative_prompt("hopeful").startswith(BASE_NEGATIVE_PROMPT)
        assert "pessimistic atmosphere" in negative_prompt("hopeful")

    def test_tables_are_read_only(self):
        from animator.services.moods import MOODS

        with pytest.raises(TypeError):
            MOODS["new"] = MOODS["serious"]


class TestContentSafety:
    """Tests for scene description adaptation."""

    def test_crime_scene_adapted(self):
        from animator.services.content_safety import sanitize_scene_description

        result = sanitize_scene_description("A shooting outside the bank as police arrive")

        assert result.story_type == "crime"
        assert result.was_modified is True
        assert "shooting" not in result.description.lower()
        assert "police investigation with officers documenting the scene" in result.description

    def test_crime_phrase_rewrite(self):
        from animator.services.content_safety import sanitize_scene_description

        result = sanitize_scene_description("The scene of the crime was busy with police")
        assert result.description == "The investigation area was busy with police"

    def test_accident_adapted(self):
        from animator.services.content_safety import sanitize_scene_description

        result = sanitize_scene_description("Drivers slow down near the car crash")

        assert result.story_type == "accident"
        assert result.description == "Drivers slow down near the emergency responders at the accident site"

    def test_general_scene_untouched(self):
        from animator.services.content_safety import sanitize_scene_description

        text = "Families picnic in the new riverside park"
        result = sanitize_scene_description(text)

        assert result.story_type == "general"
        assert result.was_modified is False
        assert result.description == text


class TestPrompts:
    """Tests for prompt construction."""

    def test_character_references_tagged(self):
        from animator.services.prompts import tag_character_references

        tagged = tag_character_references("Ana greets Luis while ana's team watches", ["Ana", "Luis"])
        assert tagged == "Ana(image 1) greets Luis(image 2) while Ana(image 1)'s team watches"

    def test_scene_prompt_includes_mood_and_country(self, sample_story):
        from animator.models import CountryContext
        from animator.services.prompts import scene_prompt

        country = CountryContext(primary_country="Portugal", primary_city="Lisbon", architectural_style="azulejo facades")
        scene = sample_story.scenes[1]

        prompt = scene_prompt(scene, scene.description, ["Ana"], country)

        assert "HOPEFUL mood (intensity: 6/10)" in prompt
        assert "Ana(image 1) thanks the volunteers" in prompt
        assert "Setting authentic to Portugal: azulejo facades" in prompt

    def test_story_prompts_request_exact_scene_count(self):
        from animator.models import CountryContext
        from animator.services.prompts import story_prompts

        system, user = story_prompts("Some article", 4, CountryContext.default())
        assert "International" in system
        assert "exactly 4 scenes" in user


class FakeTextProvider:
    """Returns canned payloads per schema; exceptions are raised."""

    name = "fake-text"

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def generate(self, system_prompt, user_prompt, schema):
        self.calls.append((schema.__name__, user_prompt))
        response = self.responses[schema.__name__]
        if isinstance(response, Exception):
            raise response
        return schema.model_validate(response)


class TestStoryService:
    """Tests for StoryService."""

    def test_country_detection_falls_back(self):
        from animator.providers.exceptions import ProviderError
        from animator.services import StoryService

        service = StoryService(FakeTextProvider({"CountryContext": ProviderError("openai", "timeout")}))
        context = service.detect_country_context("article")

        assert context.primary_country == "International"
        assert context.label == "International"

    def test_country_detection(self):
        from animator.services import StoryService

        service = StoryService(FakeTextProvider({
            "CountryContext": {"primaryCountry": "Portugal", "primaryCity": "Lisbon"},
        }))
        assert service.detect_country_context("article").label == "Portugal (Lisbon)"

    def test_story_normalized(self, sample_story_data):
        from animator.models import CountryContext
        from animator.services import StoryService

        data = dict(sample_story_data)
        data["scenes"] = [dict(s, sceneNumber=s["sceneNumber"] + 10) for s in data["scenes"]]
        data["moodProgression"] = ["serious"]
        service = StoryService(FakeTextProvider({"StoryStructure": data}))

        story = service.generate_story("article", 2, CountryContext.default())

        assert [s.scene_number for s in story.scenes] == [1, 2]
        assert [s.mood for s in story.scenes] == ["serious", "hopeful"]
        assert story.mood_progression == ["serious", "hopeful"]
        assert story.characters[0].description == "Ana - mayor in a navy suit"

    def test_too_few_scenes(self, sample_story_data):
        from animator.models import CountryContext
        from animator.providers.exceptions import MalformedResponse
        from animator.services import StoryService

        service = StoryService(FakeTextProvider({"StoryStructure": sample_story_data}))

        with pytest.raises(MalformedResponse, match="Expected 5 scenes"):
            service.generate_story("article", 5, CountryContext.default())

    def test_story_failure_propagates(self):
        from animator.models import CountryContext
        from animator.providers.exceptions import ProviderError
        from animator.services import StoryService

        service = StoryService(FakeTextProvider({"StoryStructure": ProviderError("openai", "rate limited")}))

        with pytest.raises(ProviderError):
            service.generate_story("article", 3, CountryContext.default())

    def test_describe_motion_truncated(self, sample_story):
        from animator.services import StoryService

        service = StoryService(FakeTextProvider({"MotionDescription": {"motionDescription": "x" * 200}}))
        motion = service.describe_motion(sample_story.scenes[0])

        assert motion == "x" * 150


class TestLocalDurableStorage:
    """Tests for final video persistence."""

    def test_persist_final(self, temp_dir):
        from animator.services import LocalDurableStorage

        source = temp_dir / "work" / "final.mp4"
        source.parent.mkdir()
        source.write_bytes(b"final")
        storage = LocalDurableStorage(temp_dir / "public")

        durable = storage.persist_final(source)

        assert durable.read_bytes() == b"final"
        assert re.fullmatch(r"mood_animation_\d+_[0-9a-f-]{36}\.mp4", durable.name)
        assert storage.is_durable(durable) is True
        assert storage.is_durable(source) is False

    def test_unique_names(self, temp_dir):
        from animator.services import LocalDurableStorage

        source = temp_dir / "final.mp4"
        source.write_bytes(b"final")
        storage = LocalDurableStorage(temp_dir / "public")

        assert storage.persist_final(source) != storage.persist_final(source)

    def test_missing_source(self, temp_dir):
        from animator.exceptions import PersistenceError
        from animator.services import LocalDurableStorage

        with pytest.raises(PersistenceError):
            LocalDurableStorage(temp_dir / "public").persist_final(temp_dir / "nope.mp4")


class TestWebhook:
    """Tests for completion webhooks."""

    def test_posts_payload(self):
        from animator.services import notify_webhook

        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        assert notify_webhook("https://hooks.test/done", {"job_id": "j1", "success": True}, client=client) is True
        assert captured["body"] == {"job_id": "j1", "success": True}

    def test_failures_are_not_raised(self):
        from animator.services import notify_webhook

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert notify_webhook("https://hooks.test/done", {}, client=httpx.Client(transport=httpx.MockTransport(refuse))) is False
        failing = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        assert notify_webhook("https://hooks.test/done", {}, client=failing) is False

    def test_no_url(self):
        from animator.services import notify_webhook

        assert notify_webhook(None, {"job_id": "j1"}) is False
