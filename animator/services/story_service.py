"""
Story Service - article to structured animation story.

Wraps the structured-text provider with the three story calls the pipeline
needs: country context (soft), story structure (critical) and per-scene
motion description (critical).
"""
import logging

from ..models import CountryContext, MotionDescription, SceneSpec, StoryStructure
from ..providers.exceptions import MalformedResponse, ProviderError
from . import prompts

logger = logging.getLogger(__name__)


class StoryService:
    """Generates story structure and motion descriptions via an LLM."""

    def __init__(self, text_provider):
        self.text = text_provider

    def detect_country_context(self, article: str) -> CountryContext:
        """Detect where the story takes place. Falls back to an international default."""
        system, user = prompts.country_prompts(article)
        try:
            context = self.text.generate(system, user, CountryContext)
        except ProviderError as e:
            logger.warning(f"[STORY] Country detection failed, using default context: {e}")
            return CountryContext.default()

        logger.info(f"[STORY] Detected country context: {context.label}")
        return context

    def generate_story(self, article: str, scene_count: int, country: CountryContext) -> StoryStructure:
        """
        Generate the story structure with exactly ``scene_count`` scenes.

        Scenes are renumbered 1..scene_count in story order and character
        descriptions are prefixed with the character name.

        Raises:
            ProviderError: if the provider fails or returns too few scenes
        """
        system, user = prompts.story_prompts(article, scene_count, country)
        story = self.text.generate(system, user, StoryStructure)

        if len(story.scenes) < scene_count:
            raise MalformedResponse(
                self.text.name, f"Expected {scene_count} scenes, story has {len(story.scenes)}"
            )
        if len(story.scenes) > scene_count:
            logger.warning(f"[STORY] Story returned {len(story.scenes)} scenes, keeping first {scene_count}")

        scenes = [
            scene.model_copy(update={"scene_number": number})
            for number, scene in enumerate(story.scenes[:scene_count], 1)
        ]
        characters = [
            c.model_copy(update={"description": f"{c.name} - {c.description}"}) if c.description else c
            for c in story.characters
        ]
        progression = story.mood_progression
        if len(progression) != len(scenes):
            progression = [s.mood for s in scenes]

        story = story.model_copy(update={
            "scenes": scenes,
            "characters": characters,
            "mood_progression": progression,
        })

        logger.info(f"[STORY] Story generated: \"{story.title}\" ({len(scenes)} scenes, {len(characters)} characters)")
        logger.info(f"[STORY] Mood progression: {' -> '.join(s.mood for s in scenes)}")
        return story

    def describe_motion(self, scene: SceneSpec) -> str:
        """Short motion description for one scene (at most 150 characters)."""
        system, user = prompts.motion_prompts(scene)
        motion = self.text.generate(system, user, MotionDescription)
        return motion.motion_description
