"""
Prompt templates for the generation collaborators.
"""
import re
from typing import List

from ..models import CountryContext, SceneSpec
from .moods import MOODS, MoodProfile, resolve_mood

AVAILABLE_MOODS = ", ".join(MOODS.keys())


COUNTRY_SYSTEM_PROMPT = (
    "You are a geographical and cultural analysis expert. Analyze news articles to identify "
    "the primary country/region where events are taking place and provide relevant cultural "
    "context for animation production."
)

COUNTRY_USER_PROMPT = '''Analyze this news article and identify the primary country where the events are taking place.

Article: {article}

Provide:
- primaryCountry: country where the main events occur
- primaryCity: city if clearly mentioned, otherwise null
- culturalContext: cultural context relevant for visual representation
- architecturalStyle: architectural style typical for that region
- demographicNotes: notes for background characters (typical clothing, appearance)
- languageContext: language used for signs and text in scenes

If unclear, give your best assessment based on context clues.'''


STORY_SYSTEM_PROMPT = '''You are a professional news animator who creates Disney/Pixar-style 3D animated news stories with mood and emotional progression.

- Each scene has one mood from: {moods}
- moodIntensity is 1-10 (1=very subtle, 10=very intense)
- emotionalTone guides the visual and audio treatment (e.g. "cautiously optimistic")
- When real public figures are named in the article, use their actual names
- The story takes place in {country}. Keep locations and people authentic to this region.'''

STORY_USER_PROMPT = '''Transform this news article into a factual Disney/Pixar-style 3D animated news story with exactly {scene_count} scenes.

Article: {article}

CONTEXT:
- Architecture: {architecture}
- People: {demographics}
- Signage: {language}
- Culture: {culture}

RULES:
1. Keep the story FACTUAL - no magic, fantasy or talking animals
2. Characters are realistic people with EMPTY HANDS (no microphones, phones, documents)
3. sceneNumber runs 1..{scene_count} in story order
4. sceneType is one of: action, dialogue, landscape, emotional, standard
5. Each scene lasts 10 seconds, but narration should read in 6-8 seconds
6. Provide overallMood and moodProgression (one mood per scene)

RESPONSE FORMAT (strict JSON):
{{
    "title": "...", "theme": "...",
    "characters": [{{"name": "...", "description": "...", "personality": "...", "role": "..."}}],
    "scenes": [{{"sceneNumber": 1, "description": "...", "characters": ["name"], "location": "...",
                "mood": "...", "cameraAngle": "...", "narration": "...", "duration": 10,
                "sceneType": "standard", "moodIntensity": 5, "emotionalTone": "..."}}],
    "overallMood": "...", "moodProgression": ["..."]
}}'''


CHARACTER_PROMPT = '''Create a Disney/Pixar style 3D character: {description}. {personality}.

This character is in {country}: appearance reflects {demographics}, clothing fits local professional standards.

- Neutral, professional expression adaptable to different moods
- Front view, clean white background, high quality 3D rendering
- HANDS MUST BE EMPTY, relaxed at the sides'''


SCENE_PROMPT = '''MOOD-ENHANCED Disney/Pixar 3D animation scene with {mood_upper} mood (intensity: {intensity}/10): {description}

Location: {location}
Camera: {camera_angle}
Emotional tone: {tone}
Mood keywords: {keywords}
Lighting: {atmosphere}
Colors: {colors}
{characters_block}
Setting authentic to {country}: {architecture}; {culture}; background people {demographics}.

Keep readable text to a minimum (blurred signage only). Family-friendly and news-appropriate:
no weapons, blood or violence, focus on response and community.'''


MOTION_SYSTEM_PROMPT = (
    "You are a professional Disney animation director specializing in mood-based motion design. "
    "Describe how camera, characters and environment move to convey the mood, keeping content "
    "family-friendly and suitable for news animation."
)

MOTION_USER_PROMPT = '''Create motion for this {mood_upper} scene (intensity: {intensity}/10):
{description}

- Motion style: {pace}
- Camera work: {camera}
- Character movement: {character}
- Scene type: {scene_type}, duration {duration} seconds
- Emotional tone: {tone}

Respond in JSON as {{"motionDescription": "..."}} with at most 150 characters.'''


def country_prompts(article: str) -> tuple[str, str]:
    return COUNTRY_SYSTEM_PROMPT, COUNTRY_USER_PROMPT.format(article=article)


def story_prompts(article: str, scene_count: int, country: CountryContext) -> tuple[str, str]:
    system = STORY_SYSTEM_PROMPT.format(moods=AVAILABLE_MOODS, country=country.label)
    user = STORY_USER_PROMPT.format(
        scene_count=scene_count,
        article=article,
        architecture=country.architectural_style,
        demographics=country.demographic_notes,
        language=country.language_context,
        culture=country.cultural_context,
    )
    return system, user


def character_prompt(description: str, personality: str, country: CountryContext) -> str:
    return CHARACTER_PROMPT.format(
        description=description,
        personality=personality,
        country=country.primary_country,
        demographics=country.demographic_notes,
    )


def tag_character_references(description: str, names: List[str]) -> str:
    """Replace character names with ``Name(image N)`` reference tags."""
    tagged = description
    for index, name in enumerate(names, 1):
        pattern = re.compile(rf"\b{re.escape(name)}\b", re.I)
        tagged = pattern.sub(f"{name}(image {index})", tagged)
    return tagged


def scene_prompt(
    scene: SceneSpec,
    description: str,
    referenced: List[str],
    country: CountryContext,
) -> str:
    profile: MoodProfile = resolve_mood(scene.mood)
    if referenced:
        lines = [f"- {name}(image {i}) keeps the exact look of reference image {i}" for i, name in enumerate(referenced, 1)]
        characters_block = "Characters:\n" + "\n".join(lines) + f"\n- Body language: {profile.motion_character}\n"
    else:
        characters_block = ""

    return SCENE_PROMPT.format(
        mood_upper=scene.mood.upper(),
        intensity=scene.mood_intensity,
        description=tag_character_references(description, referenced),
        location=scene.location,
        camera_angle=scene.camera_angle,
        tone=scene.emotional_tone,
        keywords=", ".join(profile.keywords),
        atmosphere=profile.atmosphere,
        colors=profile.colors,
        characters_block=characters_block,
        country=country.primary_country,
        architecture=country.architectural_style,
        culture=country.cultural_context,
        demographics=country.demographic_notes,
    )


def motion_prompts(scene: SceneSpec) -> tuple[str, str]:
    profile = resolve_mood(scene.mood)
    user = MOTION_USER_PROMPT.format(
        mood_upper=scene.mood.upper(),
        intensity=scene.mood_intensity,
        description=scene.description,
        pace=profile.motion_pace,
        camera=profile.motion_camera,
        character=profile.motion_character,
        scene_type=scene.scene_type.value,
        duration=scene.duration,
        tone=scene.emotional_tone,
    )
    return MOTION_SYSTEM_PROMPT, user


def disney_motion_prompt(motion: str, scene: SceneSpec) -> str:
    """Decorate a motion description with the house style and scene mood."""
    profile = resolve_mood(scene.mood)
    return (
        f"{motion}, Disney/Pixar 3D animation visual style, {scene.emotional_tone} atmosphere, "
        f"{profile.atmosphere}, {profile.motion_pace}"
    )
