"""
Mood configuration tables.

Pure data describing how each narrative mood maps to visual treatment,
video generation settings and narration voice. Loaded once per process and
exposed read-only; consumed by prompt construction and the provider layer.
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MOOD = "professional"

# ElevenLabs voices
VOICE_DANIEL = "onwK4e9ZLuTAKqWW03F9"
VOICE_SUNNY = "aXbjk4JoIDXdCNz29TrS"
VOICE_SARAH = "EXAVITQu4vr4xnSDxMaL"
VOICE_LILY = "pFZP5JQG7iQjIQuC4Bku"


@dataclass(frozen=True)
class VideoMoodSettings:
    cfg_scale: float
    preferred_mode: str
    camera_style: str
    motion_intensity: str


@dataclass(frozen=True)
class VoiceMoodSettings:
    stability: float
    similarity_boost: float
    style: float
    use_speaker_boost: bool = True


@dataclass(frozen=True)
class MoodProfile:
    name: str
    keywords: Tuple[str, ...]
    motion_pace: str
    motion_camera: str
    motion_character: str
    atmosphere: str
    colors: str
    video: VideoMoodSettings
    voice: VoiceMoodSettings
    voice_id: str
    motion_descriptor: str
    camera_work: str
    negative: str


_PROFILES = {
    "serious": MoodProfile(
        name="serious",
        keywords=("professional", "focused", "authoritative", "formal", "measured", "respectful", "dignified"),
        motion_pace="deliberate, measured movements with purpose",
        motion_camera="steady, stable camera work with minimal, controlled movement",
        motion_character="purposeful gestures, formal posture, professional demeanor",
        atmosphere="focused, authoritative atmosphere with clear, direct lighting",
        colors="neutral tones with cooler color palette, blues and grays",
        video=VideoMoodSettings(0.6, "std", "steady", "controlled"),
        voice=VoiceMoodSettings(0.7, 0.8, 0.2),
        voice_id=VOICE_DANIEL,
        motion_descriptor="steady, controlled movements, professional camera work, dignified pacing",
        camera_work="steady camera, minimal movement, professional framing",
        negative="chaotic movement, sudden changes, unprofessional behavior, casual atmosphere",
    ),
    "hopeful": MoodProfile(
        name="hopeful",
        keywords=("optimistic", "bright", "uplifting", "warm", "encouraging", "positive", "inspiring"),
        motion_pace="smooth, flowing movements with gentle energy",
        motion_camera="gentle upward camera movements, slow pushes creating optimism",
        motion_character="open gestures, upright posture, genuine smiles, positive energy",
        atmosphere="bright, optimistic lighting with warm, uplifting glow",
        colors="warm palette with golden, orange, and soft yellow tones",
        video=VideoMoodSettings(0.4, "std", "gentle_upward", "flowing"),
        voice=VoiceMoodSettings(0.5, 0.75, 0.3),
        voice_id=VOICE_SUNNY,
        motion_descriptor="gentle upward movements, optimistic camera flow, positive energy",
        camera_work="gentle upward camera movement, optimistic angles",
        negative="negative expressions, downward movement, pessimistic atmosphere, dark mood",
    ),
    "concerned": MoodProfile(
        name="concerned",
        keywords=("thoughtful", "contemplative", "careful", "attentive", "respectful", "considerate", "empathetic"),
        motion_pace="careful, thoughtful movements showing consideration",
        motion_camera="slow, deliberate camera movements with respectful distance",
        motion_character="contemplative gestures, attentive posture, caring expressions",
        atmosphere="thoughtful, contemplative lighting with gentle, respectful contrast",
        colors="muted palette with subtle blue undertones, thoughtful grays",
        video=VideoMoodSettings(0.5, "std", "careful", "thoughtful"),
        voice=VoiceMoodSettings(0.6, 0.8, 0.1),
        voice_id=VOICE_SARAH,
        motion_descriptor="careful, thoughtful movements, respectful camera work, considerate pacing",
        camera_work="careful camera positioning, respectful framing",
        negative="careless behavior, rushed movements, insensitive actions, dismissive attitude",
    ),
    "urgent": MoodProfile(
        name="urgent",
        keywords=("important", "focused", "alert", "efficient", "purposeful", "timely", "professional"),
        motion_pace="purposeful, efficient movements with controlled energy",
        motion_camera="steady but energetic camera work with focus",
        motion_character="alert posture, focused gestures, professional urgency",
        atmosphere="energetic lighting with higher contrast and clarity",
        colors="vibrant but controlled palette with alert tones",
        video=VideoMoodSettings(0.7, "std", "focused", "efficient"),
        voice=VoiceMoodSettings(0.8, 0.85, 0.4),
        voice_id=VOICE_DANIEL,
        motion_descriptor="focused, efficient movements, alert camera work, purposeful pacing",
        camera_work="focused camera work, efficient movements",
        negative="chaotic panic, disorganized movement, unprofessional urgency, frantic behavior",
    ),
    "informative": MoodProfile(
        name="informative",
        keywords=("clear", "professional", "informative", "educational", "accessible", "comprehensive"),
        motion_pace="steady, clear movements supporting information delivery",
        motion_camera="stable, professional camera work enhancing comprehension",
        motion_character="clear, professional gestures and posture",
        atmosphere="clean, professional lighting enhancing comprehension",
        colors="neutral, professional palette supporting content focus",
        video=VideoMoodSettings(0.3, "std", "stable", "clear"),
        voice=VoiceMoodSettings(0.75, 0.8, 0.0),
        voice_id=VOICE_LILY,
        motion_descriptor="stable, clear movements, educational camera work, accessible pacing",
        camera_work="stable camera, clear educational shots",
        negative="confusing movements, unclear presentation, distracting elements, poor visibility",
    ),
    "celebratory": MoodProfile(
        name="celebratory",
        keywords=("joyful", "celebratory", "positive", "energetic", "uplifting", "festive", "triumphant"),
        motion_pace="joyful, energetic movements with positive momentum",
        motion_camera="celebratory camera movements with gentle energy",
        motion_character="joyful expressions, celebratory gestures, positive energy",
        atmosphere="festive, bright lighting with positive energy",
        colors="vibrant, joyful palette with warm, celebratory tones",
        video=VideoMoodSettings(0.4, "std", "dynamic", "joyful"),
        voice=VoiceMoodSettings(0.4, 0.7, 0.5),
        voice_id=VOICE_SUNNY,
        motion_descriptor="joyful, dynamic movements, celebratory camera work, energetic pacing",
        camera_work="dynamic camera work, joyful movements",
        negative="sad expressions, downward movement, negative atmosphere, somber mood",
    ),
    "reflective": MoodProfile(
        name="reflective",
        keywords=("contemplative", "thoughtful", "introspective", "reflective", "peaceful", "meditative"),
        motion_pace="slow, contemplative movements encouraging thought",
        motion_camera="gentle, reflective camera work",
        motion_character="thoughtful expressions, contemplative posture",
        atmosphere="warm, introspective lighting encouraging reflection",
        colors="warm, muted palette encouraging introspection",
        video=VideoMoodSettings(0.6, "std", "slow", "contemplative"),
        voice=VoiceMoodSettings(0.8, 0.85, 0.1),
        voice_id=VOICE_SARAH,
        motion_descriptor="slow, contemplative movements, meditative camera work, peaceful pacing",
        camera_work="slow camera movements, contemplative shots",
        negative="rushed movements, chaotic activity, distracting elements, agitated behavior",
    ),
    "professional": MoodProfile(
        name="professional",
        keywords=("competent", "reliable", "professional", "business-appropriate", "skilled", "experienced"),
        motion_pace="professional, competent movements",
        motion_camera="business-standard camera work",
        motion_character="professional demeanor, competent posture",
        atmosphere="business-appropriate lighting conveying competence",
        colors="professional palette with business-appropriate tones",
        video=VideoMoodSettings(0.5, "std", "business_standard", "competent"),
        voice=VoiceMoodSettings(0.75, 0.8, 0.2),
        voice_id=VOICE_DANIEL,
        motion_descriptor="business-standard movements, competent camera work, reliable pacing",
        camera_work="business-standard camera work, competent framing",
        negative="unprofessional behavior, casual atmosphere, sloppy presentation, informal conduct",
    ),
}

MOODS: Mapping[str, MoodProfile] = MappingProxyType(_PROFILES)

# Checked in order as substrings of the normalized label
MOOD_SYNONYMS: Tuple[Tuple[str, str], ...] = (
    ("grave", "serious"),
    ("somber", "serious"),
    ("formal", "serious"),
    ("positive", "hopeful"),
    ("optimistic", "hopeful"),
    ("upbeat", "celebratory"),
    ("worried", "concerned"),
    ("anxious", "concerned"),
    ("troubled", "concerned"),
    ("critical", "urgent"),
    ("important", "urgent"),
    ("emergency", "urgent"),
    ("educational", "informative"),
    ("explanatory", "informative"),
    ("factual", "informative"),
    ("joyful", "celebratory"),
    ("happy", "celebratory"),
    ("triumphant", "celebratory"),
    ("thoughtful", "reflective"),
    ("contemplative", "reflective"),
    ("business", "professional"),
    ("corporate", "professional"),
)

BASE_NEGATIVE_PROMPT = "low quality, blurry, distorted, violent content, inappropriate material, text overlays"

# Moods whose delivery gets less stable as intensity rises
_DYNAMIC_VOICE_MOODS = frozenset({"celebratory", "hopeful", "urgent"})


def resolve_mood(label: str) -> MoodProfile:
    """Resolve a free-form mood label to a known profile."""
    normalized = (label or "").strip().lower()
    if normalized in MOODS:
        return MOODS[normalized]

    for synonym, base in MOOD_SYNONYMS:
        if synonym in normalized:
            return MOODS[base]

    logger.warning(f"Unknown mood '{label}', defaulting to '{DEFAULT_MOOD}'")
    return MOODS[DEFAULT_MOOD]


def video_settings(mood: str, intensity: int = 5) -> Dict[str, object]:
    """Video generation settings for a mood, adjusted for intensity (1-10)."""
    profile = resolve_mood(mood)
    factor = intensity / 10
    return {
        "cfg_scale": min(1.0, profile.video.cfg_scale + factor * 0.2),
        "preferred_mode": profile.video.preferred_mode,
        "camera_style": profile.video.camera_style,
        "motion_intensity": profile.video.motion_intensity,
        "mood_intensity": intensity,
        "intensity_factor": factor,
    }


def voice_settings(mood: str, intensity: int = 5) -> Dict[str, object]:
    """ElevenLabs voice_settings payload for a mood and intensity."""
    profile = resolve_mood(mood)
    factor = intensity / 10
    stability = profile.voice.stability
    if profile.name in _DYNAMIC_VOICE_MOODS:
        stability = max(0.3, stability - factor * 0.2)
    return {
        "stability": stability,
        "similarity_boost": profile.voice.similarity_boost,
        "style": min(1.0, profile.voice.style + factor * 0.2),
        "use_speaker_boost": profile.voice.use_speaker_boost,
    }


def voice_for_mood(overall_mood: str) -> str:
    return resolve_mood(overall_mood).voice_id


def intensity_level(intensity: int) -> str:
    if intensity <= 3:
        return "low"
    if intensity <= 7:
        return "medium"
    return "high"


_INTENSITY_DESCRIPTORS = {
    "low": "subtle, gentle",
    "medium": "balanced, moderate",
    "high": "pronounced, dynamic",
}


def enhance_video_prompt(prompt: str, mood: str, intensity: int = 5) -> str:
    """Append mood motion and camera characteristics to a motion prompt."""
    profile = resolve_mood(mood)
    descriptor = _INTENSITY_DESCRIPTORS[intensity_level(intensity)]
    return (
        f"{prompt}, {profile.motion_descriptor}, {profile.camera_work}, "
        f"{descriptor} {profile.name} mood expression"
    )


def negative_prompt(mood: str) -> str:
    return f"{BASE_NEGATIVE_PROMPT}, {resolve_mood(mood).negative}"
