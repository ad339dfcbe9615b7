"""
Pydantic models for the animation pipeline.
"""
import math
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .exceptions import InputValidationError


ARTICLE_MIN_LENGTH = 100
ARTICLE_MAX_LENGTH = 10000
MAX_SCENES = 20


class SceneType(str, Enum):
    ACTION = "action"
    DIALOGUE = "dialogue"
    LANDSCAPE = "landscape"
    EMOTIONAL = "emotional"
    STANDARD = "standard"


class AssetKind(str, Enum):
    CHARACTER_IMAGE = "character-image"
    SCENE_IMAGE = "scene-image"
    RAW_VIDEO = "raw-video"
    NARRATION_AUDIO = "narration-audio"


class ClipPosition(str, Enum):
    FIRST = "first"
    LAST = "last"
    MIDDLE = "middle"
    ONLY = "only"

    @classmethod
    def for_index(cls, index: int, total: int) -> "ClipPosition":
        """Position of the clip at ``index`` among ``total`` assembled clips."""
        if total < 1 or not 0 <= index < total:
            raise ValueError(f"index {index} out of range for {total} clips")
        if total == 1:
            return cls.ONLY
        if index == 0:
            return cls.FIRST
        if index == total - 1:
            return cls.LAST
        return cls.MIDDLE

    @property
    def fades_in(self) -> bool:
        return self in (ClipPosition.FIRST, ClipPosition.ONLY)

    @property
    def fades_out(self) -> bool:
        return self in (ClipPosition.LAST, ClipPosition.ONLY)


class _CamelModel(BaseModel):
    """Accepts both camelCase (LLM output) and snake_case field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Story structure ──────────────────────────────────────────────────

class Character(_CamelModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    personality: str = ""
    role: str = ""


class SceneSpec(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    scene_number: int = Field(..., ge=1)
    description: str
    characters: list[str] = Field(default_factory=list)
    location: str = ""
    mood: str = "professional"
    camera_angle: str = ""
    narration: str = ""
    duration: float = Field(default=10.0, gt=0)
    scene_type: SceneType = SceneType.STANDARD
    mood_intensity: int = Field(default=5, ge=1, le=10)
    emotional_tone: str = ""

    @field_validator("scene_type", mode="before")
    @classmethod
    def coerce_scene_type(cls, v):
        if isinstance(v, SceneType):
            return v
        try:
            return SceneType(str(v).lower())
        except ValueError:
            return SceneType.STANDARD

    @field_validator("mood_intensity", mode="before")
    @classmethod
    def clamp_intensity(cls, v):
        if v is None:
            return 5
        return max(1, min(10, int(round(float(v)))))

    @model_validator(mode="before")
    @classmethod
    def default_tone(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            tone = data.pop("emotionalTone", None) or data.pop("emotional_tone", None)
            data["emotional_tone"] = tone or data.get("mood") or "professional"
        return data


class StoryStructure(_CamelModel):
    title: str
    theme: str = ""
    characters: list[Character] = Field(default_factory=list)
    scenes: list[SceneSpec] = Field(..., min_length=1)
    overall_mood: str = "professional"
    mood_progression: list[str] = Field(default_factory=list)

    @field_validator("scenes")
    @classmethod
    def sort_scenes(cls, v: list[SceneSpec]) -> list[SceneSpec]:
        numbers = [s.scene_number for s in v]
        if len(set(numbers)) != len(numbers):
            raise ValueError(f"duplicate scene numbers: {numbers}")
        return sorted(v, key=lambda s: s.scene_number)

    def character(self, name: str) -> Optional[Character]:
        for c in self.characters:
            if c.name == name:
                return c
        return None


class CountryContext(_CamelModel):
    primary_country: str
    primary_city: Optional[str] = None
    cultural_context: str = ""
    architectural_style: str = ""
    demographic_notes: str = ""
    language_context: str = ""

    @classmethod
    def default(cls) -> "CountryContext":
        return cls(
            primary_country="International",
            primary_city=None,
            cultural_context="Modern urban setting with diverse population",
            architectural_style="Contemporary international architecture",
            demographic_notes="Diverse, modern professional attire",
            language_context="English signage and text",
        )

    @property
    def label(self) -> str:
        if self.primary_city:
            return f"{self.primary_country} ({self.primary_city})"
        return self.primary_country


class MotionDescription(_CamelModel):
    motion_description: str = Field(..., min_length=1)

    @field_validator("motion_description")
    @classmethod
    def truncate(cls, v: str) -> str:
        return v.strip()[:150]


# ── Generated artifacts ──────────────────────────────────────────────

class GeneratedAsset(BaseModel):
    kind: AssetKind
    owner: str
    path: str
    provider: str = ""
    duration: Optional[float] = Field(default=None, ge=0)

    @property
    def scene_number(self) -> Optional[int]:
        if self.kind == AssetKind.CHARACTER_IMAGE:
            return None
        return int(self.owner)


class ProviderAttempt(BaseModel):
    attempt: int = Field(..., ge=1)
    strategy: str
    provider: str
    success: bool
    video_url: Optional[str] = None
    error: Optional[str] = None
    elapsed_seconds: float = Field(default=0, ge=0)


class VideoResolution(BaseModel):
    video_url: str
    provider: str
    strategy: str
    attempts: list[ProviderAttempt] = Field(default_factory=list)


class ProcessedClip(BaseModel):
    scene_number: int = Field(..., ge=1)
    path: str
    duration: float = Field(..., ge=0)
    position: ClipPosition
    fade_in: bool = False
    fade_out: bool = False
    fade_out_start: Optional[float] = Field(default=None, ge=0)

    @field_validator("duration")
    @classmethod
    def reject_nan(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("duration must be a number")
        return v


class Timeline(BaseModel):
    clips: list[ProcessedClip] = Field(..., min_length=1)
    output_path: str

    @field_validator("clips")
    @classmethod
    def strictly_increasing(cls, v: list[ProcessedClip]) -> list[ProcessedClip]:
        for prev, cur in zip(v, v[1:]):
            if cur.scene_number <= prev.scene_number:
                raise ValueError(
                    f"clip order broken: scene {cur.scene_number} follows scene {prev.scene_number}"
                )
        return v

    @property
    def scene_numbers(self) -> list[int]:
        return [c.scene_number for c in self.clips]

    @property
    def total_duration(self) -> float:
        return sum(c.duration for c in self.clips)


# ── Requests and results ─────────────────────────────────────────────

class GenerationRequest(BaseModel):
    article: str = Field(..., max_length=ARTICLE_MAX_LENGTH)
    scene_count: int = Field(..., ge=1, le=MAX_SCENES)
    webhook_url: Optional[str] = None

    @field_validator("article")
    @classmethod
    def long_enough(cls, v: str) -> str:
        if len(v.strip()) < ARTICLE_MIN_LENGTH:
            raise ValueError(f"Article content must be at least {ARTICLE_MIN_LENGTH} characters long")
        return v

    @classmethod
    def parse(cls, data: dict) -> "GenerationRequest":
        """Validate raw request data, raising InputValidationError on failure."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            raise InputValidationError("; ".join(messages), errors=e.errors()) from e


class MoodBeat(BaseModel):
    scene_number: int
    mood: str
    intensity: int
    emotional_tone: str


class JobResult(BaseModel):
    job_id: str
    success: bool = True
    video_path: str
    title: str
    processing_time_ms: int = Field(..., ge=0)
    scene_count: int
    clip_count: int
    duration_seconds: float = Field(default=0, ge=0)
    overall_mood: str
    mood_progression: list[MoodBeat] = Field(default_factory=list)
    country: str = "International"
