"""
Job state enumerations.

Phases advance strictly forward:

    created -> story-ready -> characters-ready -> scenes-ready -> videos-ready
            -> audio-ready -> assembled -> finalized
    (any non-terminal phase) -> failed
"""
from enum import Enum
from typing import Optional


class JobPhase(str, Enum):
    """Pipeline phases of an animation job."""
    CREATED = "created"
    STORY_READY = "story-ready"
    CHARACTERS_READY = "characters-ready"
    SCENES_READY = "scenes-ready"
    VIDEOS_READY = "videos-ready"
    AUDIO_READY = "audio-ready"
    ASSEMBLED = "assembled"
    FINALIZED = "finalized"
    FAILED = "failed"

    @classmethod
    def from_string(cls, value: str) -> "JobPhase":
        value_lower = value.lower()
        for phase in cls:
            if phase.value == value_lower:
                return phase
        raise ValueError(f"Unknown job phase: {value}")

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            JobPhase.CREATED: "Created",
            JobPhase.STORY_READY: "Story generated",
            JobPhase.CHARACTERS_READY: "Characters generated",
            JobPhase.SCENES_READY: "Scene images generated",
            JobPhase.VIDEOS_READY: "Scene videos generated",
            JobPhase.AUDIO_READY: "Narration generated",
            JobPhase.ASSEMBLED: "Animation assembled",
            JobPhase.FINALIZED: "Finalized",
            JobPhase.FAILED: "Failed",
        }
        return names[self]

    @property
    def work_label(self) -> str:
        """What the pipeline is doing while in this phase (reported on failure)."""
        labels = {
            JobPhase.CREATED: "story",
            JobPhase.STORY_READY: "characters",
            JobPhase.CHARACTERS_READY: "scenes",
            JobPhase.SCENES_READY: "videos",
            JobPhase.VIDEOS_READY: "audio",
            JobPhase.AUDIO_READY: "assembly",
            JobPhase.ASSEMBLED: "finalize",
        }
        return labels.get(self, self.value)

    @property
    def is_terminal(self) -> bool:
        return self in (JobPhase.FINALIZED, JobPhase.FAILED)

    @property
    def next_phase(self) -> Optional["JobPhase"]:
        """The phase that follows on success, or None for terminal phases."""
        order = _SUCCESS_ORDER
        if self not in order or self == JobPhase.FINALIZED:
            return None
        return order[order.index(self) + 1]

    @property
    def progress(self) -> int:
        """Rough completion percentage for progress reporting."""
        if self == JobPhase.FAILED:
            return 0
        return round(100 * _SUCCESS_ORDER.index(self) / (len(_SUCCESS_ORDER) - 1))


_SUCCESS_ORDER = (
    JobPhase.CREATED,
    JobPhase.STORY_READY,
    JobPhase.CHARACTERS_READY,
    JobPhase.SCENES_READY,
    JobPhase.VIDEOS_READY,
    JobPhase.AUDIO_READY,
    JobPhase.ASSEMBLED,
    JobPhase.FINALIZED,
)


class JobStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
