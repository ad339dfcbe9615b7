"""
Content safety - visual adaptation of scene descriptions.

News scenes are reworded into broadcast-safe visuals before image generation.
Narration is never touched; only the description fed to the image model.
"""
import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SanitizedScene:
    description: str
    was_modified: bool
    story_type: str


# Story type detection, first match wins
STORY_TYPE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("crime", ("crime", "murder", "robbery", "theft", "arrest", "suspect", "police", "investigation", "evidence")),
    ("accident", ("accident", "crash", "collision", "emergency", "ambulance", "hospital")),
    ("conflict", ("protest", "riot", "clash", "demonstration", "conflict")),
    ("emergency", ("fire", "disaster", "rescue", "evacuation", "emergency")),
    ("investigation", ("investigation", "probe", "inquiry", "court", "trial", "hearing")),
)

ADAPTATIONS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "crime": MappingProxyType({
        "murder scene": "police investigation area with evidence markers",
        "shooting": "police investigation with officers documenting the scene",
        "robbery in progress": "police officers interviewing witnesses",
        "break-in": "security personnel examining the affected area",
        "assault": "medical personnel providing assistance",
        "attack": "emergency response team coordinating",
        "violence": "police officers taking statements from witnesses",
        "stabbing": "emergency medical response scene",
        "gunshot": "police investigation and evidence collection",
        "weapon": "police evidence collection team working",
        "blood": "forensic investigation team documenting evidence",
        "victim": "medical personnel providing care and assistance",
        "perpetrator": "police officer discussing the case",
        "suspect being arrested": "police officers in professional discussion",
        "fight": "police officers interviewing witnesses",
        "threatening": "police officers taking witness statements",
    }),
    "accident": MappingProxyType({
        "car crash": "emergency responders at the accident site",
        "collision": "traffic officials documenting the incident",
        "vehicle accident": "emergency medical team providing assistance",
        "plane crash": "emergency response coordination at the airport",
        "train derailment": "railway safety officials examining the area",
        "explosion": "emergency response team securing the area",
        "fire": "firefighters and emergency personnel at the scene",
        "building collapse": "rescue workers coordinating search efforts",
        "injured victims": "medical personnel providing emergency care",
        "casualties": "emergency medical response team",
        "wreckage": "investigation team examining the affected area",
        "debris": "cleanup crews working to clear the area",
    }),
    "conflict": MappingProxyType({
        "violent protest": "peaceful demonstration with community leaders",
        "riot": "community dialogue session",
        "clash between": "meeting between representatives of",
        "fighting": "discussing and negotiating",
        "confrontation": "dialogue session",
        "aggressive crowd": "gathered community members",
        "protesters throwing": "protesters peacefully demonstrating",
        "police in riot gear": "police officers maintaining public safety",
        "tear gas": "crowd management measures",
        "barricades": "organized demonstration area",
    }),
    "emergency": MappingProxyType({
        "building on fire": "firefighters coordinating response at the building",
        "people trapped": "rescue workers organizing evacuation procedures",
        "rescue operation": "emergency response team coordination",
        "evacuation": "emergency personnel guiding people to safety",
        "disaster zone": "emergency response coordination area",
        "emergency sirens": "emergency vehicles positioned for response",
        "panic": "organized emergency response",
        "chaos": "coordinated emergency management",
    }),
    "investigation": MappingProxyType({
        "crime scene": "investigation area with professional documentation",
        "evidence collection": "forensic team professional documentation",
        "interrogation": "professional interview session",
        "suspect questioning": "police interview room",
        "witness testimony": "formal statement session",
        "court hearing": "professional legal proceedings",
        "trial": "formal judicial session",
    }),
    "general": MappingProxyType({
        "graphic images": "professional documentation",
        "disturbing scenes": "investigation area",
        "violent imagery": "response coordination",
    }),
})

# Applied after the crime table regardless of whether it matched
CRIME_PHRASE_REWRITES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"\b(committing|performing|executing)\s+(a\s+)?(crime|murder|robbery)\b", re.I),
     "investigating the reported incident"),
    (re.compile(r"\b(during|while)\s+the\s+(attack|assault|crime)\b", re.I), "during the investigation"),
    (re.compile(r"\b(scene\s+of\s+the\s+)(crime|murder|attack)\b", re.I), "investigation area"),
    (re.compile(r"\b(criminal|perpetrator)\s+(escaping|fleeing)\b", re.I), "police coordinating response efforts"),
)


def detect_story_type(description: str) -> str:
    lowered = description.lower()
    for story_type, keywords in STORY_TYPE_KEYWORDS:
        if any(k in lowered for k in keywords):
            return story_type
    return "general"


def _apply_table(description: str, table: Mapping[str, str]) -> Tuple[str, bool]:
    modified = False
    for unsafe, safe in table.items():
        pattern = re.compile(re.escape(unsafe), re.I)
        if pattern.search(description):
            description = pattern.sub(safe, description)
            modified = True
    return description, modified


def sanitize_scene_description(description: str) -> SanitizedScene:
    """Rewrite a scene description into broadcast-safe visuals."""
    story_type = detect_story_type(description)
    adapted, modified = _apply_table(description, ADAPTATIONS[story_type])

    if story_type == "crime":
        for pattern, replacement in CRIME_PHRASE_REWRITES:
            adapted = pattern.sub(replacement, adapted)

    if modified:
        logger.info(f"[SAFETY] Scene visuals adapted for {story_type} story")

    return SanitizedScene(description=adapted, was_modified=modified, story_type=story_type)
