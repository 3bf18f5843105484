"""
Enum definitions for Storyloom.

Character role, relation and emotion vocabularies stay plain strings so that
model output outside the suggested vocabulary is still accepted.
"""
from enum import Enum


class MemoryLayerType(str, Enum):
    """Identifier of a memory layer."""
    EPISODIC = "episodic"
    SEMANTIC = "semantic"
    WORLD_STATE = "world_state"
    PLOT = "plot"
    CHARACTER = "character"
    THEME = "theme"
    TIMELINE = "timeline"


class AgentCategory(str, Enum):
    """Responsibility tag of an agent, used for routing and telemetry."""
    PLANNING = "planning"
    CREATION = "creation"
    VALIDATOR = "validator"
    MEMORY = "memory"
    EVALUATION = "evaluation"


class SemanticLayerType(str, Enum):
    """Content-type discriminator stored in semantic chunk metadata."""
    VOLUME = "volume"
    ARC = "arc"
    CHAPTER_SUMMARY = "chapter_summary"
    CHAPTER_CONTENT = "chapter_content"


class AttemptStatus(str, Enum):
    """Outcome of one racing attempt."""
    SUCCESS = "success"
    PARSE_FAILURE = "parse_failure"
    TRANSPORT_FAILURE = "transport_failure"
    SUPERSEDED = "superseded"


def normalize_type(type_str: str) -> str:
    """
    Normalize a type string for consistency.

    - Lowercase
    - Strip whitespace
    - Replace spaces and hyphens with underscores

    Examples:
        "World State" -> "world_state"
        "worldState" -> "worldstate"
        " chapter-summary " -> "chapter_summary"
    """
    return type_str.lower().strip().replace(" ", "_").replace("-", "_")
