"""
Storyloom models.

Usage:
    from storyloom.models import Character, CharacterState, Timeline, World, PlotMemory
    from storyloom.models import MemoryLayerType, SemanticLayerType, normalize_type
    from storyloom.models import AgentConfig, ChatPayload, AgentLogEntry
"""

# --- Enums & utilities ---
from storyloom.models.enums import (
    MemoryLayerType,
    AgentCategory,
    SemanticLayerType,
    AttemptStatus,
    normalize_type,
)

# --- Domain models ---
from storyloom.models.domain import (
    Appearance, Identity, Personality, Relationship, Skill, Abilities,
    InventoryItem, EmotionalComponent, EmotionalState, VoiceProfile,
    Character, CharacterGroupRelationship, CharacterGroup, CharacterState,
    CharacterName,
    TimeUnit, GenesisPoint, TimelineEvent, TimePeriod,
    TimelineConsistencyRule, StoryTime, Timeline,
    Region, Continent, Geography, RuleDetail, MagicSystem, Faction,
    Artifact, CulturalRule, Zone, GeneralLaws, PhysicalLaws, World,
    Foreshadowing, Conflict, CharacterGoal, PlotMemory,
    NovelConfig, BasicSettings, CharacterSystem, Protagonist, CreativeElements,
    load_novel_config,
    Chapter, ChapterUpsert,
    SemanticMetadata, SemanticChunkRecord, VectorMatch,
    SemanticSearchRequest, SemanticSearchHit, SemanticSearchResult,
    SemanticDocumentCreate,
    SnapshotRecord, LayerSnapshot, CharacterSnapshot, TimelineSnapshot,
    WorldSnapshot, PlotSnapshot, ThemeSnapshot, EpisodicWindow,
)

# --- Result models ---
from storyloom.models.results import (
    AgentConfig, Prompt, ChatMessage, JsonSchemaSpec, ResponseFormat,
    ChatPayload, AgentLogEntry,
    CharacterMappingResult, MemoryCleared,
)

__all__ = [
    # Enums
    "MemoryLayerType", "AgentCategory", "SemanticLayerType", "AttemptStatus", "normalize_type",
    # Domain
    "Appearance", "Identity", "Personality", "Relationship", "Skill", "Abilities",
    "InventoryItem", "EmotionalComponent", "EmotionalState", "VoiceProfile",
    "Character", "CharacterGroupRelationship", "CharacterGroup", "CharacterState",
    "CharacterName",
    "TimeUnit", "GenesisPoint", "TimelineEvent", "TimePeriod",
    "TimelineConsistencyRule", "StoryTime", "Timeline",
    "Region", "Continent", "Geography", "RuleDetail", "MagicSystem", "Faction",
    "Artifact", "CulturalRule", "Zone", "GeneralLaws", "PhysicalLaws", "World",
    "Foreshadowing", "Conflict", "CharacterGoal", "PlotMemory",
    "NovelConfig", "BasicSettings", "CharacterSystem", "Protagonist", "CreativeElements",
    "load_novel_config",
    "Chapter", "ChapterUpsert",
    "SemanticMetadata", "SemanticChunkRecord", "VectorMatch",
    "SemanticSearchRequest", "SemanticSearchHit", "SemanticSearchResult",
    "SemanticDocumentCreate",
    "SnapshotRecord", "LayerSnapshot", "CharacterSnapshot", "TimelineSnapshot",
    "WorldSnapshot", "PlotSnapshot", "ThemeSnapshot", "EpisodicWindow",
    # Results
    "AgentConfig", "Prompt", "ChatMessage", "JsonSchemaSpec", "ResponseFormat",
    "ChatPayload", "AgentLogEntry",
    "CharacterMappingResult", "MemoryCleared",
]
