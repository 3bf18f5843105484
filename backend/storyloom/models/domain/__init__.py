"""Domain models: the narrative memory data structures."""

from storyloom.models.domain.character import (
    Appearance, Identity, Personality, Relationship, Skill, Abilities,
    InventoryItem, EmotionalComponent, EmotionalState, VoiceProfile,
    Character, CharacterGroupRelationship, CharacterGroup, CharacterState,
    CharacterName,
)
from storyloom.models.domain.timeline import (
    TimeUnit, GenesisPoint, TimelineEvent, TimePeriod,
    TimelineConsistencyRule, StoryTime, Timeline,
)
from storyloom.models.domain.world import (
    Region, Continent, Geography, RuleDetail, MagicSystem, Faction,
    Artifact, CulturalRule, Zone, GeneralLaws, PhysicalLaws, World,
)
from storyloom.models.domain.plot import Foreshadowing, Conflict, CharacterGoal, PlotMemory
from storyloom.models.domain.novel_config import (
    NovelConfig, BasicSettings, CharacterSystem, Protagonist, CreativeElements,
    load_novel_config,
)
from storyloom.models.domain.chapter import Chapter, ChapterUpsert
from storyloom.models.domain.semantic import (
    SemanticMetadata, SemanticChunkRecord, VectorMatch,
    SemanticSearchRequest, SemanticSearchHit, SemanticSearchResult,
    SemanticDocumentCreate,
)
from storyloom.models.domain.snapshot import (
    SnapshotRecord, LayerSnapshot, CharacterSnapshot, TimelineSnapshot,
    WorldSnapshot, PlotSnapshot, ThemeSnapshot, EpisodicWindow,
)

__all__ = [
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
]
