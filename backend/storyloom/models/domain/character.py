"""Character memory domain models."""

from typing import Optional

from pydantic import BaseModel, Field


class Appearance(BaseModel):
    height: str = ""
    build: str = ""
    hair: str = ""
    eyes: str = ""
    distinctive_features: list[str] = Field(default_factory=list)
    typical_attire: str = ""


class Identity(BaseModel):
    """Canonical name, aliases and role class of a character."""
    current_name: str
    known_aliases: list[str] = Field(default_factory=list)
    role_type: str = Field(
        default="minor",
        description="protagonist, antagonist, supporting or minor",
    )
    age: int = 0
    gender: str = "other"
    appearance: Appearance = Field(default_factory=Appearance)

    def all_names(self) -> list[str]:
        return [self.current_name, *self.known_aliases]


class Personality(BaseModel):
    core_traits: list[str] = Field(default_factory=list)
    moral_alignment: str = ""
    fears: list[str] = Field(default_factory=list)
    motivations: list[str] = Field(default_factory=list)
    quirks: list[str] = Field(default_factory=list)


class Relationship(BaseModel):
    """A typed, weighted edge to another character."""
    target_id: str
    target_name: str = ""
    relation_type: str = Field(
        default="ally",
        description="family, mentor, friend, rival, enemy, lover or ally",
    )
    affinity_level: float = Field(default=0.5, description="Range [0, 1]")


class Skill(BaseModel):
    skill_id: str
    name: str
    level: int = 1
    progress: float = Field(default=0.0, description="Range [0, 1]")
    last_used: int = Field(default=0, description="Chapter number the skill was last used in")
    description: str = ""
    limitations: list[str] = Field(default_factory=list)


class Abilities(BaseModel):
    skills: list[Skill] = Field(default_factory=list)
    special_traits: list[str] = Field(default_factory=list)


class InventoryItem(BaseModel):
    item_id: str
    name: str
    description: str = ""
    effects: list[str] = Field(default_factory=list)


class EmotionalComponent(BaseModel):
    emotion: str
    target: Optional[str] = None
    intensity: float = Field(default=0.0, description="Range [0, 1]")


class EmotionalState(BaseModel):
    overall_mood: str = "neutral"
    intensity: float = Field(default=0.0, description="Range [0, 1]")
    components: list[EmotionalComponent] = Field(default_factory=list)


class VoiceProfile(BaseModel):
    speech_patterns: list[str] = Field(default_factory=list)
    catchphrases: list[str] = Field(default_factory=list)
    vocabulary_style: str = ""
    recent_dialogue_example: str = ""


class Character(BaseModel):
    """A character, unique by character_id."""
    character_id: str
    identity: Identity
    personality: Personality = Field(default_factory=Personality)
    relationships: list[Relationship] = Field(default_factory=list)
    abilities: Abilities = Field(default_factory=Abilities)
    inventory: list[InventoryItem] = Field(default_factory=list)
    emotional_state: EmotionalState = Field(default_factory=EmotionalState)
    voice_profile: VoiceProfile = Field(default_factory=VoiceProfile)


class CharacterGroupRelationship(BaseModel):
    target_group: str
    relation: str = ""
    tension_level: float = Field(default=0.0, description="Range [0, 1]")


class CharacterGroup(BaseModel):
    """A group referencing its members by character id; it never owns them."""
    group_id: str
    name: str
    members: list[str] = Field(default_factory=list)
    faction_alignment: str = ""
    group_relationships: list[CharacterGroupRelationship] = Field(default_factory=list)


class CharacterState(BaseModel):
    """Full character memory at one chapter."""
    characters: list[Character] = Field(default_factory=list)
    character_groups: list[CharacterGroup] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.characters and not self.character_groups


class CharacterName(BaseModel):
    """A name mention harvested from chapter prose."""
    name: str
