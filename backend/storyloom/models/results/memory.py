"""Result models for memory operations."""

from pydantic import BaseModel, Field

from storyloom.models.domain.character import Character, CharacterGroup


class CharacterMappingResult(BaseModel):
    """Characters and groups resolved from free-text name mentions."""
    characters: list[Character] = Field(default_factory=list)
    character_groups: list[CharacterGroup] = Field(default_factory=list)


class MemoryCleared(BaseModel):
    success: bool
    snapshots: int = 0
    chapters: int = 0
    semantic_chunks: int = 0
