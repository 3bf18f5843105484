"""Static novel configuration models."""

import json
from pathlib import Path

from pydantic import BaseModel, Field


class BasicSettings(BaseModel):
    title: str
    total_word_count: int = 0
    chapter_word_count: int = 0
    writing_style: str = ""
    narrative_perspective: str = ""
    central_theme: str = ""


class PowerSystem(BaseModel):
    levels: list[str] = Field(default_factory=list)
    energy_source: str = ""
    cultivation_methods: list[str] = Field(default_factory=list)


class WorldBuilding(BaseModel):
    era_setting: str = ""
    world_map: list[str] = Field(default_factory=list)
    power_system: PowerSystem = Field(default_factory=PowerSystem)
    social_structure: str = ""
    special_rules: list[str] = Field(default_factory=list)


class PlotStructure(BaseModel):
    central_conflict: str = ""
    core_hook: str = ""
    main_quest: str = ""
    ending_type: str = ""


class Protagonist(BaseModel):
    name: str
    appearance: str = ""
    personality_traits: list[str] = Field(default_factory=list)
    motivation: str = ""
    growth_arc: str = ""
    special_ability: str = ""


class Antagonist(BaseModel):
    name: str
    antagonist_type: str = ""
    conflict_point: str = ""


class SupportingCharacter(BaseModel):
    role: str
    relation_to_protagonist: str = ""


class CharacterSystem(BaseModel):
    protagonist: Protagonist
    antagonists: list[Antagonist] = Field(default_factory=list)
    supporting_characters: list[SupportingCharacter] = Field(default_factory=list)


class ChapterStructure(BaseModel):
    hook_requirements: str = ""
    cliffhanger_frequency: str = ""


class MarketPositioning(BaseModel):
    target_audience: str = ""
    genre_tags: list[str] = Field(default_factory=list)
    competitive_analysis: str = ""


class PublicationSettings(BaseModel):
    chapter_structure: ChapterStructure = Field(default_factory=ChapterStructure)
    market_positioning: MarketPositioning = Field(default_factory=MarketPositioning)


class CreativeElements(BaseModel):
    signature_features: list[str] = Field(default_factory=list)
    cultural_references: list[str] = Field(default_factory=list)
    unique_settings: list[str] = Field(default_factory=list)


class NovelConfig(BaseModel):
    """Author-supplied configuration of the whole novel."""
    basic_settings: BasicSettings
    world_building: WorldBuilding = Field(default_factory=WorldBuilding)
    plot_structure: PlotStructure = Field(default_factory=PlotStructure)
    character_system: CharacterSystem
    publication_settings: PublicationSettings = Field(default_factory=PublicationSettings)
    creative_elements: CreativeElements = Field(default_factory=CreativeElements)


def load_novel_config(path: str | Path) -> NovelConfig:
    """
    Load a novel configuration file.

    Accepts either ``{"novel_config": {...}}`` or the bare configuration object.

    :param path: Path to the JSON file
    :type path: str | Path
    :return: Parsed configuration
    :rtype: NovelConfig
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "novel_config" in data:
        data = data["novel_config"]
    return NovelConfig.model_validate(data)
