"""World-state domain models."""

from pydantic import BaseModel, Field


class Region(BaseModel):
    name: str
    elevation: str = ""
    special_rules: list[str] = Field(default_factory=list)


class Continent(BaseModel):
    name: str
    climate: str = ""
    regions: dict[str, Region] = Field(default_factory=dict)


class Geography(BaseModel):
    continents: dict[str, Continent] = Field(default_factory=dict)


class RuleDetail(BaseModel):
    requirements: list[str] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)


class MagicSystem(BaseModel):
    name: str
    rules: dict[str, RuleDetail] = Field(default_factory=dict)


class Faction(BaseModel):
    name: str
    hierarchy: list[str] = Field(default_factory=list)
    territories: list[str] = Field(default_factory=list)
    special_abilities: list[str] = Field(default_factory=list)


class Artifact(BaseModel):
    name: str
    type: str = ""
    origin: str = ""
    abilities: list[str] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)


class CulturalRule(BaseModel):
    taboos: list[str] = Field(default_factory=list)
    customs: list[str] = Field(default_factory=list)
    social_hierarchy: list[str] = Field(default_factory=list)


class Zone(BaseModel):
    location: str = ""
    rules: list[str] = Field(default_factory=list)


class GeneralLaws(BaseModel):
    gravity: str = ""
    magic_permeability: str = ""


class PhysicalLaws(BaseModel):
    general: GeneralLaws = Field(default_factory=GeneralLaws)
    special_zones: dict[str, Zone] = Field(default_factory=dict)


class World(BaseModel):
    """Full world memory at one chapter. Keys are unique within each map."""
    geography: Geography = Field(default_factory=Geography)
    magic_systems: dict[str, MagicSystem] = Field(default_factory=dict)
    factions: dict[str, Faction] = Field(default_factory=dict)
    artifacts: dict[str, Artifact] = Field(default_factory=dict)
    cultural_rules: dict[str, CulturalRule] = Field(default_factory=dict)
    physical_laws: PhysicalLaws = Field(default_factory=PhysicalLaws)
