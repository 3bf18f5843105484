"""Per-layer snapshot records."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from storyloom.models.domain.character import CharacterState
from storyloom.models.domain.novel_config import CreativeElements
from storyloom.models.domain.plot import PlotMemory
from storyloom.models.domain.timeline import Timeline
from storyloom.models.domain.world import World


class SnapshotRecord(BaseModel):
    """Raw row of the snapshot table; state is the JSON document."""
    layer: str
    current_chapter: int = Field(ge=0)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    state: dict[str, Any] = Field(default_factory=dict)


class LayerSnapshot(BaseModel):
    current_chapter: int = Field(ge=0)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CharacterSnapshot(LayerSnapshot):
    state: CharacterState


class TimelineSnapshot(LayerSnapshot):
    timeline: Timeline


class WorldSnapshot(LayerSnapshot):
    world: World


class PlotSnapshot(LayerSnapshot):
    plot: PlotMemory


class ThemeSnapshot(BaseModel):
    theme: str
    creative_elements: CreativeElements


class EpisodicWindow(BaseModel):
    chapters: list[str] = Field(default_factory=list)
