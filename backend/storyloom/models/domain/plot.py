"""Plot memory domain models."""

from pydantic import BaseModel, Field


class Foreshadowing(BaseModel):
    description: str
    progress: float = Field(default=0.0, description="Range [0, 1]")


class Conflict(BaseModel):
    description: str
    intensity: float = Field(default=0.0, description="Range [0, 1]")
    parties: list[str] = Field(default_factory=list)


class CharacterGoal(BaseModel):
    character: str
    goal: str
    progress: float = Field(default=0.0, description="Range [0, 1]")


class PlotMemory(BaseModel):
    """Open foreshadowings, conflicts and goals. Completed entries are dropped by the plot agent."""
    foreshadowings: list[Foreshadowing] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    character_goals: list[CharacterGoal] = Field(default_factory=list)
