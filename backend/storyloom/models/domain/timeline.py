"""Timeline domain models."""

from typing import Optional

from pydantic import BaseModel, Field


class TimeUnit(BaseModel):
    """Calendar unit definitions of the story world."""
    year: str = ""
    month: str = ""
    day: str = ""
    hour: Optional[str] = None


class GenesisPoint(BaseModel):
    """The founding event every event year is measured from."""
    name: str
    description: str = ""
    founding_event: str = ""
    calendar_rules: list[str] = Field(default_factory=list)


class TimelineEvent(BaseModel):
    """An event positioned as an offset from the genesis point."""
    event_id: str
    year: int = Field(description="Years since the genesis point")
    month: Optional[int] = None
    day: Optional[int] = None
    name: str
    description: str = ""
    type: str = Field(
        default="other",
        description="political, war, natural, personal, magical, cultural, economic or other",
    )
    importance: str = Field(default="minor", description="critical, major or minor")
    involved_characters: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    consequences: list[str] = Field(default_factory=list)
    related_content: list[str] = Field(
        default_factory=list,
        description="Related elements of the event, never chapter references.",
    )
    is_described: bool = False


class TimePeriod(BaseModel):
    period_id: str
    name: str
    start_year: int
    end_year: int
    characteristics: list[str] = Field(default_factory=list)
    major_events: list[str] = Field(default_factory=list)


class TimelineConsistencyRule(BaseModel):
    """Descriptive consistency rule. Not evaluated by the memory layers."""
    rule_id: str
    description: str = ""
    type: str = Field(
        default="other",
        description="causality, chronology, character_age, travel_time or other",
    )
    check_conditions: list[str] = Field(default_factory=list)
    violation_handling: str = ""


class StoryTime(BaseModel):
    year: int = 0
    month: Optional[int] = None
    day: Optional[int] = None

    def sort_key(self) -> tuple[int, int, int]:
        return (self.year, self.month or 0, self.day or 0)


class Timeline(BaseModel):
    """Full timeline memory at one chapter."""
    genesis_point: GenesisPoint
    time_units: TimeUnit = Field(default_factory=TimeUnit)
    events: list[TimelineEvent] = Field(default_factory=list)
    periods: list[TimePeriod] = Field(default_factory=list)
    consistency_rules: list[TimelineConsistencyRule] = Field(default_factory=list)
    current_story_time: StoryTime = Field(default_factory=StoryTime)
