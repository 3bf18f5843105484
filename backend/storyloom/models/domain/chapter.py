"""Chapter domain model."""

from typing import Optional

from pydantic import BaseModel, Field


class ChapterUpsert(BaseModel):
    """Payload for committing a chapter."""
    title: str
    text: str
    summary: str = ""
    word_count: Optional[int] = None
    arc_number: Optional[int] = None
    volume_number: Optional[int] = None


class Chapter(BaseModel):
    """A committed chapter. Chapter numbers start at 1."""
    chapter_number: int = Field(ge=1)
    title: str
    text: str
    summary: str = ""
    word_count: int = 0
    arc_number: Optional[int] = None
    volume_number: Optional[int] = None
