"""Semantic (vector) memory models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from storyloom.models.enums import SemanticLayerType


class SemanticMetadata(BaseModel):
    """Metadata bag of one stored chunk. Caller-supplied keys are preserved."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(default=None, description="Logical source-document id")
    type: SemanticLayerType
    segment: int = 0
    timestamp: int = Field(default=0, description="Write time in epoch milliseconds")
    chunkSize: int = 0
    content: Optional[str] = None


class SemanticChunkRecord(BaseModel):
    """One row of the vector store."""
    id: str
    values: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)


class VectorMatch(BaseModel):
    id: str
    score: float
    metadata: Optional[dict[str, Any]] = None


class SemanticSearchRequest(BaseModel):
    query: str
    type: SemanticLayerType
    max_results: Optional[int] = Field(default=None, ge=1)


class SemanticSearchHit(BaseModel):
    id: str
    metadata: SemanticMetadata
    score: float


class SemanticSearchResult(BaseModel):
    results: list[SemanticSearchHit] = Field(default_factory=list)


class SemanticDocumentCreate(BaseModel):
    """Payload for embedding and storing a document."""
    type: SemanticLayerType
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
