"""
Error types raised across the memory and agent services.
"""

from pydantic import BaseModel


class SnapshotNotFoundError(LookupError):
    """No snapshot exists for a non-zero chapter; chapters must be generated in order."""

    def __init__(self, layer: str, chapter: int):
        self.layer = layer
        self.chapter = chapter
        super().__init__(f"No {layer} snapshot found for chapter {chapter}")


class StructuredOutputError(ValueError):
    """A completion response did not parse as the expected JSON shape."""


class CompletionError(RuntimeError):
    """The completion transport is unusable or returned an unusable body."""


class EmbeddingError(ValueError):
    """Text could not be turned into embedding vectors."""


class AttemptFailure(BaseModel):
    """One failed candidate inside a race."""

    model: str
    error: str
    raw: str = ""


class AgentExecutionError(RuntimeError):
    """Every candidate model failed for one logical agent task."""

    def __init__(self, agent: str, failures: list[AttemptFailure]):
        self.agent = agent
        self.failures = failures
        reasons = "; ".join(f"[{f.model}] {f.error}" for f in failures) or "no candidate models"
        super().__init__(f"All model requests failed for {agent}: {reasons}")
