"""
Embedding service.

Splits long text into overlapping, boundary-aware chunks and embeds every
chunk in one provider call.
"""

from typing import Protocol

from openai import AsyncOpenAI
from pydantic import BaseModel

from storyloom.config import Settings
from storyloom.errors import EmbeddingError
from storyloom.logging import get_logger

logger = get_logger('services.embedding')

SENTENCE_ENDINGS = ("。", "？", "！", ".", "?", "!")


class ChunkingInfo(BaseModel):
    chunk_size: int
    overlap_size: int
    max_tokens: int


class EmbeddingClient(Protocol):
    """Anything that turns text into one vector per chunk."""

    async def embed(self, text: str) -> list[list[float]]:
        ...

    def chunking_info(self) -> ChunkingInfo:
        ...


def chunk_text(text: str, chunk_size: int = 2048, overlap_ratio: float = 0.15) -> list[str]:
    """
    Split text into overlapping windows of at most ``chunk_size`` characters.

    A window ends at the last paragraph break when that lies beyond 60% of the
    window, otherwise at the last sentence end beyond 70%, otherwise at the
    hard limit. Consecutive windows overlap by ``chunk_size * overlap_ratio``.
    """
    chunks: list[str] = []
    overlap = int(chunk_size * overlap_ratio)
    start = 0

    while start < len(text):
        end = start + chunk_size

        if end < len(text):
            paragraph_end = text.rfind("\n\n", start, end)
            sentence_end = max(text.rfind(mark, start, end) for mark in SENTENCE_ENDINGS)

            if paragraph_end > start + chunk_size * 0.6:
                end = paragraph_end + 2
            elif sentence_end > start + chunk_size * 0.7:
                end = sentence_end + 1

        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)

        if end >= len(text):
            break
        start = end - overlap

    return chunks


def select_chunks(chunks: list[str], min_length: int) -> list[str]:
    """Drop fragments shorter than ``min_length`` unless the text produced a single chunk."""
    if len(chunks) == 1 and chunks[0].strip():
        return chunks
    return [c for c in chunks if len(c) >= min_length and c.strip()]


class EmbeddingService:
    """OpenAI embeddings with chapter-aware chunking."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None):
        self.model = settings.OPENAI_EMBEDDING_MODEL
        self.dimensions = settings.EMBEDDING_DIMENSIONS
        self.chunk_size = settings.EMBEDDING_CHUNK_SIZE
        self.overlap_ratio = settings.EMBEDDING_CHUNK_OVERLAP_RATIO
        self.min_chunk_ratio = settings.EMBEDDING_MIN_CHUNK_RATIO
        self.max_tokens = settings.EMBEDDING_MAX_TOKENS
        self._client = client
        self._api_key = settings.OPENAI_API_KEY
        self._base_url = settings.OPENAI_BASE_URL

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise EmbeddingError("OPENAI_API_KEY not set")
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client

    def chunking_info(self) -> ChunkingInfo:
        return ChunkingInfo(
            chunk_size=self.chunk_size,
            overlap_size=int(self.chunk_size * self.overlap_ratio),
            max_tokens=self.max_tokens,
        )

    def chunk(self, text: str) -> list[str]:
        chunks = chunk_text(text, self.chunk_size, self.overlap_ratio)
        return select_chunks(chunks, int(self.chunk_size * self.min_chunk_ratio))

    async def embed(self, text: str) -> list[list[float]]:
        """
        Embed text, one vector per chunk in chunk order.

        :raises EmbeddingError: If no chunk survives filtering or the provider returns nothing
        """
        chunks = self.chunk(text)
        if not chunks:
            raise EmbeddingError("No valid text chunks found")

        kwargs = {"model": self.model, "input": chunks}
        if self.dimensions:
            kwargs["dimensions"] = self.dimensions

        try:
            response = await self.client.embeddings.create(**kwargs)
        except Exception as e:
            logger.error(f"Embedding request failed for model {self.model}: {e}")
            raise

        if not response.data:
            raise EmbeddingError("No embeddings returned from provider")

        logger.debug(f"Embedded {len(chunks)} chunks with {self.model}")
        return [item.embedding for item in response.data]
