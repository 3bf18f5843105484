"""
Semantic memory layer.

Retrieval over embedded chunks of volumes, arcs, chapter summaries and chapter
content. Fetch embeds the query, searches once per query chunk, keeps the best
match per source document and orders documents newest first.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from storyloom.logging import get_logger
from storyloom.memory.base import MemoryLayer
from storyloom.models import (
    MemoryLayerType, SemanticChunkRecord, SemanticLayerType, SemanticMetadata,
    SemanticSearchHit, SemanticSearchResult, VectorMatch,
)

logger = get_logger('memory.semantic')
_T = TypeVar("_T")


def fuse_matches(matches: list[VectorMatch], max_results: int) -> list[VectorMatch]:
    """
    Keep the highest-scoring match per ``metadata["id"]``, newest first.

    Matches without a document id are dropped. Ties in timestamp keep
    first-seen order.
    """
    best: dict[str, VectorMatch] = {}
    for match in matches:
        doc_id = (match.metadata or {}).get("id")
        if not doc_id:
            continue
        existing = best.get(doc_id)
        if existing is None or match.score > existing.score:
            best[doc_id] = match

    fused = sorted(
        best.values(),
        key=lambda m: (m.metadata or {}).get("timestamp") or 0,
        reverse=True,
    )
    return fused[:max_results]


class SemanticLayer(MemoryLayer):
    type = MemoryLayerType.SEMANTIC
    weight = 1.0

    async def _run_with_retry(
        self,
        operation_name: str,
        operation: Callable[[], Awaitable[_T]],
    ) -> _T:
        settings = self.context.settings
        total_attempts = max(int(settings.SEMANTIC_RETRY_COUNT), 0) + 1
        base_delay = max(float(settings.SEMANTIC_RETRY_BASE_SECONDS), 0.0)

        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as error:
                if attempt >= total_attempts:
                    raise

                delay = base_delay * (2 ** (attempt - 1))
                logger.warning(
                    "Semantic %s failed (attempt %d/%d): %s. Retrying in %.2fs",
                    operation_name,
                    attempt,
                    total_attempts,
                    error,
                    delay,
                )
                if delay > 0:
                    await asyncio.sleep(delay)
                attempt += 1

    async def _search_chunk(self, vector: list[float], filter: dict[str, Any]) -> list[VectorMatch]:
        if not vector:
            return []
        try:
            return await self._run_with_retry(
                "query",
                lambda: self.context.vectors.query(vector, filter=filter, return_metadata="all"),
            )
        except Exception as e:
            logger.error(f"Vector query failed, skipping chunk: {e}")
            return []

    async def fetch(
        self,
        query: str,
        type: SemanticLayerType,
        max_results: int | None = None,
    ) -> SemanticSearchResult:
        """
        Retrieve documents of ``type`` related to ``query``.

        :param query: Free text; long text is chunked and every chunk searched
        :param type: Content type to restrict the search to
        :param max_results: Result limit, defaults to the configured maximum
        :return: One hit per source document, newest first
        :rtype: SemanticSearchResult
        """
        limit = max_results if max_results is not None else self.context.settings.SEMANTIC_MAX_RESULTS
        vectors = await self.context.embedding.embed(query)
        filter = {"type": SemanticLayerType(type).value}

        per_chunk = await asyncio.gather(*(self._search_chunk(v, filter) for v in vectors))
        matches = [m for chunk_matches in per_chunk for m in chunk_matches]
        fused = fuse_matches(matches, limit)

        return SemanticSearchResult(results=[
            SemanticSearchHit(
                id=m.id,
                metadata=SemanticMetadata.model_validate(m.metadata),
                score=m.score,
            )
            for m in fused
        ])

    async def update(
        self,
        type: SemanticLayerType,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> int:
        """
        Embed ``content`` and upsert one record per chunk.

        Chunk ids are ``<metadata id>-<segment>``, or ``<type>-<timestamp>-<segment>``
        without a document id.

        :return: Number of chunks written
        :rtype: int
        """
        type = SemanticLayerType(type)
        metadata = dict(metadata or {})
        if metadata.get("id") is not None:
            metadata["id"] = str(metadata["id"])
        chunk_size = self.context.embedding.chunking_info().chunk_size
        vectors = [v for v in await self.context.embedding.embed(content) if v]

        timestamp = int(time.time() * 1000)
        doc_id = metadata.get("id")
        records = [
            SemanticChunkRecord(
                id=f"{doc_id}-{idx}" if doc_id else f"{type.value}-{timestamp}-{idx}",
                values=vector,
                metadata={
                    **metadata,
                    "type": type.value,
                    "segment": idx,
                    "timestamp": timestamp,
                    "chunkSize": chunk_size,
                    "content": content,
                },
            )
            for idx, vector in enumerate(vectors)
        ]

        if not records:
            logger.info(f"Nothing to upsert for {type.value}")
            return 0

        logger.info(f"Upserting {len(records)} semantic chunks for {type.value} with chunk size {chunk_size}")
        await self._run_with_retry("upsert", lambda: self.context.vectors.upsert(records))
        return len(records)
