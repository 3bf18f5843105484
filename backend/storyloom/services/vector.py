"""
SQLite-backed vector store for semantic chunks.

Embeddings are stored as JSON arrays; similarity is cosine, computed in process.
"""

import json
import math
from enum import Enum
from typing import Any, Literal

import aiosqlite

from storyloom.logging import get_logger
from storyloom.models import SemanticChunkRecord, VectorMatch

logger = get_logger('services.vector')

_FILTER_KEY_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


def cosine_similarity(a: list[float], b: list[float]) -> float | None:
    """
    Cosine similarity of two vectors.

    Returns None when the vectors differ in length or either has zero norm,
    so callers never compare against NaN.
    """
    if not a or len(a) != len(b):
        return None
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y
    if norm_a == 0.0 or norm_b == 0.0:
        return None
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def _filter_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class VectorStore:
    """Similarity search and upsert over the semantic_chunks table."""

    def __init__(self, db_path: str, default_max_results: int = 50):
        self.db_path = db_path
        self.default_max_results = default_max_results

    async def _get_db(self) -> aiosqlite.Connection:
        db = await aiosqlite.connect(self.db_path)
        db.row_factory = aiosqlite.Row
        return db

    async def query(
        self,
        vector: list[float],
        filter: dict[str, Any] | None = None,
        max_results: int | None = None,
        return_metadata: Literal["all", "none"] = "all",
    ) -> list[VectorMatch]:
        """
        Rank stored chunks by cosine similarity to ``vector``.

        :param vector: Query embedding
        :param filter: Metadata equality filter, e.g. ``{"type": "chapter_content"}``
        :param max_results: Maximum number of matches (defaults to the store limit)
        :param return_metadata: ``"none"`` omits metadata from the matches
        :return: Matches sorted by score, highest first
        :rtype: list[VectorMatch]
        """
        limit = max_results or self.default_max_results
        query = "SELECT id, embedding, metadata FROM semantic_chunks"
        params: list[Any] = []
        if filter:
            clauses = []
            for key, value in filter.items():
                if not key or not set(key) <= _FILTER_KEY_CHARS:
                    raise ValueError(f"Invalid metadata filter key: {key!r}")
                clauses.append(f"json_extract(metadata, '$.{key}') = ?")
                params.append(_filter_value(value))
            query += " WHERE " + " AND ".join(clauses)

        db = await self._get_db()
        try:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
        finally:
            await db.close()

        scored: list[VectorMatch] = []
        for row in rows:
            score = cosine_similarity(vector, json.loads(row["embedding"]))
            if score is None:
                continue
            scored.append(VectorMatch(
                id=row["id"],
                score=score,
                metadata=json.loads(row["metadata"]) if return_metadata == "all" else None,
            ))

        scored.sort(key=lambda m: m.score, reverse=True)
        return scored[:limit]

    async def upsert(self, records: list[SemanticChunkRecord]) -> None:
        if not records:
            return
        db = await self._get_db()
        try:
            await db.executemany(
                """INSERT INTO semantic_chunks (id, content, embedding, metadata)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       content = excluded.content,
                       embedding = excluded.embedding,
                       metadata = excluded.metadata""",
                [
                    (
                        r.id,
                        r.metadata.get("content") or "",
                        json.dumps(r.values),
                        json.dumps(r.metadata, ensure_ascii=False, default=str),
                    )
                    for r in records
                ],
            )
            await db.commit()
        finally:
            await db.close()
        logger.info(f"Upserted {len(records)} vectors")

    async def delete(self, chunk_id: str) -> None:
        db = await self._get_db()
        try:
            await db.execute("DELETE FROM semantic_chunks WHERE id = ?", (chunk_id,))
            await db.commit()
        finally:
            await db.close()

    async def count(self) -> int:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT COUNT(*) AS n FROM semantic_chunks")
            row = await cursor.fetchone()
            return int(row["n"])
        finally:
            await db.close()

    async def clear(self) -> int:
        db = await self._get_db()
        try:
            cursor = await db.execute("DELETE FROM semantic_chunks")
            await db.commit()
        finally:
            await db.close()
        logger.info("All vectors cleared")
        return cursor.rowcount
