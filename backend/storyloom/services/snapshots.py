"""Append-only snapshot storage shared by the chapter-keyed memory layers."""

import json
from datetime import datetime, timezone
from typing import Any

import aiosqlite

from storyloom.logging import get_logger
from storyloom.models import SnapshotRecord

logger = get_logger('services.snapshots')


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _row_to_snapshot(row: dict) -> SnapshotRecord:
    return SnapshotRecord(
        layer=row["layer"],
        current_chapter=row["current_chapter"],
        last_updated=row["last_updated"],
        state=json.loads(row["state_json"]),
    )


class SnapshotStore:
    """One row per write; reads return the most recent row for (layer, chapter)."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        db = await aiosqlite.connect(self.db_path)
        db.row_factory = aiosqlite.Row
        return db

    async def latest(self, layer: str, chapter: int) -> SnapshotRecord | None:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                """SELECT * FROM memory_snapshots
                   WHERE layer = ? AND current_chapter = ?
                   ORDER BY last_updated DESC, id DESC
                   LIMIT 1""",
                (layer, chapter),
            )
            row = await cursor.fetchone()
            return _row_to_snapshot(dict(row)) if row else None
        finally:
            await db.close()

    async def insert(self, layer: str, chapter: int, state: dict[str, Any]) -> SnapshotRecord:
        record = SnapshotRecord(
            layer=layer,
            current_chapter=chapter,
            last_updated=_now(),
            state=state,
        )
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO memory_snapshots (layer, current_chapter, last_updated, state_json)
                   VALUES (?, ?, ?, ?)""",
                (
                    record.layer,
                    record.current_chapter,
                    record.last_updated.isoformat(timespec="microseconds"),
                    json.dumps(record.state, ensure_ascii=False),
                ),
            )
            await db.commit()
        finally:
            await db.close()

        logger.info(f"Stored {layer} snapshot for chapter {chapter}")
        return record

    async def list_chapters(self, layer: str) -> list[int]:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT DISTINCT current_chapter FROM memory_snapshots WHERE layer = ? ORDER BY current_chapter",
                (layer,),
            )
            rows = await cursor.fetchall()
            return [row["current_chapter"] for row in rows]
        finally:
            await db.close()

    async def clear(self, layer: str | None = None) -> int:
        db = await self._get_db()
        try:
            if layer is None:
                cursor = await db.execute("DELETE FROM memory_snapshots")
            else:
                cursor = await db.execute("DELETE FROM memory_snapshots WHERE layer = ?", (layer,))
            await db.commit()
            return cursor.rowcount
        finally:
            await db.close()
