"""
Chapter persistence.

Chapters are written here directly by the generation driver; the episodic
layer only reads them.
"""

from datetime import datetime, timezone

import aiosqlite

from storyloom.logging import get_logger
from storyloom.models import Chapter, ChapterUpsert

logger = get_logger('services.chapters')


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_chapter(row: dict) -> Chapter:
    return Chapter(
        chapter_number=row["chapter_number"],
        title=row["title"],
        text=row["text"],
        summary=row["summary"],
        word_count=row["word_count"],
        arc_number=row.get("arc_number"),
        volume_number=row.get("volume_number"),
    )


class ChapterStore:
    """CRUD over the chapters table."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        db = await aiosqlite.connect(self.db_path)
        db.row_factory = aiosqlite.Row
        return db

    async def save(self, chapter_number: int, data: ChapterUpsert) -> Chapter:
        chapter = Chapter(
            chapter_number=chapter_number,
            title=data.title,
            text=data.text,
            summary=data.summary,
            word_count=data.word_count if data.word_count is not None else len(data.text),
            arc_number=data.arc_number,
            volume_number=data.volume_number,
        )
        now = _now()
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO chapters
                   (chapter_number, title, text, summary, word_count, arc_number, volume_number, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(chapter_number) DO UPDATE SET
                       title = excluded.title,
                       text = excluded.text,
                       summary = excluded.summary,
                       word_count = excluded.word_count,
                       arc_number = excluded.arc_number,
                       volume_number = excluded.volume_number,
                       updated_at = excluded.updated_at""",
                (
                    chapter.chapter_number,
                    chapter.title,
                    chapter.text,
                    chapter.summary,
                    chapter.word_count,
                    chapter.arc_number,
                    chapter.volume_number,
                    now,
                    now,
                ),
            )
            await db.commit()
        finally:
            await db.close()

        logger.info(f"Saved chapter {chapter_number}: {chapter.title}")
        return chapter

    async def get(self, chapter_number: int) -> Chapter | None:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT * FROM chapters WHERE chapter_number = ?", (chapter_number,)
            )
            row = await cursor.fetchone()
            return _row_to_chapter(dict(row)) if row else None
        finally:
            await db.close()

    async def max_chapter_number(self) -> int:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT MAX(chapter_number) AS max_number FROM chapters")
            row = await cursor.fetchone()
            return int(row["max_number"] or 0) if row else 0
        finally:
            await db.close()

    async def list_range(self, start: int, end: int) -> list[Chapter]:
        """Chapters with start <= number <= end, ascending."""
        db = await self._get_db()
        try:
            cursor = await db.execute(
                """SELECT * FROM chapters
                   WHERE chapter_number >= ? AND chapter_number <= ?
                   ORDER BY chapter_number""",
                (start, end),
            )
            rows = await cursor.fetchall()
            return [_row_to_chapter(dict(r)) for r in rows]
        finally:
            await db.close()

    async def list_chapters(self) -> list[Chapter]:
        return await self.list_range(1, await self.max_chapter_number())

    async def clear(self) -> int:
        db = await self._get_db()
        try:
            cursor = await db.execute("DELETE FROM chapters")
            await db.commit()
            return cursor.rowcount
        finally:
            await db.close()
