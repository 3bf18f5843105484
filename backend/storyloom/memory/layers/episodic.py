"""Episodic memory layer: the most recent chapters verbatim."""

from storyloom.memory.base import MemoryLayer
from storyloom.models import Chapter, EpisodicWindow, MemoryLayerType


class EpisodicLayer(MemoryLayer):
    type = MemoryLayerType.EPISODIC
    weight = 1.5

    async def fetch(self, chapter_number: int, window_size: int | None = None) -> EpisodicWindow:
        """
        Texts of the chapters preceding ``chapter_number``, oldest first.

        Returns at most ``window_size`` chapters from ``max(1, n - window_size)``
        to ``n - 1``. Empty when ``chapter_number`` lies beyond the last
        committed chapter.
        """
        window = window_size if window_size is not None else self.context.settings.EPISODIC_WINDOW_SIZE
        if window < 0:
            raise ValueError("window_size must not be negative")

        max_chapter = await self.context.chapters.max_chapter_number()
        if chapter_number > max_chapter:
            return EpisodicWindow()

        start = max(1, chapter_number - window)
        end = chapter_number - 1
        if end < start:
            return EpisodicWindow()

        chapters = await self.context.chapters.list_range(start, end)
        return EpisodicWindow(chapters=[c.text for c in chapters])

    async def update(self, chapter: Chapter | None = None) -> None:
        # Chapters are persisted directly by the chapter store.
        return None
