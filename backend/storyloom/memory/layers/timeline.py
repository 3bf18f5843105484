"""Timeline memory layer."""

from storyloom.logging import get_logger
from storyloom.memory.base import SnapshotLayer
from storyloom.models import Chapter, MemoryLayerType, Timeline, TimelineSnapshot
from storyloom.services.agents.memory import GenTimelineAgent, TimelineAgent, TimelineUpdateInput

logger = get_logger('memory.timeline')


class TimelineLayer(SnapshotLayer[Timeline, TimelineSnapshot]):
    """Strict event timeline, versioned per chapter."""

    type = MemoryLayerType.TIMELINE
    weight = 1.3
    state_model = Timeline
    snapshot_model = TimelineSnapshot
    payload_field = "timeline"

    def __init__(self, context):
        super().__init__(context)
        self.gen_agent = GenTimelineAgent()
        self.agent = TimelineAgent()

    async def initial_state(self) -> Timeline:
        return await self.context.runner.execute(self.gen_agent, self.context.novel_config)

    async def update(self, timeline: Timeline, chapter: Chapter) -> TimelineSnapshot:
        """Generate the timeline after ``chapter`` and store it under that chapter's number."""
        updated = await self.context.runner.execute(
            self.agent, TimelineUpdateInput(timeline=timeline, chapter=chapter)
        )
        if updated.current_story_time.sort_key() < timeline.current_story_time.sort_key():
            logger.warning(
                f"Story time moved backwards in chapter {chapter.chapter_number}: "
                f"{timeline.current_story_time.sort_key()} -> {updated.current_story_time.sort_key()}"
            )
        return await self.save(chapter.chapter_number, updated)
