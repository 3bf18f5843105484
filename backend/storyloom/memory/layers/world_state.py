"""World-state memory layer."""

from storyloom.memory.base import SnapshotLayer
from storyloom.models import Chapter, MemoryLayerType, World, WorldSnapshot
from storyloom.services.agents.memory import GenWorldAgent, WorldAgent, WorldUpdateInput


class WorldStateLayer(SnapshotLayer[World, WorldSnapshot]):
    """Geography, magic, factions, artifacts and laws of the story world."""

    type = MemoryLayerType.WORLD_STATE
    weight = 1.2
    state_model = World
    snapshot_model = WorldSnapshot
    payload_field = "world"

    def __init__(self, context):
        super().__init__(context)
        self.gen_agent = GenWorldAgent()
        self.agent = WorldAgent()

    async def initial_state(self) -> World:
        return await self.context.runner.execute(self.gen_agent, self.context.novel_config)

    async def update(self, world: World, chapter: Chapter) -> WorldSnapshot:
        updated = await self.context.runner.execute(
            self.agent, WorldUpdateInput(world=world, chapter=chapter)
        )
        return await self.save(chapter.chapter_number, updated)
