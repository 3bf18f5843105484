"""Plot memory layer: open foreshadowing, conflicts and character goals."""

from storyloom.memory.base import SnapshotLayer
from storyloom.models import Chapter, MemoryLayerType, PlotMemory, PlotSnapshot
from storyloom.services.agents.memory import PlotAgent, PlotUpdateInput


class PlotLayer(SnapshotLayer[PlotMemory, PlotSnapshot]):
    type = MemoryLayerType.PLOT
    weight = 1.3
    state_model = PlotMemory
    snapshot_model = PlotSnapshot
    payload_field = "plot"

    def __init__(self, context):
        super().__init__(context)
        self.agent = PlotAgent()

    async def initial_state(self) -> PlotMemory:
        return PlotMemory()

    async def update(self, plot: PlotMemory, chapter: Chapter) -> PlotSnapshot:
        updated = await self.context.runner.execute(
            self.agent, PlotUpdateInput(plot=plot, chapter=chapter)
        )
        return await self.save(chapter.chapter_number, updated)
