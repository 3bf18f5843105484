"""Theme memory layer: a read-only view of the novel configuration."""

from storyloom.memory.base import MemoryLayer
from storyloom.models import MemoryLayerType, ThemeSnapshot


class ThemeLayer(MemoryLayer):
    type = MemoryLayerType.THEME
    weight = 0.8

    async def fetch(self) -> ThemeSnapshot:
        config = self.context.novel_config
        return ThemeSnapshot(
            theme=config.basic_settings.central_theme,
            creative_elements=config.creative_elements,
        )

    async def update(self, *args, **kwargs) -> None:
        return None
