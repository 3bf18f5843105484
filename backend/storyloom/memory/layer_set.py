"""The set of memory layers owned by one service context."""

from typing import TYPE_CHECKING

from storyloom.memory.base import MemoryLayer
from storyloom.memory.layers.character import CharacterLayer
from storyloom.memory.layers.episodic import EpisodicLayer
from storyloom.memory.layers.plot import PlotLayer
from storyloom.memory.layers.semantic import SemanticLayer
from storyloom.memory.layers.theme import ThemeLayer
from storyloom.memory.layers.timeline import TimelineLayer
from storyloom.memory.layers.world_state import WorldStateLayer
from storyloom.models import MemoryLayerType, normalize_type

if TYPE_CHECKING:
    from storyloom.context import ServiceContext


class MemoryLayerSet:
    """One instance of every layer, looked up by type or attribute."""

    def __init__(self, context: "ServiceContext"):
        self.timeline = TimelineLayer(context)
        self.character = CharacterLayer(context, self.timeline)
        self.world_state = WorldStateLayer(context)
        self.plot = PlotLayer(context)
        self.episodic = EpisodicLayer(context)
        self.theme = ThemeLayer(context)
        self.semantic = SemanticLayer(context)

        self._by_type: dict[MemoryLayerType, MemoryLayer] = {
            layer.type: layer
            for layer in (
                self.episodic, self.semantic, self.world_state, self.plot,
                self.character, self.theme, self.timeline,
            )
        }

    def get(self, layer_type: MemoryLayerType | str) -> MemoryLayer:
        """
        Layer for a type token such as ``"world_state"`` or ``"World State"``.

        :raises ValueError: If the token names no layer
        """
        if not isinstance(layer_type, MemoryLayerType):
            layer_type = MemoryLayerType(normalize_type(layer_type))
        return self._by_type[layer_type]

    def __iter__(self):
        return iter(self._by_type.values())
