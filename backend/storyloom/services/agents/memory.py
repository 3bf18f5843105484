"""Agents that initialize and update the chapter-keyed memory layers."""

from typing import Optional

from pydantic import BaseModel

from storyloom.models import (
    AgentCategory, AgentConfig, Chapter, CharacterState, NovelConfig,
    PlotMemory, Prompt, Timeline, World,
)
from storyloom.services.agents.base import LLMAgent
from storyloom.services.prompts import (
    build_character_update_prompt,
    build_gen_character_prompt,
    build_gen_timeline_prompt,
    build_gen_world_prompt,
    build_plot_update_prompt,
    build_timeline_update_prompt,
    build_world_update_prompt,
)

GEN_CHARACTER_CONFIG = AgentConfig(models=["microsoft/mai-ds-r1:free"], temperature=0.3, max_tokens=60000)
CHARACTER_CONFIG = AgentConfig(
    models=["deepseek/deepseek-r1-0528-qwen3-8b:free", "microsoft/mai-ds-r1:free"],
    temperature=0,
    max_tokens=60000,
)
GEN_TIMELINE_CONFIG = AgentConfig(models=["microsoft/mai-ds-r1:free"], temperature=0.2, max_tokens=60000)
TIMELINE_CONFIG = AgentConfig(models=["microsoft/mai-ds-r1:free"], temperature=0, max_tokens=40000)
GEN_WORLD_CONFIG = AgentConfig(models=["microsoft/mai-ds-r1:free"], temperature=0.2, max_tokens=40000)
WORLD_CONFIG = AgentConfig(
    models=["deepseek/deepseek-r1-0528-qwen3-8b:free", "microsoft/mai-ds-r1:free"],
    temperature=0,
    max_tokens=40000,
)
PLOT_CONFIG = AgentConfig(models=["microsoft/mai-ds-r1:free"], temperature=0, max_tokens=60000)


class GenCharacterInput(BaseModel):
    novel_config: NovelConfig
    timeline: Optional[Timeline] = None


class CharacterUpdateInput(BaseModel):
    state: CharacterState
    chapter: Chapter
    timeline: Optional[Timeline] = None


class TimelineUpdateInput(BaseModel):
    timeline: Timeline
    chapter: Chapter


class WorldUpdateInput(BaseModel):
    world: World
    chapter: Chapter


class PlotUpdateInput(BaseModel):
    plot: PlotMemory
    chapter: Chapter


class GenCharacterAgent(LLMAgent[GenCharacterInput, CharacterState]):
    name = "GenCharacterAgent"
    category = AgentCategory.MEMORY
    output_model = CharacterState

    def __init__(self, config: AgentConfig = GEN_CHARACTER_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: GenCharacterInput) -> Prompt:
        return build_gen_character_prompt(input.novel_config, input.timeline)


class CharacterAgent(LLMAgent[CharacterUpdateInput, CharacterState]):
    """Updates only the characters and groups it is given."""

    name = "CharacterAgent"
    category = AgentCategory.MEMORY
    output_model = CharacterState

    def __init__(self, config: AgentConfig = CHARACTER_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: CharacterUpdateInput) -> Prompt:
        return build_character_update_prompt(input.state, input.chapter, input.timeline)


class GenTimelineAgent(LLMAgent[NovelConfig, Timeline]):
    name = "GenTimelineAgent"
    category = AgentCategory.MEMORY
    output_model = Timeline

    def __init__(self, config: AgentConfig = GEN_TIMELINE_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: NovelConfig) -> Prompt:
        return build_gen_timeline_prompt(input)


class TimelineAgent(LLMAgent[TimelineUpdateInput, Timeline]):
    name = "TimelineAgent"
    category = AgentCategory.MEMORY
    output_model = Timeline

    def __init__(self, config: AgentConfig = TIMELINE_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: TimelineUpdateInput) -> Prompt:
        return build_timeline_update_prompt(input.timeline, input.chapter)


class GenWorldAgent(LLMAgent[NovelConfig, World]):
    name = "GenWorldStateAgent"
    category = AgentCategory.MEMORY
    output_model = World

    def __init__(self, config: AgentConfig = GEN_WORLD_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: NovelConfig) -> Prompt:
        return build_gen_world_prompt(input)


class WorldAgent(LLMAgent[WorldUpdateInput, World]):
    name = "WorldStateAgent"
    category = AgentCategory.MEMORY
    output_model = World

    def __init__(self, config: AgentConfig = WORLD_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: WorldUpdateInput) -> Prompt:
        return build_world_update_prompt(input.world, input.chapter)


class PlotAgent(LLMAgent[PlotUpdateInput, PlotMemory]):
    name = "PlotAgent"
    category = AgentCategory.MEMORY
    output_model = PlotMemory

    def __init__(self, config: AgentConfig = PLOT_CONFIG):
        super().__init__(config)

    def generate_prompt(self, input: PlotUpdateInput) -> Prompt:
        return build_plot_update_prompt(input.plot, input.chapter)
