"""Character memory layer."""

from typing import TypeVar

from pydantic import BaseModel

from storyloom.logging import get_logger
from storyloom.memory.base import SnapshotLayer
from storyloom.models import (
    Chapter, CharacterSnapshot, CharacterState, MemoryLayerType, Timeline,
)
from storyloom.services.agents.evaluation import CharacterNameExtractionAgent, NameExtractionInput
from storyloom.services.agents.memory import (
    CharacterAgent, CharacterUpdateInput, GenCharacterAgent, GenCharacterInput,
)

logger = get_logger('memory.character')

ItemT = TypeVar("ItemT", bound=BaseModel)


def _merge_by_id(prior: list[ItemT], generated: list[ItemT], key: str) -> list[ItemT]:
    replacements = {getattr(item, key): item for item in generated}
    merged = [replacements.get(getattr(item, key), item) for item in prior]
    known = {getattr(item, key) for item in prior}
    for item in generated:
        item_id = getattr(item, key)
        if item_id not in known:
            known.add(item_id)
            merged.append(item)
    return merged


def reconcile_character_state(prior: CharacterState, generated: CharacterState) -> CharacterState:
    """
    Merge a partial, freshly generated state into the full prior state.

    Prior order is kept and generated entries replace prior ones with the same
    id; generated entries with unseen ids are appended in generated order.
    Characters and groups are merged independently.
    """
    return CharacterState(
        characters=_merge_by_id(prior.characters, generated.characters, "character_id"),
        character_groups=_merge_by_id(prior.character_groups, generated.character_groups, "group_id"),
    )


class CharacterLayer(SnapshotLayer[CharacterState, CharacterSnapshot]):
    """Full character state per chapter, updated from the characters a chapter involves."""

    type = MemoryLayerType.CHARACTER
    weight = 1.4
    state_model = CharacterState
    snapshot_model = CharacterSnapshot
    payload_field = "state"

    def __init__(self, context, timeline_layer):
        super().__init__(context)
        self.timeline_layer = timeline_layer
        self.gen_agent = GenCharacterAgent()
        self.agent = CharacterAgent()
        self.name_agent = CharacterNameExtractionAgent()

    async def initial_state(self) -> CharacterState:
        timeline = (await self.timeline_layer.fetch(0)).timeline
        return await self.context.runner.execute(
            self.gen_agent,
            GenCharacterInput(novel_config=self.context.novel_config, timeline=timeline),
        )

    async def resolve_involved(self, chapter_text: str, state: CharacterState) -> CharacterState:
        """Characters and groups of ``state`` that the chapter text mentions."""
        names = await self.context.runner.execute(
            self.name_agent, NameExtractionInput(chapter_text=chapter_text)
        )
        mapping = await self.context.mapper.map(names.names(), state)
        logger.info(
            f"Resolved {len(mapping.characters)} characters and "
            f"{len(mapping.character_groups)} groups from {len(names.root)} mentions"
        )
        return CharacterState(
            characters=mapping.characters,
            character_groups=mapping.character_groups,
        )

    async def _previous_timeline(self, chapter_number: int) -> Timeline | None:
        try:
            return (await self.timeline_layer.fetch(chapter_number - 1)).timeline
        except Exception as e:
            logger.warning(f"No timeline for chapter {chapter_number - 1}, continuing without it: {e}")
            return None

    async def update(
        self,
        state: CharacterState,
        chapter: Chapter,
        involved: CharacterState | None = None,
    ) -> CharacterSnapshot:
        """
        Update the characters involved in ``chapter`` and store the merged state.

        :param state: Full character state before the chapter
        :param chapter: The committed chapter
        :param involved: Subset the chapter touches; resolved from the chapter text when omitted
        :return: Snapshot stored under the chapter's number
        """
        if involved is None:
            involved = await self.resolve_involved(chapter.text, state)

        timeline = await self._previous_timeline(chapter.chapter_number)
        generated = await self.context.runner.execute(
            self.agent,
            CharacterUpdateInput(state=involved, chapter=chapter, timeline=timeline),
        )
        return await self.save(chapter.chapter_number, reconcile_character_state(state, generated))
