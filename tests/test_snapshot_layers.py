"""Tests for the chapter-keyed snapshot layers."""

import asyncio
import json
import logging

import pytest

from storyloom.errors import SnapshotNotFoundError
from storyloom.models import (
    Chapter, Character, CharacterState, Identity, MemoryLayerType, PlotMemory, Timeline, World,
)

from conftest import FakeCompletionClient, FakeEmbeddingClient

TIMELINE = {
    "genesis_point": {"name": "The Dimming"},
    "events": [{"event_id": "evt_war_dimming", "year": 0, "name": "The lanterns go dark"}],
    "current_story_time": {"year": 300, "month": 3},
}
CHARACTERS = {
    "characters": [
        {"character_id": "char_lin", "identity": {"current_name": "Lin Xiaoyue", "known_aliases": ["Xiaoyue"]}},
        {"character_id": "char_wen", "identity": {"current_name": "Guildmaster Wen"}},
    ],
    "character_groups": [{"group_id": "group_guild", "name": "River guild", "members": ["char_wen"]}],
}
WORLD = {"geography": {"continents": {"tide": {"name": "Tide Provinces"}}}}


def chapter(number, text="Lin poled the ferry through the fog."):
    return Chapter(chapter_number=number, title=f"Chapter {number}", text=text)


def test_missing_non_zero_chapter_raises(make_context):
    completion = FakeCompletionClient()
    ctx = make_context(completion=completion)

    for layer in (ctx.layers.timeline, ctx.layers.character, ctx.layers.world_state, ctx.layers.plot):
        with pytest.raises(SnapshotNotFoundError) as excinfo:
            asyncio.run(layer.fetch(3))
        assert excinfo.value.chapter == 3
        assert excinfo.value.layer == layer.type.value

    assert completion.calls == []


def test_chapter_zero_is_generated_once(make_context):
    completion = FakeCompletionClient({"Timeline": json.dumps(TIMELINE)})
    ctx = make_context(completion=completion)

    first = asyncio.run(ctx.layers.timeline.fetch(0))
    second = asyncio.run(ctx.layers.timeline.fetch(0))

    assert first.current_chapter == 0
    assert first.timeline.genesis_point.name == "The Dimming"
    assert second == first
    assert len(completion.calls_for("Timeline")) == 1


def test_plot_initial_state_is_empty(make_context):
    completion = FakeCompletionClient()
    ctx = make_context(completion=completion)

    snapshot = asyncio.run(ctx.layers.plot.fetch(0))

    assert snapshot.plot == PlotMemory()
    assert completion.calls == []


def test_character_initial_state_uses_chapter_zero_timeline(make_context):
    completion = FakeCompletionClient({
        "Timeline": json.dumps(TIMELINE),
        "CharacterState": json.dumps(CHARACTERS),
    })
    ctx = make_context(completion=completion)

    snapshot = asyncio.run(ctx.layers.character.fetch(0))

    assert [c.character_id for c in snapshot.state.characters] == ["char_lin", "char_wen"]
    gen_call = completion.calls_for("CharacterState")[0]
    assert "The Dimming" in gen_call.messages[1].content
    # the timeline it generated on the way is persisted too
    assert asyncio.run(ctx.layers.timeline.fetch(0)).timeline.genesis_point.name == "The Dimming"
    assert len(completion.calls_for("Timeline")) == 1


def test_world_update_persists_generated_state(make_context):
    updated = {"geography": {"continents": {"tide": {"name": "Tide Provinces"}, "ashen": {"name": "Ashen Steppe"}}}}
    completion = FakeCompletionClient({"World": json.dumps(updated)})
    ctx = make_context(completion=completion)

    async def go():
        snapshot = await ctx.layers.world_state.update(World.model_validate(WORLD), chapter(1))
        await ctx.runner.drain()
        return snapshot

    stored = asyncio.run(go())
    fetched = asyncio.run(ctx.layers.world_state.fetch(1))

    assert stored.current_chapter == 1
    assert fetched.world == World.model_validate(updated)


def test_plot_update_persists_generated_state(make_context):
    prior = PlotMemory.model_validate({"conflicts": [{"description": "The guild wants the ferry"}]})
    updated = {
        "foreshadowings": [{"description": "A lantern flickers without wind", "progress": 0.2}],
        "conflicts": [{"description": "The guild wants the ferry", "intensity": 0.6, "parties": ["char_wen"]}],
        "character_goals": [],
    }
    completion = FakeCompletionClient({"PlotMemory": json.dumps(updated)})
    ctx = make_context(completion=completion)

    async def go():
        snapshot = await ctx.layers.plot.update(prior, chapter(4))
        await ctx.runner.drain()
        return snapshot

    stored = asyncio.run(go())
    fetched = asyncio.run(ctx.layers.plot.fetch(4))

    assert stored.current_chapter == 4
    assert fetched.plot == PlotMemory.model_validate(updated)
    assert len(completion.calls_for("PlotMemory")) == 1
    assert "The guild wants the ferry" in completion.calls_for("PlotMemory")[0].messages[1].content


def test_latest_write_for_a_chapter_wins(make_context):
    ctx = make_context()
    plot = ctx.layers.plot

    asyncio.run(plot.save(2, PlotMemory.model_validate({"conflicts": [{"description": "first"}]})))
    asyncio.run(plot.save(2, PlotMemory.model_validate({"conflicts": [{"description": "second"}]})))

    assert asyncio.run(plot.fetch(2)).plot.conflicts[0].description == "second"


def test_timeline_regression_is_logged_but_stored(make_context, caplog):
    earlier = dict(TIMELINE, current_story_time={"year": 299})
    completion = FakeCompletionClient({"Timeline": json.dumps(earlier)})
    ctx = make_context(completion=completion)

    with caplog.at_level(logging.WARNING, logger="storyloom.memory.timeline"):
        stored = asyncio.run(ctx.layers.timeline.update(Timeline.model_validate(TIMELINE), chapter(1)))

    assert stored.timeline.current_story_time.year == 299
    assert any("moved backwards" in r.getMessage() for r in caplog.records)


def test_character_update_with_involved_subset(make_context):
    prior = CharacterState.model_validate(CHARACTERS)
    involved = CharacterState(characters=[prior.characters[0]])
    generated = {
        "characters": [
            {
                "character_id": "char_lin",
                "identity": {"current_name": "Lin Xiaoyue"},
                "emotional_state": {"overall_mood": "anxious", "intensity": 0.7},
            },
            {"character_id": "char_mei", "identity": {"current_name": "Mei"}},
        ],
        "character_groups": [],
    }
    completion = FakeCompletionClient({
        "Timeline": json.dumps(TIMELINE),
        "CharacterState": json.dumps(generated),
    })
    ctx = make_context(completion=completion)
    asyncio.run(ctx.layers.timeline.fetch(0))

    async def go():
        snapshot = await ctx.layers.character.update(prior, chapter(1), involved)
        await ctx.runner.drain()
        return snapshot

    snapshot = asyncio.run(go())

    assert [c.character_id for c in snapshot.state.characters] == ["char_lin", "char_wen", "char_mei"]
    assert snapshot.state.characters[0].emotional_state.overall_mood == "anxious"
    assert snapshot.state.characters[1] == prior.characters[1]
    assert snapshot.state.character_groups == prior.character_groups
    assert asyncio.run(ctx.layers.character.fetch(1)) == snapshot

    update_call = completion.calls_for("CharacterState")[0]
    assert "Guildmaster Wen" not in update_call.messages[1].content
    assert "The Dimming" in update_call.messages[1].content


def test_character_update_continues_without_previous_timeline(make_context, caplog):
    prior = CharacterState.model_validate(CHARACTERS)
    completion = FakeCompletionClient({"CharacterState": json.dumps(CHARACTERS)})
    ctx = make_context(completion=completion)

    async def go():
        snapshot = await ctx.layers.character.update(prior, chapter(5), prior)
        await ctx.runner.drain()
        return snapshot

    with caplog.at_level(logging.WARNING, logger="storyloom.memory.character"):
        snapshot = asyncio.run(go())

    assert snapshot.current_chapter == 5
    assert any("No timeline for chapter 4" in r.getMessage() for r in caplog.records)
    assert "No timeline available" in completion.calls_for("CharacterState")[0].messages[1].content


def test_character_update_resolves_involved_from_chapter_text(make_context):
    prior = CharacterState.model_validate(CHARACTERS)
    completion = FakeCompletionClient({
        "CharacterNameList": json.dumps([{"name": "Xiaoyue"}]),
        "CharacterState": json.dumps({"characters": [], "character_groups": []}),
    })
    embedding = FakeEmbeddingClient({
        "Lin Xiaoyue": [1.0, 0.0],
        "Xiaoyue": [0.9, 0.1],
        "Guildmaster Wen": [0.0, 1.0],
    })
    ctx = make_context(completion=completion, embedding=embedding)

    involved = asyncio.run(ctx.layers.character.resolve_involved("Xiaoyue woke before dawn.", prior))

    assert [c.character_id for c in involved.characters] == ["char_lin"]
    assert involved.character_groups == []


def test_rows_are_keyed_by_layer(make_context):
    ctx = make_context()
    asyncio.run(ctx.layers.plot.save(1, PlotMemory()))

    with pytest.raises(SnapshotNotFoundError):
        asyncio.run(ctx.layers.world_state.fetch(1))
    assert asyncio.run(ctx.snapshots.list_chapters("plot")) == [1]


def test_character_state_round_trips_through_storage(make_context):
    ctx = make_context()
    state = CharacterState(characters=[
        Character(character_id="char_lin", identity=Identity(current_name="Lin Xiaoyue", known_aliases=["Xiaoyue"])),
    ])

    asyncio.run(ctx.layers.character.save(3, state))

    assert asyncio.run(ctx.layers.character.fetch(3)).state == state


def test_layer_set_weights_and_lookup(make_context):
    ctx = make_context()

    weights = {layer.type.value: layer.weight for layer in ctx.layers}

    assert weights == {
        "episodic": 1.5, "semantic": 1.0, "world_state": 1.2, "plot": 1.3,
        "character": 1.4, "theme": 0.8, "timeline": 1.3,
    }
    assert ctx.layers.get("World State") is ctx.layers.world_state
    assert ctx.layers.get(MemoryLayerType.PLOT) is ctx.layers.plot
    with pytest.raises(ValueError):
        ctx.layers.get("lore")
