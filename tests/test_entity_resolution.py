"""Tests for mapping name mentions onto characters."""

import asyncio
from types import SimpleNamespace

from storyloom.config import Settings
from storyloom.models import Character, CharacterGroup, CharacterState, Identity
from storyloom.services.embedding import EmbeddingService
from storyloom.services.entity_resolution import CharacterMapper
from storyloom.services.vector import cosine_similarity

from conftest import FakeEmbeddingClient


def character(character_id, name, aliases=()):
    return Character(
        character_id=character_id,
        identity=Identity(current_name=name, known_aliases=list(aliases)),
    )


def test_alias_mention_resolves_character_and_group():
    a = character("c1", "A", aliases=["X"])
    b = character("c2", "B")
    g = CharacterGroup(group_id="G", name="Group", members=["c1", "c2"])
    state = CharacterState(characters=[a, b], character_groups=[g])
    embedding = FakeEmbeddingClient({
        "A": [1.0, 0.0, 0.0],
        "X": [0.0, 1.0, 0.0],
        "B": [0.0, 0.0, 1.0],
    })

    result = asyncio.run(CharacterMapper(embedding).map(["X"], state))

    assert [c.character_id for c in result.characters] == ["c1"]
    assert [g.group_id for g in result.character_groups] == ["G"]


def test_short_name_matches_full_name_character():
    xiao = character("char_xiao", "萧瑾宸", aliases=["瑾宸"])
    lin = character("char_lin", "林小月")
    state = CharacterState(characters=[xiao, lin])
    embedding = FakeEmbeddingClient({
        "萧瑾宸": [0.9, 0.1, 0.0],
        "瑾宸": [1.0, 0.0, 0.0],
        "林小月": [0.0, 1.0, 0.0],
    })

    result = asyncio.run(CharacterMapper(embedding).map(["瑾宸"], state))

    assert [c.character_id for c in result.characters] == ["char_xiao"]


def test_mention_below_threshold_is_not_matched():
    state = CharacterState(characters=[character("c1", "Lin")])
    embedding = FakeEmbeddingClient({
        "Lin": [1.0, 0.0],
        "stranger": [0.4, 0.9],
    })

    result = asyncio.run(CharacterMapper(embedding, threshold=0.5).map(["stranger"], state))

    assert result.characters == []
    assert result.character_groups == []


def test_exact_threshold_score_is_not_a_match():
    state = CharacterState(characters=[character("c1", "Lin")])
    embedding = FakeEmbeddingClient({
        "Lin": [1.0, 1.0, 1.0, 1.0],
        "half": [1.0, 0.0, 0.0, 0.0],
    })

    result = asyncio.run(CharacterMapper(embedding, threshold=0.5).map(["half"], state))

    assert result.characters == []


def test_empty_inputs_short_circuit_without_embedding():
    embedding = FakeEmbeddingClient()
    mapper = CharacterMapper(embedding)
    state = CharacterState(characters=[character("c1", "Lin")])

    assert asyncio.run(mapper.map([], state)).characters == []
    assert asyncio.run(mapper.map(["Lin"], CharacterState())).characters == []
    assert embedding.calls == []


def test_character_matched_twice_is_listed_once():
    state = CharacterState(
        characters=[character("c1", "Lin Xiaoyue", aliases=["Xiaoyue"]), character("c2", "Wen")],
        character_groups=[
            CharacterGroup(group_id="g1", name="Ferry", members=["c1"]),
            CharacterGroup(group_id="g2", name="Guild", members=["c2", "c1"]),
        ],
    )
    embedding = FakeEmbeddingClient({
        "Lin Xiaoyue": [1.0, 0.0],
        "Xiaoyue": [0.95, 0.05],
        "Wen": [0.0, 1.0],
    })

    result = asyncio.run(CharacterMapper(embedding).map(["Xiaoyue", "Lin Xiaoyue", "Xiaoyue"], state))

    assert [c.character_id for c in result.characters] == ["c1"]
    assert [g.group_id for g in result.character_groups] == ["g1", "g2"]
    # one call per known name, one per distinct mention
    assert len(embedding.calls) == 3 + 2


def test_zero_vector_mention_is_a_non_match():
    state = CharacterState(characters=[character("c1", "Lin")])
    embedding = FakeEmbeddingClient({"Lin": [1.0, 0.0], "???": [0.0, 0.0]})

    result = asyncio.run(CharacterMapper(embedding).map(["???"], state))

    assert result.characters == []


def test_cosine_similarity_guards():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == 1.0
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) is None
    assert cosine_similarity([1.0], [1.0, 0.0]) is None
    assert cosine_similarity([], []) is None


class LookupEmbeddingsAPI:
    def __init__(self, vectors):
        self.vectors = vectors
        self.inputs = []

    async def create(self, **kwargs):
        self.inputs.extend(kwargs["input"])
        return SimpleNamespace(data=[SimpleNamespace(embedding=self.vectors[t]) for t in kwargs["input"]])


def test_blank_names_and_mentions_are_skipped(tmp_path):
    api = LookupEmbeddingsAPI({"Lin": [1.0, 0.0], "Wen": [0.0, 1.0]})
    service = EmbeddingService(
        Settings(DATABASE_PATH=str(tmp_path / "db.sqlite")),
        client=SimpleNamespace(embeddings=api),
    )
    state = CharacterState(characters=[character("c1", "Lin", aliases=["", "  "]), character("c2", "Wen")])

    result = asyncio.run(CharacterMapper(service).map(["Lin", "", "   "], state))

    assert [c.character_id for c in result.characters] == ["c1"]
    assert sorted(api.inputs) == ["Lin", "Lin", "Wen"]
    assert asyncio.run(CharacterMapper(service).map(["", " "], state)).characters == []
