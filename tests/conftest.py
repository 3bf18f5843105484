"""Pytest fixtures for Storyloom tests."""

import asyncio

import pytest

from storyloom.config import Settings
from storyloom.context import create_context
from storyloom.database.db import init_db
from storyloom.models import (
    BasicSettings, ChatPayload, CharacterSystem, CreativeElements, NovelConfig, Protagonist,
)
from storyloom.services.embedding import ChunkingInfo


class FakeCompletionClient:
    """
    Scripted completion transport.

    ``responses`` maps a model id or a response schema name to either a raw
    string, an exception, or a ``(delay_seconds, raw_or_exception)`` pair.
    Model ids take precedence over schema names.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[ChatPayload] = []

    def calls_for(self, schema_name: str) -> list[ChatPayload]:
        return [c for c in self.calls if c.response_format.json_schema.name == schema_name]

    async def chat(self, payload: ChatPayload) -> str:
        self.calls.append(payload)
        schema_name = payload.response_format.json_schema.name
        script = self.responses.get(payload.model, self.responses.get(schema_name))
        if script is None:
            raise RuntimeError(f"no scripted response for {payload.model} / {schema_name}")

        delay, result = script if isinstance(script, tuple) else (0, script)
        await asyncio.sleep(delay)
        if isinstance(result, Exception):
            raise result
        return result


class FakeEmbeddingClient:
    """
    Embeds text by lookup.

    ``vectors`` maps a text to a single vector, or to a list of vectors when
    the text should embed as several chunks. Unknown texts embed to ``default``.
    """

    def __init__(self, vectors=None, default=None):
        self.vectors = dict(vectors or {})
        self.default = default if default is not None else [0.0, 0.0, 1.0]
        self.calls: list[str] = []

    def chunking_info(self) -> ChunkingInfo:
        return ChunkingInfo(chunk_size=2048, overlap_size=307, max_tokens=8191)

    async def embed(self, text: str) -> list[list[float]]:
        self.calls.append(text)
        value = self.vectors.get(text, self.default)
        if value and isinstance(value[0], list):
            return [list(v) for v in value]
        return [list(value)]


@pytest.fixture
def settings(tmp_path):
    db_path = tmp_path / "storyloom.db"
    asyncio.run(init_db(str(db_path)))
    return Settings(
        DATABASE_PATH=str(db_path),
        NOVEL_CONFIG_PATH=str(tmp_path / "novel.config.json"),
        SEMANTIC_RETRY_BASE_SECONDS=0,
    )


@pytest.fixture
def novel_config():
    return NovelConfig(
        basic_settings=BasicSettings(
            title="The Ninefold Lantern",
            central_theme="What a person owes the ones who lit the way before them",
        ),
        character_system=CharacterSystem(protagonist=Protagonist(name="Lin Xiaoyue")),
        creative_elements=CreativeElements(signature_features=["Lantern flames that speak"]),
    )


@pytest.fixture
def make_context(settings, novel_config):
    """Factory building a context around fake transports."""

    def _make(completion=None, embedding=None):
        return create_context(
            settings,
            novel_config,
            completion or FakeCompletionClient(),
            embedding or FakeEmbeddingClient(),
        )

    return _make
