"""
Service context.

Holds the long-lived handles every layer and agent works through. One context
is built per process (or per test) and passed explicitly.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from storyloom.config import Settings
from storyloom.logging import get_logger
from storyloom.models import NovelConfig, load_novel_config
from storyloom.services.agent_logs import AgentLogStore
from storyloom.services.agents.base import AgentRunner
from storyloom.services.chapters import ChapterStore
from storyloom.services.embedding import EmbeddingClient, EmbeddingService
from storyloom.services.entity_resolution import CharacterMapper
from storyloom.services.llm import CompletionClient, CompletionService
from storyloom.services.snapshots import SnapshotStore
from storyloom.services.vector import VectorStore

if TYPE_CHECKING:
    from storyloom.memory.layer_set import MemoryLayerSet

logger = get_logger('context')


@dataclass
class ServiceContext:
    settings: Settings
    novel_config: NovelConfig
    completion: CompletionClient
    embedding: EmbeddingClient
    snapshots: SnapshotStore
    chapters: ChapterStore
    agent_logs: AgentLogStore
    vectors: VectorStore
    runner: AgentRunner
    mapper: CharacterMapper
    layers: "MemoryLayerSet" = field(init=False, repr=False)

    def __post_init__(self):
        from storyloom.memory.layer_set import MemoryLayerSet
        self.layers = MemoryLayerSet(self)


def create_context(
    settings: Settings,
    novel_config: NovelConfig,
    completion: CompletionClient,
    embedding: EmbeddingClient,
) -> ServiceContext:
    """Wire stores, runner and mapper around the given transports."""
    agent_logs = AgentLogStore(settings.DATABASE_PATH)
    return ServiceContext(
        settings=settings,
        novel_config=novel_config,
        completion=completion,
        embedding=embedding,
        snapshots=SnapshotStore(settings.DATABASE_PATH),
        chapters=ChapterStore(settings.DATABASE_PATH),
        agent_logs=agent_logs,
        vectors=VectorStore(settings.DATABASE_PATH, settings.VECTOR_QUERY_MAX_RESULTS),
        runner=AgentRunner(completion, agent_logs),
        mapper=CharacterMapper(embedding, settings.ENTITY_MATCH_THRESHOLD),
    )


def build_context(settings: Settings) -> ServiceContext:
    """
    Build the production context from settings.

    :param settings: Application settings
    :type settings: Settings
    :return: Context backed by OpenRouter completions and OpenAI embeddings
    :rtype: ServiceContext
    """
    novel_config = load_novel_config(settings.NOVEL_CONFIG_PATH)
    logger.info(f"Loaded novel config: {novel_config.basic_settings.title}")

    completion = CompletionService(settings)
    if not completion.is_available:
        logger.warning("OPENROUTER_API_KEY not set - agent calls will fail")

    return create_context(settings, novel_config, completion, EmbeddingService(settings))
