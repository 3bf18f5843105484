"""
Memory layer base classes.

Chapter-keyed layers store one append-only snapshot per write. Reads return the
most recent snapshot for an exact chapter; chapter 0 is synthesized on first read.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel

from storyloom.errors import SnapshotNotFoundError
from storyloom.logging import get_logger
from storyloom.models import LayerSnapshot, MemoryLayerType, SnapshotRecord

if TYPE_CHECKING:
    from storyloom.context import ServiceContext

logger = get_logger('memory')

StateT = TypeVar("StateT", bound=BaseModel)
SnapshotT = TypeVar("SnapshotT", bound=LayerSnapshot)


class MemoryLayer(ABC):
    """One facet of narrative memory, read before and written after each chapter."""

    type: MemoryLayerType
    weight: float

    def __init__(self, context: "ServiceContext"):
        self.context = context

    @abstractmethod
    async def fetch(self, *args, **kwargs):
        ...

    @abstractmethod
    async def update(self, *args, **kwargs):
        ...


class SnapshotLayer(MemoryLayer, Generic[StateT, SnapshotT]):
    """Layer whose state is a versioned snapshot per chapter."""

    state_model: type[StateT]
    snapshot_model: type[SnapshotT]
    payload_field: str

    @abstractmethod
    async def initial_state(self) -> StateT:
        """State stored for chapter 0 when none exists yet."""

    def _to_snapshot(self, record: SnapshotRecord) -> SnapshotT:
        return self.snapshot_model(
            current_chapter=record.current_chapter,
            last_updated=record.last_updated,
            **{self.payload_field: self.state_model.model_validate(record.state)},
        )

    async def fetch(self, chapter: int) -> SnapshotT:
        """
        Latest snapshot stored for exactly ``chapter``.

        :raises SnapshotNotFoundError: If no snapshot exists and chapter is not 0
        """
        record = await self.context.snapshots.latest(self.type.value, chapter)
        if record is not None:
            return self._to_snapshot(record)
        if chapter != 0:
            raise SnapshotNotFoundError(self.type.value, chapter)

        logger.info(f"No initial {self.type.value} snapshot, generating one")
        state = await self.initial_state()
        return await self.save(0, state)

    async def save(self, chapter: int, state: StateT) -> SnapshotT:
        record = await self.context.snapshots.insert(
            self.type.value, chapter, state.model_dump(mode="json")
        )
        return self._to_snapshot(record)
