"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated
from fastapi import Request, Depends

from storyloom.context import ServiceContext
from storyloom.memory.layer_set import MemoryLayerSet
from storyloom.services.chapters import ChapterStore


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context


def get_memory_layers(request: Request) -> MemoryLayerSet:
    return request.app.state.context.layers


def get_chapter_store(request: Request) -> ChapterStore:
    return request.app.state.context.chapters


ContextDep = Annotated[ServiceContext, Depends(get_context)]
MemoryLayersDep = Annotated[MemoryLayerSet, Depends(get_memory_layers)]
ChapterStoreDep = Annotated[ChapterStore, Depends(get_chapter_store)]
