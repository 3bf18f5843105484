"""Memory layer API routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Path, Query

from storyloom.dependencies import ContextDep, MemoryLayersDep
from storyloom.errors import AgentExecutionError, SnapshotNotFoundError
from storyloom.memory.base import SnapshotLayer
from storyloom.models import (
    EpisodicWindow,
    MemoryCleared,
    SemanticDocumentCreate,
    SemanticSearchRequest,
    SemanticSearchResult,
    ThemeSnapshot,
)

router = APIRouter()


@router.get("/theme", response_model=ThemeSnapshot)
async def get_theme(layers: MemoryLayersDep):
    return await layers.theme.fetch()


@router.get("/episodic/{chapter}", response_model=EpisodicWindow)
async def get_episodic(
    layers: MemoryLayersDep,
    chapter: int = Path(ge=1),
    window_size: Optional[int] = Query(default=None, ge=0),
):
    return await layers.episodic.fetch(chapter, window_size)


@router.post("/semantic/search", response_model=SemanticSearchResult)
async def search_semantic(body: SemanticSearchRequest, layers: MemoryLayersDep):
    try:
        return await layers.semantic.fetch(body.query, body.type, body.max_results)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc


@router.post("/semantic/documents", status_code=201)
async def add_semantic_document(body: SemanticDocumentCreate, layers: MemoryLayersDep):
    try:
        chunks = await layers.semantic.update(body.type, body.content, body.metadata)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    return {"success": True, "chunks": chunks}


@router.get("/{layer}/{chapter}")
async def get_snapshot(
    layer: str,
    layers: MemoryLayersDep,
    chapter: int = Path(ge=0),
):
    try:
        target = layers.get(layer)
    except ValueError as exc:
        raise HTTPException(404, f"Unknown memory layer: {layer}") from exc
    if not isinstance(target, SnapshotLayer):
        raise HTTPException(400, f"Layer {layer} is not stored per chapter")

    try:
        return await target.fetch(chapter)
    except SnapshotNotFoundError as exc:
        raise HTTPException(404, str(exc)) from exc
    except AgentExecutionError as exc:
        raise HTTPException(502, str(exc)) from exc


@router.delete("", response_model=MemoryCleared)
async def clear_all_memory(ctx: ContextDep):
    snapshots = await ctx.snapshots.clear()
    chapters = await ctx.chapters.clear()
    semantic_chunks = await ctx.vectors.clear()
    return MemoryCleared(
        success=True,
        snapshots=snapshots,
        chapters=chapters,
        semantic_chunks=semantic_chunks,
    )
