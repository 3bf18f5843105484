"""Chapter API routes."""

from fastapi import APIRouter, HTTPException, Path

from storyloom.dependencies import ChapterStoreDep
from storyloom.models import Chapter, ChapterUpsert

router = APIRouter()


@router.get("", response_model=list[Chapter])
async def list_chapters(store: ChapterStoreDep):
    return await store.list_chapters()


@router.get("/{chapter_number}", response_model=Chapter)
async def get_chapter(store: ChapterStoreDep, chapter_number: int = Path(ge=1)):
    chapter = await store.get(chapter_number)
    if not chapter:
        raise HTTPException(404, "Chapter not found")
    return chapter


@router.put("/{chapter_number}", response_model=Chapter)
async def save_chapter(body: ChapterUpsert, store: ChapterStoreDep, chapter_number: int = Path(ge=1)):
    return await store.save(chapter_number, body)
