"""Lessons router: ordered lessons under a section."""
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_admin
from app.core.exceptions import NotFoundError
from app.db.config import get_session
from app.models.course import LessonCreate, LessonOut, LessonUpdate
from app.repositories.lesson_repo import LessonRepository

router = APIRouter(tags=["Lessons"])


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> LessonRepository:
    return LessonRepository(session)


@router.get("/sections/{section_id}/lessons", response_model=List[LessonOut])
async def list_lessons(
    section_id: int, repo: LessonRepository = Depends(_get_repo)
):
    lessons = await repo.list(section_id)
    return [lesson.to_dict() for lesson in lessons]


@router.post(
    "/sections/{section_id}/lessons",
    response_model=LessonOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_lesson(
    section_id: int,
    payload: LessonCreate,
    repo: LessonRepository = Depends(_get_repo),
):
    lesson = await repo.create(section_id=section_id, **payload.to_columns())
    return lesson.to_dict()


@router.get("/lessons/{lesson_id}", response_model=LessonOut)
async def get_lesson(lesson_id: int, repo: LessonRepository = Depends(_get_repo)):
    lesson = await repo.get(lesson_id)
    return lesson.to_dict()


@router.put(
    "/lessons/{lesson_id}",
    response_model=LessonOut,
    dependencies=[Depends(require_admin)],
)
async def update_lesson(
    lesson_id: int,
    payload: LessonUpdate,
    repo: LessonRepository = Depends(_get_repo),
):
    lesson = await repo.update(lesson_id, **payload.to_columns(partial=True))
    return lesson.to_dict()


@router.delete(
    "/lessons/{lesson_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_lesson(lesson_id: int, repo: LessonRepository = Depends(_get_repo)):
    if not await repo.delete(lesson_id):
        raise NotFoundError("Lesson", lesson_id)
    return None
