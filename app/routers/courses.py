"""Courses router providing CRUD endpoints for persisted courses.

Reads are public; writes require an administrator. Recording a view is
public and atomic.
"""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_admin
from app.core.exceptions import NotFoundError
from app.db.config import get_session
from app.models.course import CourseCategory, CourseCreate, CourseLevel, CourseOut, CourseUpdate
from app.models.persisted_user import UserRecord
from app.repositories.course_repo import CourseRepository
from app.services.activity_log import schedule_activity

router = APIRouter(prefix="/courses", tags=["Courses"])

# Helpers ------------------------------------------------------------------


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> CourseRepository:
    return CourseRepository(session)

# Routes -------------------------------------------------------------------


@router.get("", response_model=List[CourseOut])
async def list_courses(
    category: Optional[CourseCategory] = None,
    level: Optional[CourseLevel] = None,
    repo: CourseRepository = Depends(_get_repo),
):
    courses = await repo.list(category=category, level=level)
    return [c.to_dict() for c in courses]


@router.get("/featured", response_model=List[CourseOut])
async def list_featured_courses(
    limit: int = Query(6, ge=1, le=50),
    repo: CourseRepository = Depends(_get_repo),
):
    courses = await repo.list_featured(limit)
    return [c.to_dict() for c in courses]


@router.get("/recent", response_model=List[CourseOut])
async def list_recent_courses(
    limit: int = Query(4, ge=1, le=50),
    repo: CourseRepository = Depends(_get_repo),
):
    courses = await repo.list_recent(limit)
    return [c.to_dict() for c in courses]


@router.get("/slug/{slug}", response_model=CourseOut)
async def get_course_by_slug(
    slug: str, repo: CourseRepository = Depends(_get_repo)
):
    course = await repo.get_by_slug(slug)
    return course.to_dict()


@router.get("/{course_id}", response_model=CourseOut)
async def get_course(
    course_id: int, repo: CourseRepository = Depends(_get_repo)
):
    course = await repo.get(course_id)
    return course.to_dict()


@router.post(
    "",
    response_model=CourseOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_course(
    request: Request,
    background: BackgroundTasks,
    payload: CourseCreate,
    admin: UserRecord = Depends(require_admin),
    repo: CourseRepository = Depends(_get_repo),
):
    record = await repo.create(**payload.to_columns())
    schedule_activity(
        background,
        request,
        "course_created",
        f"Course '{record.title}' created",
        user_id=admin.id,
        course_id=record.id,
    )
    return record.to_dict()


@router.put("/{course_id}", response_model=CourseOut)
async def update_course(
    course_id: int,
    payload: CourseUpdate,
    admin: UserRecord = Depends(require_admin),
    repo: CourseRepository = Depends(_get_repo),
):
    course = await repo.update(course_id, **payload.to_columns(partial=True))
    return course.to_dict()


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    request: Request,
    background: BackgroundTasks,
    course_id: int,
    admin: UserRecord = Depends(require_admin),
    repo: CourseRepository = Depends(_get_repo),
):
    course = await repo.get(course_id)
    title = course.title
    if not await repo.delete(course_id):
        raise NotFoundError("Course", course_id)
    schedule_activity(
        background,
        request,
        "course_deleted",
        f"Course '{title}' deleted",
        user_id=admin.id,
    )
    return None


@router.post("/{course_id}/view", response_model=CourseOut)
async def record_course_view(
    course_id: int, repo: CourseRepository = Depends(_get_repo)
):
    course = await repo.record_view(course_id)
    return course.to_dict()
