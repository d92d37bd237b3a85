"""Sections router: ordered sections under a course.

Collection routes are scoped to ``/courses/{course_id}/sections``; item
routes address a section directly by id.
"""
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_admin
from app.core.exceptions import NotFoundError
from app.db.config import get_session
from app.models.course import ReorderRequest, SectionCreate, SectionOut, SectionUpdate
from app.repositories.section_repo import SectionRepository

router = APIRouter(tags=["Sections"])


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> SectionRepository:
    return SectionRepository(session)


@router.get("/courses/{course_id}/sections", response_model=List[SectionOut])
async def list_sections(
    course_id: int, repo: SectionRepository = Depends(_get_repo)
):
    sections = await repo.list(course_id)
    return [s.to_dict() for s in sections]


@router.post(
    "/courses/{course_id}/sections",
    response_model=SectionOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_section(
    course_id: int,
    payload: SectionCreate,
    repo: SectionRepository = Depends(_get_repo),
):
    section = await repo.create(course_id=course_id, **payload.to_columns())
    return section.to_dict()


@router.post(
    "/courses/{course_id}/sections/reorder",
    response_model=List[SectionOut],
    dependencies=[Depends(require_admin)],
)
async def reorder_sections(
    course_id: int,
    payload: ReorderRequest,
    repo: SectionRepository = Depends(_get_repo),
):
    ordered = await repo.reorder(course_id, payload.orderedIds)
    return [s.to_dict() for s in ordered]


@router.get("/sections/{section_id}", response_model=SectionOut)
async def get_section(
    section_id: int, repo: SectionRepository = Depends(_get_repo)
):
    section = await repo.get(section_id)
    return section.to_dict()


@router.put(
    "/sections/{section_id}",
    response_model=SectionOut,
    dependencies=[Depends(require_admin)],
)
async def update_section(
    section_id: int,
    payload: SectionUpdate,
    repo: SectionRepository = Depends(_get_repo),
):
    section = await repo.update(section_id, **payload.to_columns(partial=True))
    return section.to_dict()


@router.delete(
    "/sections/{section_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_section(
    section_id: int, repo: SectionRepository = Depends(_get_repo)
):
    if not await repo.delete(section_id):
        raise NotFoundError("Section", section_id)
    return None
