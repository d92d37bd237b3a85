"""Activity log router (administrators only)."""
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_admin
from app.db.config import get_session
from app.models.messaging import ActivityCreate, ActivityOut
from app.repositories.activity_repo import ActivityRepository

router = APIRouter(
    prefix="/activities",
    tags=["Activities"],
    dependencies=[Depends(require_admin)],
)


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> ActivityRepository:
    return ActivityRepository(session)


@router.get("", response_model=List[ActivityOut])
async def list_activities(repo: ActivityRepository = Depends(_get_repo)):
    return [a.to_dict() for a in await repo.list()]


@router.get("/recent", response_model=List[ActivityOut])
async def list_recent_activities(
    limit: int = Query(4, ge=1, le=100),
    repo: ActivityRepository = Depends(_get_repo),
):
    return [a.to_dict() for a in await repo.list_recent(limit)]


@router.post("", response_model=ActivityOut, status_code=status.HTTP_201_CREATED)
async def create_activity(
    payload: ActivityCreate, repo: ActivityRepository = Depends(_get_repo)
):
    record = await repo.create(**payload.to_columns())
    return record.to_dict()
