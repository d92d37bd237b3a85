"""Repository layer for the append-only activity log."""
from __future__ import annotations
from typing import Optional, Sequence

from sqlalchemy import select

from app.models.persisted_activity import ActivityRecord
from app.repositories.base import BaseRepository


class ActivityRepository(BaseRepository):
    async def create(
        self,
        action: str,
        description: str,
        user_id: Optional[int] = None,
        course_id: Optional[int] = None,
    ) -> ActivityRecord:
        record = ActivityRecord(
            action=action,
            description=description,
            user_id=user_id,
            course_id=course_id,
        )
        self.session.add(record)
        await self._commit("Referenced user or course does not exist")
        await self.session.refresh(record)
        return record

    async def list(self) -> Sequence[ActivityRecord]:
        result = await self._execute(select(ActivityRecord).order_by(ActivityRecord.id))
        return result.scalars().all()

    async def list_recent(self, limit: int = 10) -> Sequence[ActivityRecord]:
        result = await self._execute(
            select(ActivityRecord)
            .order_by(ActivityRecord.created_at.desc(), ActivityRecord.id.desc())
            .limit(limit)
        )
        return result.scalars().all()
