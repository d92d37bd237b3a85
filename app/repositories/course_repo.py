"""Repository layer for Course persistence.

Provides an abstraction over direct SQLAlchemy session usage so that routers
and services remain thin and testable. Counter columns (views, enrolled
students) are only ever changed with SQL-side arithmetic.
"""
from __future__ import annotations
from typing import Optional, Sequence

from sqlalchemy import select, update

from app.core.exceptions import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.course import COMPLETED_STATUS
from app.models.persisted_course import CourseRecord, EnrollmentRecord
from app.repositories.base import BaseRepository, floored
from app.repositories.stats_repo import StatsRepository

SLUG_TAKEN = "slug already exists"


class CourseRepository(BaseRepository):
    def __init__(self, session):
        super().__init__(session)
        self.stats = StatsRepository(session)

    async def _slug_taken(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(CourseRecord.id).where(CourseRecord.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(CourseRecord.id != exclude_id)
        result = await self._execute(stmt)
        return result.first() is not None

    # CREATE -----------------------------------------------------------------
    async def create(self, **fields) -> CourseRecord:
        # Check conflict
        if await self._slug_taken(fields["slug"]):
            raise ConflictError(SLUG_TAKEN)

        record = CourseRecord(**fields, enrolled_students=0, views=0)
        self.session.add(record)
        await self._flush(SLUG_TAKEN)
        await self.stats.adjust(total_courses=1)
        await self._commit(SLUG_TAKEN)
        await self.session.refresh(record)
        return record

    # READ -------------------------------------------------------------------
    async def list(
        self,
        category: Optional[str] = None,
        level: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[CourseRecord]:
        stmt = select(CourseRecord).order_by(CourseRecord.id)
        if category:
            stmt = stmt.where(CourseRecord.category == category)
        if level:
            stmt = stmt.where(CourseRecord.level == level)
        if limit:
            stmt = stmt.limit(limit)
        result = await self._execute(stmt)
        return result.scalars().all()

    async def list_featured(self, limit: int = 6) -> Sequence[CourseRecord]:
        result = await self._execute(
            select(CourseRecord)
            .where(CourseRecord.is_featured.is_(True))
            .order_by(CourseRecord.id)
            .limit(limit)
        )
        return result.scalars().all()

    async def list_recent(self, limit: int = 4) -> Sequence[CourseRecord]:
        result = await self._execute(
            select(CourseRecord)
            .order_by(CourseRecord.updated_at.desc(), CourseRecord.id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    async def get(self, pk: int) -> CourseRecord:
        result = await self._execute(
            select(CourseRecord)
            .where(CourseRecord.id == pk)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        if not record:
            raise NotFoundError("Course", pk)
        return record

    async def get_by_slug(self, slug: str) -> CourseRecord:
        result = await self._execute(
            select(CourseRecord).where(CourseRecord.slug == slug)
        )
        record = result.scalar_one_or_none()
        if not record:
            raise NotFoundError("Course", slug)
        return record

    # UPDATE -----------------------------------------------------------------
    async def update(self, pk: int, **fields) -> CourseRecord:
        record = await self.get(pk)
        if not fields:
            return record
        slug = fields.get("slug")
        if slug and slug != record.slug and await self._slug_taken(slug, pk):
            raise ConflictError(SLUG_TAKEN)
        for name, value in fields.items():
            setattr(record, name, value)
        record.updated_at = utcnow()
        await self._commit(SLUG_TAKEN)
        await self.session.refresh(record)
        return record

    async def record_view(self, pk: int) -> CourseRecord:
        """Atomically add one view to the course and to the aggregate."""
        result = await self._execute(
            update(CourseRecord)
            .where(CourseRecord.id == pk)
            .values(views=CourseRecord.views + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFoundError("Course", pk)
        await self.stats.adjust(course_views=1)
        await self._commit()
        return await self.get(pk)

    async def adjust_enrollment_count(self, pk: int, delta: int) -> None:
        """Shift ``enrolled_students`` by ``delta`` inside the caller's
        transaction (floored at zero)."""
        await self._execute(
            update(CourseRecord)
            .where(CourseRecord.id == pk)
            .values(enrolled_students=floored(CourseRecord.enrolled_students, delta))
            .execution_options(synchronize_session=False)
        )

    # DELETE -----------------------------------------------------------------
    async def delete(self, pk: int) -> bool:
        """Delete a course; sections, lessons, progress and enrollments go
        with it through ``ON DELETE CASCADE``. Returns False if absent."""
        # The counts below must match what the cascade removes. The no-op
        # UPDATE opens the write transaction (SQLite takes its database lock
        # here); FOR UPDATE on the course blocks new enrollments through
        # their FK check and on the enrollment rows blocks status changes.
        touched = await self._execute(
            update(CourseRecord)
            .where(CourseRecord.id == pk)
            .values(updated_at=CourseRecord.updated_at)
            .execution_options(synchronize_session=False)
        )
        if touched.rowcount == 0:
            await self._release()
            return False

        result = await self._execute(
            select(CourseRecord).where(CourseRecord.id == pk).with_for_update()
        )
        record = result.scalar_one_or_none()
        if record is None:
            return False

        statuses = (
            await self._execute(
                select(EnrollmentRecord.status)
                .where(EnrollmentRecord.course_id == pk)
                .with_for_update()
            )
        ).scalars().all()
        enrolled = len(statuses)
        completed = sum(1 for s in statuses if s == COMPLETED_STATUS)

        await self.session.delete(record)
        await self._flush()
        await self.stats.adjust(
            total_courses=-1,
            total_enrollments=-enrolled,
            completed_enrollments=-completed,
        )
        await self._commit()
        return True
