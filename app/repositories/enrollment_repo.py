"""Repository layer for enrollments.

Every enrollment mutation keeps three derived counters in step inside the
same transaction:

* ``courses.enrolled_students`` (+1 on create, -1 on delete)
* ``platform_stats.total_enrollments`` (+1 / -1)
* ``platform_stats.completed_enrollments`` (driven by ``completion_delta``)

Status updates are compare-and-set on the prior status so that two racing
transitions can never both apply their delta.
"""
from __future__ import annotations
import logging
from typing import Optional, Sequence

from sqlalchemy import delete, select, update

from app.core.exceptions import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.course import COMPLETED_STATUS
from app.models.persisted_course import CourseRecord, EnrollmentRecord
from app.repositories.base import BaseRepository
from app.repositories.course_repo import CourseRepository
from app.repositories.stats_repo import StatsRepository

logger = logging.getLogger(__name__)

ALREADY_ENROLLED = "Already enrolled in this course"
MAX_STATUS_RETRIES = 5


def completion_delta(prior: str, new: str) -> int:
    """Change to the completed-enrollments counter for a status move."""
    if prior == new:
        return 0
    if new == COMPLETED_STATUS:
        return 1
    if prior == COMPLETED_STATUS:
        return -1
    return 0


class EnrollmentRepository(BaseRepository):
    def __init__(self, session):
        super().__init__(session)
        self.courses = CourseRepository(session)
        self.stats = StatsRepository(session)

    async def _fetch(self, pk: int) -> Optional[EnrollmentRecord]:
        result = await self._execute(
            select(EnrollmentRecord)
            .where(EnrollmentRecord.id == pk)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get(self, pk: int) -> EnrollmentRecord:
        record = await self._fetch(pk)
        if record is None:
            raise NotFoundError("Enrollment", pk)
        return record

    async def find(self, user_id: int, course_id: int) -> Optional[EnrollmentRecord]:
        result = await self._execute(
            select(EnrollmentRecord).where(
                EnrollmentRecord.user_id == user_id,
                EnrollmentRecord.course_id == course_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> Sequence[EnrollmentRecord]:
        result = await self._execute(
            select(EnrollmentRecord)
            .where(EnrollmentRecord.user_id == user_id)
            .order_by(EnrollmentRecord.id)
        )
        return result.scalars().all()

    async def list_for_course(self, course_id: int) -> Sequence[EnrollmentRecord]:
        await self.courses.get(course_id)
        result = await self._execute(
            select(EnrollmentRecord)
            .where(EnrollmentRecord.course_id == course_id)
            .order_by(EnrollmentRecord.id)
        )
        return result.scalars().all()

    # CREATE -----------------------------------------------------------------
    async def create(
        self,
        user_id: int,
        course_id: int,
        status: str = "enrolled",
        progress: int = 0,
    ) -> EnrollmentRecord:
        exists = await self._execute(
            select(CourseRecord.id).where(CourseRecord.id == course_id)
        )
        if exists.first() is None:
            raise NotFoundError("Course", course_id)
        if await self.find(user_id, course_id) is not None:
            raise ConflictError(ALREADY_ENROLLED)

        completed = status == COMPLETED_STATUS
        record = EnrollmentRecord(
            user_id=user_id,
            course_id=course_id,
            status=status,
            progress=progress,
            completed_at=utcnow() if completed else None,
        )
        self.session.add(record)
        await self._flush(ALREADY_ENROLLED)
        await self.courses.adjust_enrollment_count(course_id, 1)
        await self.stats.adjust(
            total_enrollments=1, completed_enrollments=1 if completed else 0
        )
        await self._commit(ALREADY_ENROLLED)
        await self.session.refresh(record)
        logger.info(
            "User %s enrolled in course %s (status=%s)", user_id, course_id, status
        )
        return record

    # UPDATE -----------------------------------------------------------------
    async def update(self, pk: int, **fields) -> EnrollmentRecord:
        for _ in range(MAX_STATUS_RETRIES):
            record = await self.get(pk)
            if not fields:
                return record
            prior = record.status
            new_status = fields.get("status", prior)

            values = dict(fields)
            values["updated_at"] = utcnow()
            if new_status != prior:
                if new_status == COMPLETED_STATUS:
                    values["completed_at"] = utcnow()
                elif prior == COMPLETED_STATUS:
                    values["completed_at"] = None

            result = await self._execute(
                update(EnrollmentRecord)
                .where(
                    EnrollmentRecord.id == pk,
                    EnrollmentRecord.status == prior,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                # Status moved underneath us (or the row vanished); re-read
                await self._release()
                continue

            delta = completion_delta(prior, new_status)
            if delta:
                await self.stats.adjust(completed_enrollments=delta)
            await self._commit()
            return await self.get(pk)

        logger.warning("Enrollment %s kept changing during update", pk)
        raise ConflictError("Enrollment was modified concurrently, retry")

    # DELETE -----------------------------------------------------------------
    async def delete(self, pk: int) -> bool:
        record = await self._fetch(pk)
        if record is None:
            return False
        course_id = record.course_id
        status = record.status

        result = await self._execute(
            delete(EnrollmentRecord)
            .where(EnrollmentRecord.id == pk, EnrollmentRecord.status == status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self._release()
            # Either removed or its status changed; try once more from scratch
            if await self._fetch(pk) is None:
                return False
            return await self.delete(pk)

        await self.courses.adjust_enrollment_count(course_id, -1)
        await self.stats.adjust(
            total_enrollments=-1,
            completed_enrollments=-1 if status == COMPLETED_STATUS else 0,
        )
        await self._commit()
        self.session.expunge(record)
        return True
