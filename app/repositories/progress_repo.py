"""Repository layer for per-lesson progress (one row per user and lesson)."""
from __future__ import annotations
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import NotFoundError
from app.models.base import utcnow
from app.models.persisted_course import (
    CourseRecord,
    LessonProgressRecord,
    LessonRecord,
    SectionRecord,
)
from app.repositories.base import BaseRepository


class ProgressRepository(BaseRepository):
    async def _find(self, user_id: int, lesson_id: int):
        result = await self._execute(
            select(LessonProgressRecord)
            .where(
                LessonProgressRecord.user_id == user_id,
                LessonProgressRecord.lesson_id == lesson_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def _apply(self, record: LessonProgressRecord, is_completed: bool) -> None:
        now = utcnow()
        if is_completed and not record.is_completed:
            record.completed_at = now
        elif not is_completed:
            record.completed_at = None
        record.is_completed = is_completed
        record.last_accessed_at = now

    async def upsert(
        self, user_id: int, lesson_id: int, is_completed: bool
    ) -> LessonProgressRecord:
        lesson = await self._execute(
            select(LessonRecord.id).where(LessonRecord.id == lesson_id)
        )
        if lesson.first() is None:
            raise NotFoundError("Lesson", lesson_id)

        record = await self._find(user_id, lesson_id)
        if record is None:
            record = LessonProgressRecord(
                user_id=user_id, lesson_id=lesson_id, is_completed=False
            )
            self._apply(record, is_completed)
            self.session.add(record)
            try:
                await self.session.commit()
            except IntegrityError:
                # Lost an insert race; update the winner's row instead
                await self.session.rollback()
                record = await self._find(user_id, lesson_id)
                if record is None:
                    raise
                self._apply(record, is_completed)
                await self._commit()
        else:
            self._apply(record, is_completed)
            await self._commit()
        await self.session.refresh(record)
        return record

    async def list_for_course(
        self, user_id: int, course_id: int
    ) -> Sequence[LessonProgressRecord]:
        course = await self._execute(
            select(CourseRecord.id).where(CourseRecord.id == course_id)
        )
        if course.first() is None:
            raise NotFoundError("Course", course_id)
        result = await self._execute(
            select(LessonProgressRecord)
            .join(LessonRecord, LessonRecord.id == LessonProgressRecord.lesson_id)
            .join(SectionRecord, SectionRecord.id == LessonRecord.section_id)
            .where(
                LessonProgressRecord.user_id == user_id,
                SectionRecord.course_id == course_id,
            )
            .order_by(SectionRecord.position, LessonRecord.position, LessonRecord.id)
        )
        return result.scalars().all()
