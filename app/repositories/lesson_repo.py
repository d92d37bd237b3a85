"""Repository layer for lessons, ordered within their section."""
from __future__ import annotations
from typing import Optional, Sequence

from sqlalchemy import delete, func, select

from app.core.exceptions import NotFoundError
from app.models.base import utcnow
from app.models.persisted_course import LessonRecord, SectionRecord
from app.repositories.base import BaseRepository


class LessonRepository(BaseRepository):
    async def _ensure_section(self, section_id: int) -> None:
        result = await self._execute(
            select(SectionRecord.id).where(SectionRecord.id == section_id)
        )
        if result.first() is None:
            raise NotFoundError("Section", section_id)

    async def list(self, section_id: int) -> Sequence[LessonRecord]:
        await self._ensure_section(section_id)
        result = await self._execute(
            select(LessonRecord)
            .where(LessonRecord.section_id == section_id)
            .order_by(LessonRecord.position, LessonRecord.id)
        )
        return result.scalars().all()

    async def get(self, lesson_id: int) -> LessonRecord:
        result = await self._execute(
            select(LessonRecord).where(LessonRecord.id == lesson_id)
        )
        lesson = result.scalar_one_or_none()
        if not lesson:
            raise NotFoundError("Lesson", lesson_id)
        return lesson

    async def create(
        self,
        section_id: int,
        title: str,
        content: str,
        video_url: Optional[str] = None,
        duration: int = 0,
        position: Optional[int] = None,
    ) -> LessonRecord:
        await self._ensure_section(section_id)
        if position is None:
            result = await self._execute(
                select(func.count(LessonRecord.id)).where(
                    LessonRecord.section_id == section_id
                )
            )
            position = result.scalar_one()
        record = LessonRecord(
            section_id=section_id,
            title=title,
            content=content,
            video_url=video_url,
            duration=duration,
            position=position,
        )
        self.session.add(record)
        await self._commit()
        await self.session.refresh(record)
        return record

    async def update(self, lesson_id: int, **fields) -> LessonRecord:
        lesson = await self.get(lesson_id)
        if not fields:
            return lesson
        for name, value in fields.items():
            setattr(lesson, name, value)
        lesson.updated_at = utcnow()
        await self._commit()
        await self.session.refresh(lesson)
        return lesson

    async def delete(self, lesson_id: int) -> bool:
        result = await self._execute(
            delete(LessonRecord).where(LessonRecord.id == lesson_id)
        )
        await self._commit()
        return result.rowcount > 0
