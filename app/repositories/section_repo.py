"""Repository layer for course sections.

Sections belong to a course and are kept in ``position`` order. New sections
are appended when no position is given; ``reorder`` rewrites positions to a
contiguous zero-based range in the order supplied.
"""
from __future__ import annotations
from typing import List, Optional, Sequence

from sqlalchemy import delete, func, select

from app.core.exceptions import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.persisted_course import CourseRecord, SectionRecord
from app.repositories.base import BaseRepository


class SectionRepository(BaseRepository):
    async def _ensure_course(self, course_id: int) -> None:
        result = await self._execute(
            select(CourseRecord.id).where(CourseRecord.id == course_id)
        )
        if result.first() is None:
            raise NotFoundError("Course", course_id)

    async def _next_position(self, course_id: int) -> int:
        result = await self._execute(
            select(func.count(SectionRecord.id)).where(
                SectionRecord.course_id == course_id
            )
        )
        return result.scalar_one()

    # CRUD ------------------------------------------------------------------
    async def list(self, course_id: int) -> Sequence[SectionRecord]:
        await self._ensure_course(course_id)
        result = await self._execute(
            select(SectionRecord)
            .where(SectionRecord.course_id == course_id)
            .order_by(SectionRecord.position, SectionRecord.id)
        )
        return result.scalars().all()

    async def get(self, section_id: int) -> SectionRecord:
        result = await self._execute(
            select(SectionRecord).where(SectionRecord.id == section_id)
        )
        section = result.scalar_one_or_none()
        if not section:
            raise NotFoundError("Section", section_id)
        return section

    async def create(
        self,
        course_id: int,
        title: str,
        description: Optional[str] = None,
        position: Optional[int] = None,
    ) -> SectionRecord:
        await self._ensure_course(course_id)
        # Append if no position provided
        if position is None:
            position = await self._next_position(course_id)
        record = SectionRecord(
            course_id=course_id,
            title=title,
            description=description,
            position=position,
        )
        self.session.add(record)
        await self._commit()
        await self.session.refresh(record)
        return record

    async def update(self, section_id: int, **fields) -> SectionRecord:
        section = await self.get(section_id)
        if not fields:
            return section
        for name, value in fields.items():
            setattr(section, name, value)
        section.updated_at = utcnow()
        await self._commit()
        await self.session.refresh(section)
        return section

    async def reorder(
        self, course_id: int, ordered_ids: List[int]
    ) -> Sequence[SectionRecord]:
        await self._ensure_course(course_id)
        result = await self._execute(
            select(SectionRecord).where(SectionRecord.course_id == course_id)
        )
        sections = {s.id: s for s in result.scalars().all()}
        if len(ordered_ids) != len(sections) or set(sections) != set(ordered_ids):
            raise ConflictError(
                "Ordered IDs must match existing sections exactly"
            )
        for idx, sid in enumerate(ordered_ids):
            sections[sid].position = idx
        await self._commit()
        return [sections[sid] for sid in ordered_ids]

    async def delete(self, section_id: int) -> bool:
        """Remove a section and (by cascade) its lessons."""
        result = await self._execute(
            delete(SectionRecord).where(SectionRecord.id == section_id)
        )
        await self._commit()
        return result.rowcount > 0
