"""Repository layer for contact-form messages.

Messages are immutable once stored; the only change allowed is moderation
marking one as read.
"""
from __future__ import annotations
from typing import Optional, Sequence

from sqlalchemy import delete, select

from app.core.exceptions import NotFoundError
from app.models.base import utcnow
from app.models.persisted_activity import ContactMessageRecord
from app.repositories.base import BaseRepository


class ContactRepository(BaseRepository):
    async def create(
        self, name: str, email: str, message: str, subject: Optional[str] = None
    ) -> ContactMessageRecord:
        record = ContactMessageRecord(
            name=name, email=email, subject=subject, message=message
        )
        self.session.add(record)
        await self._commit()
        await self.session.refresh(record)
        return record

    async def list(self, unread_only: bool = False) -> Sequence[ContactMessageRecord]:
        stmt = select(ContactMessageRecord).order_by(
            ContactMessageRecord.created_at.desc(), ContactMessageRecord.id.desc()
        )
        if unread_only:
            stmt = stmt.where(ContactMessageRecord.is_read.is_(False))
        result = await self._execute(stmt)
        return result.scalars().all()

    async def get(self, pk: int) -> ContactMessageRecord:
        result = await self._execute(
            select(ContactMessageRecord).where(ContactMessageRecord.id == pk)
        )
        record = result.scalar_one_or_none()
        if not record:
            raise NotFoundError("Message", pk)
        return record

    async def mark_read(self, pk: int) -> ContactMessageRecord:
        record = await self.get(pk)
        if not record.is_read:
            record.is_read = True
            record.read_at = utcnow()
            await self._commit()
            await self.session.refresh(record)
        return record

    async def delete(self, pk: int) -> bool:
        result = await self._execute(
            delete(ContactMessageRecord).where(ContactMessageRecord.id == pk)
        )
        await self._commit()
        return result.rowcount > 0
