"""Shared plumbing for repositories.

Repositories are the only code that touches an ``AsyncSession``. Expected
conditions surface as ``NotFoundError`` / ``ConflictError``; anything else
SQLAlchemy raises is logged with full detail and re-raised as a generic
``StorageError`` so no query text reaches the HTTP layer.
"""
from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, StorageError

logger = logging.getLogger(__name__)


def floored(column, delta: int):
    """SQL expression for ``column + delta`` that never drops below zero."""
    return case((column + delta < 0, 0), else_=column + delta)


class BaseRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _execute(self, statement):
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Storage statement failed: %s", exc, exc_info=True)
            raise StorageError(type(self).__name__) from exc

    async def _commit(self, conflict_message: Optional[str] = None) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if conflict_message:
                raise ConflictError(conflict_message) from exc
            logger.error("Integrity error on commit: %s", exc, exc_info=True)
            raise StorageError(type(self).__name__) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Commit failed: %s", exc, exc_info=True)
            raise StorageError(type(self).__name__) from exc

    async def _release(self) -> None:
        """End the current transaction without touching loaded objects.

        Used after a compare-and-set that matched no row: nothing was
        written, and a rollback would expire every instance in the session
        (including the caller's authenticated user).
        """
        await self._commit()

    async def _flush(self, conflict_message: Optional[str] = None) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            if conflict_message:
                raise ConflictError(conflict_message) from exc
            raise StorageError(type(self).__name__) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Flush failed: %s", exc, exc_info=True)
            raise StorageError(type(self).__name__) from exc
