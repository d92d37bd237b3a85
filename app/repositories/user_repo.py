"""Repository layer for user accounts.

Passwords are hashed here, on the way in; the plain value never reaches the
session. Lookups by username/email return ``None`` when absent since they
back the login and uniqueness checks rather than a resource read.
"""
from __future__ import annotations
import logging
from typing import Optional, Sequence

from sqlalchemy import func, select

from app.core.exceptions import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.persisted_user import UserRecord
from app.repositories.base import BaseRepository
from app.utils.passwords import hash_password_async, verify_password_async

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "Username already exists"
EMAIL_TAKEN = "Email already registered"


class UserRepository(BaseRepository):
    async def get(self, pk: int) -> UserRecord:
        result = await self._execute(
            select(UserRecord)
            .where(UserRecord.id == pk)
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User", pk)
        return user

    async def get_by_username(self, username: str) -> Optional[UserRecord]:
        result = await self._execute(
            select(UserRecord).where(UserRecord.username == username)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        result = await self._execute(
            select(UserRecord).where(func.lower(UserRecord.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def list(self) -> Sequence[UserRecord]:
        result = await self._execute(select(UserRecord).order_by(UserRecord.id))
        return result.scalars().all()

    async def create(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
        role: str = "user",
    ) -> UserRecord:
        if await self.get_by_username(username):
            raise ConflictError(USERNAME_TAKEN)
        if await self.get_by_email(email):
            raise ConflictError(EMAIL_TAKEN)
        user = UserRecord(
            username=username,
            email=email,
            password=await hash_password_async(password),
            full_name=full_name,
            bio=bio,
            avatar_url=avatar_url,
            role=role,
        )
        self.session.add(user)
        await self._commit(USERNAME_TAKEN)
        await self.session.refresh(user)
        logger.info("Registered user %s (id=%s)", username, user.id)
        return user

    async def update(self, pk: int, **fields) -> UserRecord:
        user = await self.get(pk)
        if not fields:
            return user
        email = fields.get("email")
        if email and email.lower() != user.email.lower():
            other = await self.get_by_email(email)
            if other is not None and other.id != pk:
                raise ConflictError(EMAIL_TAKEN)
        if "password" in fields:
            fields["password"] = await hash_password_async(fields["password"])
        for name, value in fields.items():
            setattr(user, name, value)
        user.updated_at = utcnow()
        await self._commit(EMAIL_TAKEN)
        await self.session.refresh(user)
        return user

    async def set_role(self, pk: int, role: str) -> UserRecord:
        user = await self.update(pk, role=role)
        logger.info("User %s role set to %s", pk, role)
        return user

    async def authenticate(self, username: str, password: str) -> Optional[UserRecord]:
        """Return the user when the credentials match, else ``None``."""
        user = await self.get_by_username(username)
        if user is None:
            return None
        if not await verify_password_async(password, user.password):
            return None
        return user
