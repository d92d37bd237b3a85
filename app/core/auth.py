"""Session-based authentication dependencies.

The signed session cookie (Starlette ``SessionMiddleware``) carries only the
user id. ``require_user`` and ``require_admin`` are declared as route
dependencies, so they run before the request body is validated and before
any repository is used.
"""
from __future__ import annotations
import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthenticationRequired,
    AuthorizationDenied,
    NotFoundError,
)
from app.db.config import get_session
from app.models.persisted_user import UserRecord
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def login_session(request: Request, user: UserRecord) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def logout_session(request: Request) -> None:
    request.session.clear()


async def current_user(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> Optional[UserRecord]:
    """The logged-in user, or ``None`` for anonymous requests."""
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    try:
        return await UserRepository(session).get(int(user_id))
    except (NotFoundError, TypeError, ValueError):
        # Account removed (or cookie tampered) since login
        logger.info("Dropping session for unknown user id %r", user_id)
        request.session.clear()
        return None


async def require_user(
    user: Optional[UserRecord] = Depends(current_user),
) -> UserRecord:
    if user is None:
        raise AuthenticationRequired()
    return user


async def require_admin(user: UserRecord = Depends(require_user)) -> UserRecord:
    if not user.is_admin:
        raise AuthorizationDenied()
    return user


def ensure_owner_or_admin(user: UserRecord, owner_id: int) -> None:
    if user.id != owner_id and not user.is_admin:
        raise AuthorizationDenied("You do not have access to this resource")
