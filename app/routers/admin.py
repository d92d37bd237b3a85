"""Administrator-only routes: contact-message moderation and user roles."""
from __future__ import annotations
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_admin
from app.core.exceptions import NotFoundError
from app.db.config import get_session
from app.models.account import RoleUpdate, UserOut
from app.models.messaging import ContactMessageOut
from app.repositories.contact_repo import ContactRepository
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


async def _get_contact_repo(
    session: AsyncSession = Depends(get_session),
) -> ContactRepository:
    return ContactRepository(session)


async def _get_user_repo(
    session: AsyncSession = Depends(get_session),
) -> UserRepository:
    return UserRepository(session)


# Contact messages ---------------------------------------------------------


@router.get("/contact-messages", response_model=List[ContactMessageOut])
async def list_contact_messages(
    unread: bool = False,
    repo: ContactRepository = Depends(_get_contact_repo),
):
    messages = await repo.list(unread_only=unread)
    return [m.to_dict() for m in messages]


@router.get("/contact-messages/{message_id}", response_model=ContactMessageOut)
async def get_contact_message(
    message_id: int, repo: ContactRepository = Depends(_get_contact_repo)
):
    message = await repo.get(message_id)
    return message.to_dict()


@router.put("/contact-messages/{message_id}/read", response_model=ContactMessageOut)
async def mark_contact_message_read(
    message_id: int, repo: ContactRepository = Depends(_get_contact_repo)
):
    message = await repo.mark_read(message_id)
    return message.to_dict()


@router.delete(
    "/contact-messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_contact_message(
    message_id: int, repo: ContactRepository = Depends(_get_contact_repo)
):
    if not await repo.delete(message_id):
        raise NotFoundError("Message", message_id)
    return None


# Users --------------------------------------------------------------------


@router.get("/users", response_model=List[UserOut])
async def list_users(repo: UserRepository = Depends(_get_user_repo)):
    users = await repo.list()
    return [u.to_dict() for u in users]


@router.put("/users/{user_id}/role", response_model=UserOut)
async def set_user_role(
    user_id: int,
    payload: RoleUpdate,
    repo: UserRepository = Depends(_get_user_repo),
):
    user = await repo.set_role(user_id, payload.role)
    return user.to_dict()
