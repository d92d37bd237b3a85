"""Public contact form.

The message is stored first; the administrator notification email and the
activity entry are background work and cannot fail the request.
"""
from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.config import get_session
from app.models.messaging import ContactMessageCreate, ContactMessageOut
from app.repositories.contact_repo import ContactRepository
from app.services.activity_log import schedule_activity
from app.utils.feature_flags import is_feature_enabled

router = APIRouter(tags=["Contact"])


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> ContactRepository:
    return ContactRepository(session)


@router.post(
    "/contact",
    response_model=ContactMessageOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_contact_message(
    request: Request,
    background: BackgroundTasks,
    payload: ContactMessageCreate,
    repo: ContactRepository = Depends(_get_repo),
):
    record = await repo.create(**payload.to_columns())
    data = record.to_dict()
    if is_feature_enabled("contact_notifications"):
        background.add_task(request.app.state.notifier.notify_contact_message, data)
    schedule_activity(
        background,
        request,
        "contact_message",
        f"Contact message received from {record.name}",
    )
    return data
