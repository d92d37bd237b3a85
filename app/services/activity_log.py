"""Background recording of activity-log entries.

Runs after the response is sent (FastAPI ``BackgroundTasks``) on a session
of its own. A failure here is logged and dropped; it must never surface to
the request that triggered it.
"""

import logging
from typing import Optional

from fastapi import BackgroundTasks, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.repositories.activity_repo import ActivityRepository

logger = logging.getLogger(__name__)


async def record_activity(
    session_factory: async_sessionmaker[AsyncSession],
    action: str,
    description: str,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None,
) -> None:
    try:
        async with session_factory() as session:
            await ActivityRepository(session).create(
                action=action,
                description=description,
                user_id=user_id,
                course_id=course_id,
            )
    except Exception:
        logger.warning("Could not record activity '%s'", action, exc_info=True)


def schedule_activity(
    background: BackgroundTasks,
    request: Request,
    action: str,
    description: str,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None,
) -> None:
    """Queue ``record_activity`` to run once the response has been sent."""
    background.add_task(
        record_activity,
        request.app.state.session_factory,
        action,
        description,
        user_id=user_id,
        course_id=course_id,
    )
