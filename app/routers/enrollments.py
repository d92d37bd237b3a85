"""Enrollment and lesson-progress router.

Learners manage their own enrollments; administrators may act on any.
Counter bookkeeping (course ``enrolledStudents`` and the stats row) happens
in ``EnrollmentRepository``.
"""
from __future__ import annotations
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import ensure_owner_or_admin, require_admin, require_user
from app.core.exceptions import NotFoundError
from app.db.config import get_session
from app.models.course import (
    EnrollmentCreate,
    EnrollmentOut,
    EnrollmentUpdate,
    ProgressOut,
    ProgressUpdate,
)
from app.models.persisted_user import UserRecord
from app.repositories.enrollment_repo import EnrollmentRepository
from app.repositories.progress_repo import ProgressRepository
from app.services.activity_log import schedule_activity
from app.utils.validation import validate_for_create

router = APIRouter(tags=["Enrollments"])


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> EnrollmentRepository:
    return EnrollmentRepository(session)


async def _get_progress_repo(
    session: AsyncSession = Depends(get_session),
) -> ProgressRepository:
    return ProgressRepository(session)


@router.post(
    "/courses/{course_id}/enroll",
    response_model=EnrollmentOut,
    status_code=status.HTTP_201_CREATED,
)
async def enroll(
    request: Request,
    background: BackgroundTasks,
    course_id: int,
    user: UserRecord = Depends(require_user),
    repo: EnrollmentRepository = Depends(_get_repo),
):
    fields = validate_for_create(
        EnrollmentCreate, {"userId": user.id, "courseId": course_id}
    )
    enrollment = await repo.create(**fields)
    schedule_activity(
        background,
        request,
        "enrollment_created",
        f"{user.username} enrolled in course {course_id}",
        user_id=user.id,
        course_id=course_id,
    )
    return enrollment.to_dict()


@router.get("/enrollments", response_model=List[EnrollmentOut])
async def list_my_enrollments(
    user: UserRecord = Depends(require_user),
    repo: EnrollmentRepository = Depends(_get_repo),
):
    enrollments = await repo.list_for_user(user.id)
    return [e.to_dict() for e in enrollments]


@router.get(
    "/courses/{course_id}/enrollments",
    response_model=List[EnrollmentOut],
    dependencies=[Depends(require_admin)],
)
async def list_course_enrollments(
    course_id: int, repo: EnrollmentRepository = Depends(_get_repo)
):
    enrollments = await repo.list_for_course(course_id)
    return [e.to_dict() for e in enrollments]


@router.get("/enrollments/{enrollment_id}", response_model=EnrollmentOut)
async def get_enrollment(
    enrollment_id: int,
    user: UserRecord = Depends(require_user),
    repo: EnrollmentRepository = Depends(_get_repo),
):
    enrollment = await repo.get(enrollment_id)
    ensure_owner_or_admin(user, enrollment.user_id)
    return enrollment.to_dict()


@router.put("/enrollments/{enrollment_id}", response_model=EnrollmentOut)
async def update_enrollment(
    request: Request,
    background: BackgroundTasks,
    enrollment_id: int,
    payload: EnrollmentUpdate,
    user: UserRecord = Depends(require_user),
    repo: EnrollmentRepository = Depends(_get_repo),
):
    existing = await repo.get(enrollment_id)
    ensure_owner_or_admin(user, existing.user_id)
    prior_status = existing.status
    user_id = user.id

    enrollment = await repo.update(enrollment_id, **payload.to_columns(partial=True))
    if enrollment.status != prior_status:
        schedule_activity(
            background,
            request,
            "enrollment_status",
            f"Enrollment {enrollment.id} status changed to {enrollment.status}",
            user_id=user_id,
            course_id=enrollment.course_id,
        )
    return enrollment.to_dict()


@router.delete("/enrollments/{enrollment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_enrollment(
    enrollment_id: int,
    user: UserRecord = Depends(require_user),
    repo: EnrollmentRepository = Depends(_get_repo),
):
    existing = await repo.get(enrollment_id)
    ensure_owner_or_admin(user, existing.user_id)
    if not await repo.delete(enrollment_id):
        raise NotFoundError("Enrollment", enrollment_id)
    return None


# Lesson progress ----------------------------------------------------------


@router.get("/courses/{course_id}/progress", response_model=List[ProgressOut])
async def get_course_progress(
    course_id: int,
    user: UserRecord = Depends(require_user),
    repo: ProgressRepository = Depends(_get_progress_repo),
):
    rows = await repo.list_for_course(user.id, course_id)
    return [r.to_dict() for r in rows]


@router.post("/lessons/{lesson_id}/progress", response_model=ProgressOut)
async def update_lesson_progress(
    lesson_id: int,
    payload: ProgressUpdate,
    user: UserRecord = Depends(require_user),
    repo: ProgressRepository = Depends(_get_progress_repo),
):
    record = await repo.upsert(user.id, lesson_id, payload.isCompleted)
    return record.to_dict()
