"""
Repository-level tests for counter bookkeeping
"""

import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.repositories.course_repo import CourseRepository
from app.repositories.enrollment_repo import EnrollmentRepository, completion_delta
from app.repositories.section_repo import SectionRepository
from app.repositories.stats_repo import StatsRepository
from app.repositories.user_repo import UserRepository

COURSE = dict(
    title="Malware 101",
    slug="malware-101",
    description="Static and dynamic analysis basics.",
    level="beginner",
    category="malware_analysis",
    duration=60,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "prior,new,expected",
    [
        ("enrolled", "completed", 1),
        ("in_progress", "completed", 1),
        ("completed", "completed", 0),
        ("completed", "dropped", -1),
        ("completed", "in_progress", -1),
        ("enrolled", "dropped", 0),
        ("dropped", "in_progress", 0),
    ],
)
def test_completion_delta(prior, new, expected):
    assert completion_delta(prior, new) == expected


async def test_stats_adjust_floors_at_zero(session_factory):
    async with session_factory() as session:
        stats = StatsRepository(session)
        await stats.adjust(total_courses=2, course_views=1)
        await session.commit()
        await stats.adjust(total_courses=-5, course_views=-1)
        await session.commit()

        row = await stats.get()
        assert row.total_courses == 0
        assert row.course_views == 0


async def test_stats_adjust_rejects_unknown_counter(session_factory):
    async with session_factory() as session:
        with pytest.raises(ValueError):
            await StatsRepository(session).adjust(bogus=1)


async def test_enrollment_counters_round_trip(session_factory):
    async with session_factory() as session:
        user = await UserRepository(session).create(
            username="repo-user",
            email="repo@example.com",
            password="pw123456",
            full_name="Repo User",
        )
        course = await CourseRepository(session).create(**COURSE)
        repo = EnrollmentRepository(session)

        enrollment = await repo.create(user.id, course.id, status="completed")
        assert enrollment.completed_at is not None
        stats = await StatsRepository(session).get()
        assert (stats.total_enrollments, stats.completed_enrollments) == (1, 1)

        with pytest.raises(ConflictError):
            await repo.create(user.id, course.id)

        await repo.update(enrollment.id, status="enrolled")
        stats = await StatsRepository(session).get()
        assert stats.completed_enrollments == 0

        assert await repo.delete(enrollment.id) is True
        assert await repo.delete(enrollment.id) is False
        refreshed = await CourseRepository(session).get(course.id)
        assert refreshed.enrolled_students == 0
        stats = await StatsRepository(session).get()
        assert (stats.total_enrollments, stats.completed_enrollments) == (0, 0)


async def test_status_update_retries_after_concurrent_change(session_factory):
    async with session_factory() as setup:
        user = await UserRepository(setup).create(
            username="racer",
            email="racer@example.com",
            password="pw123456",
            full_name="Race Condition",
        )
        course = await CourseRepository(setup).create(**COURSE)
        enrollment = await EnrollmentRepository(setup).create(user.id, course.id)
        enrollment_id = enrollment.id

    async with session_factory() as first, session_factory() as second:
        stale = await EnrollmentRepository(second).get(enrollment_id)
        assert stale.status == "enrolled"

        await EnrollmentRepository(first).update(enrollment_id, status="completed")
        # second still holds the stale object; its update must re-read
        await EnrollmentRepository(second).update(enrollment_id, status="completed")

    async with session_factory() as check:
        stats = await StatsRepository(check).get()
        assert stats.completed_enrollments == 1


async def test_course_delete_cascades(session_factory):
    async with session_factory() as session:
        courses = CourseRepository(session)
        course = await courses.create(**COURSE)
        sections = SectionRepository(session)
        section = await sections.create(course.id, "Intro")

        assert await courses.delete(course.id) is True
        assert await courses.delete(course.id) is False
        with pytest.raises(NotFoundError):
            await sections.get(section.id)
        with pytest.raises(NotFoundError):
            await courses.get(course.id)


async def test_course_delete_subtracts_every_cascaded_enrollment(session_factory):
    async with session_factory() as session:
        users = UserRepository(session)
        courses = CourseRepository(session)
        enrollments = EnrollmentRepository(session)
        course = await courses.create(**COURSE)
        other = await courses.create(**{**COURSE, "slug": "malware-102"})

        for i, status in enumerate(["enrolled", "completed", "completed", "dropped"]):
            user = await users.create(
                username=f"learner{i}",
                email=f"learner{i}@example.com",
                password="pw123456",
                full_name=f"Learner {i}",
            )
            await enrollments.create(user.id, course.id, status=status)
            if i == 0:
                await enrollments.create(user.id, other.id, status="completed")

        stats = await StatsRepository(session).get()
        assert (stats.total_enrollments, stats.completed_enrollments) == (5, 3)

        assert await courses.delete(course.id) is True

        stats = await StatsRepository(session).get()
        assert stats.total_courses == 1
        assert (stats.total_enrollments, stats.completed_enrollments) == (1, 1)
        assert [e.course_id for e in await enrollments.list_for_user(user.id)] == []
        remaining = await enrollments.list_for_course(other.id)
        assert [e.status for e in remaining] == ["completed"]
