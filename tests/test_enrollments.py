import asyncio

import pytest
from sqlalchemy import update

from app.models.persisted_course import EnrollmentRecord
from app.repositories.enrollment_repo import EnrollmentRepository
from helpers import create_course, create_lesson, create_section, get_stats, register

pytestmark = pytest.mark.asyncio


async def enroll(client, course_id):
    r = await client.post(f"/api/courses/{course_id}/enroll")
    assert r.status_code == 201, r.text
    return r.json()


async def set_status(client, enrollment_id, status):
    r = await client.put(f"/api/enrollments/{enrollment_id}", json={"status": status})
    assert r.status_code == 200, r.text
    return r.json()


async def test_enroll_updates_counters(admin_client, user_client):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    assert enrollment["status"] == "enrolled"
    assert enrollment["progress"] == 0
    assert enrollment["userId"] == user_client.user["id"]
    assert enrollment["completedAt"] is None

    r = await user_client.get(f"/api/courses/{course['id']}")
    assert r.json()["enrolledStudents"] == 1
    stats = await get_stats(user_client)
    assert stats["totalEnrollments"] == 1
    assert stats["completedEnrollments"] == 0


async def test_duplicate_enrollment_rejected(admin_client, user_client):
    course = await create_course(admin_client)
    await enroll(user_client, course["id"])
    r = await user_client.post(f"/api/courses/{course['id']}/enroll")
    assert r.status_code == 400
    assert r.json()["message"] == "Already enrolled in this course"
    stats = await get_stats(user_client)
    assert stats["totalEnrollments"] == 1


async def test_enroll_requires_login_and_course(client, user_client):
    assert (await client.post("/api/courses/1/enroll")).status_code == 401
    assert (await user_client.post("/api/courses/99999/enroll")).status_code == 404


async def test_completed_counter_follows_status_transitions(admin_client, user_client):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    eid = enrollment["id"]

    # enrolled -> completed
    updated = await set_status(user_client, eid, "completed")
    assert updated["completedAt"] is not None
    assert (await get_stats(user_client))["completedEnrollments"] == 1

    # completed -> completed: no change
    await set_status(user_client, eid, "completed")
    assert (await get_stats(user_client))["completedEnrollments"] == 1

    # completed -> dropped
    updated = await set_status(user_client, eid, "dropped")
    assert updated["completedAt"] is None
    assert (await get_stats(user_client))["completedEnrollments"] == 0

    # dropped -> in_progress: unrelated transition
    await set_status(user_client, eid, "in_progress")
    assert (await get_stats(user_client))["completedEnrollments"] == 0


async def test_progress_only_update_leaves_counters(admin_client, user_client):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    r = await user_client.put(
        f"/api/enrollments/{enrollment['id']}", json={"progress": 40}
    )
    assert r.status_code == 200
    assert r.json()["progress"] == 40
    assert r.json()["status"] == "enrolled"
    stats = await get_stats(user_client)
    assert (stats["totalEnrollments"], stats["completedEnrollments"]) == (1, 0)


async def test_invalid_status_and_progress(admin_client, user_client):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    r = await user_client.put(
        f"/api/enrollments/{enrollment['id']}",
        json={"status": "archived", "progress": 150},
    )
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"status", "progress"}


async def test_delete_completed_enrollment_decrements(admin_client, user_client):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    await set_status(user_client, enrollment["id"], "completed")

    r = await user_client.delete(f"/api/enrollments/{enrollment['id']}")
    assert r.status_code == 204
    stats = await get_stats(user_client)
    assert (stats["totalEnrollments"], stats["completedEnrollments"]) == (0, 0)
    r = await user_client.get(f"/api/courses/{course['id']}")
    assert r.json()["enrolledStudents"] == 0
    r = await user_client.get(f"/api/enrollments/{enrollment['id']}")
    assert r.status_code == 404


async def test_course_delete_removes_enrollments_from_stats(admin_client, user_client):
    course = await create_course(admin_client)
    keep = await create_course(admin_client, "keep-me")
    enrollment = await enroll(user_client, course["id"])
    await enroll(user_client, keep["id"])
    await set_status(user_client, enrollment["id"], "completed")

    r = await admin_client.delete(f"/api/courses/{course['id']}")
    assert r.status_code == 204

    stats = await get_stats(user_client)
    assert stats["totalCourses"] == 1
    assert stats["totalEnrollments"] == 1
    assert stats["completedEnrollments"] == 0
    r = await user_client.get("/api/enrollments")
    assert [e["courseId"] for e in r.json()] == [keep["id"]]


async def test_only_owner_or_admin_can_touch_enrollment(admin_client, user_client, make_client):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    url = f"/api/enrollments/{enrollment['id']}"

    async with make_client() as other:
        await register(other, "intruder")
        assert (await other.get(url)).status_code == 403
        assert (await other.put(url, json={"status": "dropped"})).status_code == 403
        assert (await other.delete(url)).status_code == 403
        assert (await other.get("/api/enrollments")).json() == []

    assert (await admin_client.get(url)).status_code == 200
    r = await admin_client.get(f"/api/courses/{course['id']}/enrollments")
    assert [e["id"] for e in r.json()] == [enrollment["id"]]
    assert (await user_client.get(f"/api/courses/{course['id']}/enrollments")).status_code == 403


async def test_concurrent_completion_counts_once(admin_client, user_client):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    url = f"/api/enrollments/{enrollment['id']}"

    async def complete():
        r = await admin_client.put(url, json={"status": "completed"})
        assert r.status_code == 200, r.text

    await asyncio.gather(*(complete() for _ in range(5)))
    stats = await get_stats(admin_client)
    assert stats["completedEnrollments"] == 1


async def test_lesson_progress_upsert_and_listing(admin_client, user_client):
    course = await create_course(admin_client)
    section = await create_section(admin_client, course["id"], "S1")
    l1 = await create_lesson(admin_client, section["id"], "L1")
    l2 = await create_lesson(admin_client, section["id"], "L2")

    r = await user_client.post(f"/api/lessons/{l1['id']}/progress", json={"isCompleted": True})
    assert r.status_code == 200, r.text
    first = r.json()
    assert first["isCompleted"] is True
    assert first["completedAt"] is not None

    # Same lesson again updates the existing row
    r = await user_client.post(f"/api/lessons/{l1['id']}/progress", json={"isCompleted": False})
    assert r.json()["id"] == first["id"]
    assert r.json()["completedAt"] is None

    await user_client.post(f"/api/lessons/{l2['id']}/progress", json={"isCompleted": True})

    r = await user_client.get(f"/api/courses/{course['id']}/progress")
    assert r.status_code == 200
    assert [p["lessonId"] for p in r.json()] == [l1["id"], l2["id"]]

    r = await admin_client.get(f"/api/courses/{course['id']}/progress")
    assert r.json() == []


async def test_progress_for_missing_lesson(user_client):
    r = await user_client.post("/api/lessons/99999/progress", json={"isCompleted": True})
    assert r.status_code == 404


async def test_status_update_survives_a_concurrent_change(
    admin_client, user_client, session_factory, monkeypatch
):
    course = await create_course(admin_client)
    enrollment = await enroll(user_client, course["id"])
    eid = enrollment["id"]

    original_get = EnrollmentRepository.get
    calls = {"n": 0}

    async def get_then_interfere(self, pk):
        record = await original_get(self, pk)
        calls["n"] += 1
        # Second read is the one the update's compare-and-set relies on
        if calls["n"] == 2:
            async with session_factory() as other:
                await other.execute(
                    update(EnrollmentRecord)
                    .where(EnrollmentRecord.id == pk)
                    .values(status="in_progress")
                )
                await other.commit()
        return record

    monkeypatch.setattr(EnrollmentRepository, "get", get_then_interfere)

    r = await user_client.put(f"/api/enrollments/{eid}", json={"status": "completed"})
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "completed"
    assert calls["n"] >= 4

    monkeypatch.undo()
    stats = await get_stats(user_client)
    assert stats["completedEnrollments"] == 1
    r = await admin_client.get("/api/activities")
    changes = [a for a in r.json() if a["action"] == "enrollment_status"]
    assert len(changes) == 1
    assert changes[0]["userId"] == user_client.user["id"]
