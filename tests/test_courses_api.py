import asyncio

import pytest

from helpers import course_payload, create_course, get_stats


@pytest.mark.asyncio
async def test_course_crud_flow(admin_client, client):
    # Create
    created = await create_course(admin_client, "c1")
    assert created["slug"] == "c1"
    assert created["views"] == 0
    assert created["enrolledStudents"] == 0
    assert created["isFeatured"] is False
    cid = created["id"]

    # List
    r = await client.get("/api/courses")
    assert r.status_code == 200
    assert [c["id"] for c in r.json()] == [cid]

    # Get
    r = await client.get(f"/api/courses/{cid}")
    assert r.status_code == 200
    assert r.json()["title"] == "Intro to Security"

    # Update (partial)
    r = await admin_client.put(f"/api/courses/{cid}", json={"title": "New Title"})
    assert r.status_code == 200, r.text
    assert r.json()["title"] == "New Title"
    assert r.json()["description"] == created["description"]

    # Delete
    r = await admin_client.delete(f"/api/courses/{cid}")
    assert r.status_code == 204
    assert r.content == b""

    # Confirm gone
    r = await client.get(f"/api/courses/{cid}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_course_duplicate_slug(admin_client):
    await create_course(admin_client, "dup1")
    r = await admin_client.post("/api/courses", json=course_payload("dup1"))
    assert r.status_code == 400
    assert r.json()["message"] == "slug already exists"


@pytest.mark.asyncio
async def test_update_to_taken_slug_rejected(admin_client):
    await create_course(admin_client, "first")
    second = await create_course(admin_client, "second")
    r = await admin_client.put(f"/api/courses/{second['id']}", json={"slug": "first"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_list_preserves_insertion_order_and_filters(admin_client, client):
    a = await create_course(admin_client, "a-course", category="cryptography")
    b = await create_course(admin_client, "b-course", category="web_security", level="advanced")
    c = await create_course(admin_client, "c-course", category="cryptography")

    r = await client.get("/api/courses")
    assert [x["id"] for x in r.json()] == [a["id"], b["id"], c["id"]]

    r = await client.get("/api/courses", params={"category": "cryptography"})
    assert [x["id"] for x in r.json()] == [a["id"], c["id"]]

    r = await client.get("/api/courses", params={"level": "advanced"})
    assert [x["id"] for x in r.json()] == [b["id"]]


@pytest.mark.asyncio
async def test_featured_and_slug_lookup(admin_client, client):
    await create_course(admin_client, "plain")
    featured = await create_course(admin_client, "star", isFeatured=True)

    r = await client.get("/api/courses/featured")
    assert [x["id"] for x in r.json()] == [featured["id"]]

    r = await client.get("/api/courses/slug/star")
    assert r.status_code == 200
    assert r.json()["id"] == featured["id"]

    r = await client.get("/api/courses/slug/missing")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_recent_is_most_recently_updated_first(admin_client, client):
    first = await create_course(admin_client, "first")
    await asyncio.sleep(0.01)
    second = await create_course(admin_client, "second")
    await asyncio.sleep(0.01)
    # Touch the older course so it becomes the most recent
    r = await admin_client.put(f"/api/courses/{first['id']}", json={"duration": 120})
    assert r.status_code == 200

    r = await client.get("/api/courses/recent", params={"limit": 2})
    assert [x["id"] for x in r.json()] == [first["id"], second["id"]]


@pytest.mark.asyncio
async def test_view_counter_increments_course_and_stats(admin_client, client):
    course = await create_course(admin_client)
    for expected in (1, 2, 3):
        r = await client.post(f"/api/courses/{course['id']}/view")
        assert r.status_code == 200
        assert r.json()["views"] == expected
    stats = await get_stats(client)
    assert stats["courseViews"] == 3


@pytest.mark.asyncio
async def test_concurrent_views_are_not_lost(admin_client, make_client):
    course = await create_course(admin_client)
    n = 20

    async def view():
        async with make_client() as c:
            r = await c.post(f"/api/courses/{course['id']}/view")
            assert r.status_code == 200, r.text

    await asyncio.gather(*(view() for _ in range(n)))

    r = await admin_client.get(f"/api/courses/{course['id']}")
    assert r.json()["views"] == n
    stats = await get_stats(admin_client)
    assert stats["courseViews"] == n


@pytest.mark.asyncio
async def test_create_and_delete_adjust_total_courses(admin_client, client):
    one = await create_course(admin_client, "one")
    await create_course(admin_client, "two")
    assert (await get_stats(client))["totalCourses"] == 2

    r = await admin_client.delete(f"/api/courses/{one['id']}")
    assert r.status_code == 204
    assert (await get_stats(client))["totalCourses"] == 1
