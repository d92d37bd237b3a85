"""Negative test coverage for sections and lessons."""

import pytest

from helpers import create_course, create_section

pytestmark = pytest.mark.asyncio


class TestSectionNegative:
    async def test_sections_of_missing_course(self, client, admin_client):
        assert (await client.get("/api/courses/99999/sections")).status_code == 404
        r = await admin_client.post("/api/courses/99999/sections", json={"title": "x"})
        assert r.status_code == 404

    async def test_invalid_title_length(self, admin_client):
        course = await create_course(admin_client)
        resp = await admin_client.post(
            f"/api/courses/{course['id']}/sections", json={"title": "x" * 205}
        )
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "title"

    async def test_negative_order_rejected(self, admin_client):
        course = await create_course(admin_client)
        resp = await admin_client.post(
            f"/api/courses/{course['id']}/sections", json={"title": "Bad", "order": -1}
        )
        assert resp.status_code == 400

    async def test_update_missing_section(self, admin_client):
        resp = await admin_client.put("/api/sections/99999", json={"title": "New"})
        assert resp.status_code == 404

    async def test_delete_missing_section(self, admin_client):
        resp = await admin_client.delete("/api/sections/99999")
        assert resp.status_code == 404

    async def test_lesson_requires_content(self, admin_client):
        course = await create_course(admin_client)
        section = await create_section(admin_client, course["id"], "S")
        resp = await admin_client.post(
            f"/api/sections/{section['id']}/lessons", json={"title": "No body"}
        )
        assert resp.status_code == 400
        assert {e["field"] for e in resp.json()["errors"]} == {"content"}

    async def test_lessons_of_missing_section(self, client):
        assert (await client.get("/api/sections/99999/lessons")).status_code == 404

    async def test_non_admin_cannot_write(self, admin_client, user_client):
        course = await create_course(admin_client)
        section = await create_section(admin_client, course["id"], "S")
        r = await user_client.post(
            f"/api/courses/{course['id']}/sections", json={"title": "Mine"}
        )
        assert r.status_code == 403
        r = await user_client.delete(f"/api/sections/{section['id']}")
        assert r.status_code == 403
        r = await user_client.post(
            f"/api/sections/{section['id']}/lessons",
            json={"title": "L", "content": "c"},
        )
        assert r.status_code == 403
