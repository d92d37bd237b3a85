"""Shared request helpers and fakes for the API tests."""

import asyncio
from types import SimpleNamespace

from httpx import AsyncClient

DEFAULT_AI_RESPONSE = '{"suggestions": [], "strengths": ["clear"], "overallRecommendation": "ok"}'


class FakeCompletions:
    """Stands in for ``client.chat.completions``."""

    def __init__(self):
        self.calls = []
        self.content = DEFAULT_AI_RESPONSE
        self.error = None
        self.delay = 0.0

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAIClient:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


class FakeNotifier:
    """Records contact notifications instead of sending email."""

    def __init__(self):
        self.sent = []

    async def notify_contact_message(self, contact: dict) -> bool:
        self.sent.append(contact)
        return True


async def register(client: AsyncClient, username: str, **overrides) -> dict:
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "password": "s3cret-pass",
        "fullName": f"{username.title()} Tester",
    }
    payload.update(overrides)
    r = await client.post("/api/register", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def course_payload(slug: str = "intro-to-security", **overrides) -> dict:
    payload = {
        "title": "Intro to Security",
        "slug": slug,
        "description": "A first look at defending networks and applications.",
        "level": "beginner",
        "category": "general",
        "duration": 90,
        "instructor": "Test Instructor",
    }
    payload.update(overrides)
    return payload


async def create_course(admin: AsyncClient, slug: str = "intro-to-security", **overrides) -> dict:
    r = await admin.post("/api/courses", json=course_payload(slug, **overrides))
    assert r.status_code == 201, r.text
    return r.json()


async def create_section(admin: AsyncClient, course_id: int, title: str, **extra) -> dict:
    r = await admin.post(
        f"/api/courses/{course_id}/sections", json={"title": title, **extra}
    )
    assert r.status_code == 201, r.text
    return r.json()


async def create_lesson(admin: AsyncClient, section_id: int, title: str, **extra) -> dict:
    body = {"title": title, "content": f"{title} content", **extra}
    r = await admin.post(f"/api/sections/{section_id}/lessons", json=body)
    assert r.status_code == 201, r.text
    return r.json()


async def get_stats(client: AsyncClient) -> dict:
    r = await client.get("/api/stats")
    assert r.status_code == 200, r.text
    return r.json()
