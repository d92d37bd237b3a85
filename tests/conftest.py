"""
Pytest configuration and fixtures for backend testing

Every test gets its own SQLite file database (``NullPool``), a fresh app from
``create_app`` and fake collaborators for the text-generation provider and
the email notifier.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import NullPool

# Set test environment before the app reads its settings
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_default.db")
os.environ["AUTO_MIGRATE"] = "false"

from app.db.config import build_engine, build_session_factory, init_db  # noqa: E402
from app.main import create_app  # noqa: E402
from app.repositories.stats_repo import StatsRepository  # noqa: E402
from app.repositories.user_repo import UserRepository  # noqa: E402
from app.services.ai_assistant import AIAssistant  # noqa: E402

from helpers import FakeNotifier, FakeOpenAIClient, register  # noqa: E402


@pytest.fixture
async def session_factory(tmp_path):
    engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    await init_db(engine)
    factory = build_session_factory(engine)
    async with factory() as session:
        await StatsRepository(session).ensure_row()
    yield factory
    await engine.dispose()


@pytest.fixture
def fake_openai():
    return FakeOpenAIClient()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def test_app(session_factory, fake_openai, notifier):
    assistant = AIAssistant(client=fake_openai, model="gpt-4o", timeout=2.0)
    return create_app(
        session_factory=session_factory,
        ai_assistant=assistant,
        notifier=notifier,
    )


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(test_app):
    """Anonymous client."""
    async with _client(test_app) as c:
        yield c


@pytest.fixture
async def user_client(test_app):
    """Client logged in as a plain user; ``.user`` holds the profile."""
    async with _client(test_app) as c:
        c.user = await register(c, "learner")
        yield c


@pytest.fixture
async def admin_client(test_app, session_factory):
    """Client logged in as an administrator."""
    async with _client(test_app) as c:
        c.user = await register(c, "admin")
        async with session_factory() as session:
            await UserRepository(session).set_role(c.user["id"], "admin")
        yield c


@pytest.fixture
def make_client(test_app):
    """Factory for extra clients (each keeps its own session cookie)."""
    return lambda: _client(test_app)


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
