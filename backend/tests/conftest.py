"""Root conftest — shared DB, repository and HTTP client fixtures.

Invariants:
    - Every test gets a fresh file-backed SQLite database under tmp_path
    - Every HTTP test gets a fresh app (fresh registry) with get_session_scope
      overridden to the test session factory
    - Greeting handlers are pinned: seeded rng and a fixed clock

Design Decisions:
    - File-backed SQLite over :memory:: batch calls open concurrent sessions,
      and an in-memory database is private to a single connection
"""

import os
import random
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

# Ensure tests never reach a real database or use a real signing secret
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault(
    "AUTH_JWT_SECRET", "relay-test-secret-0123456789abcdef",
)
os.environ.setdefault("LOG_FORMAT", "text")

from relay.db.base import Base  # noqa: E402
from relay.db.session import create_session_factory  # noqa: E402
import relay.models  # noqa: E402,F401
from relay.infrastructure.database import get_session_scope  # noqa: E402
from relay.infrastructure.profile_repository import SqlProfileRepository  # noqa: E402
from relay.main import create_app  # noqa: E402
from relay.services.app_router import build_app_registry  # noqa: E402
from relay.services.handle_greeting import GreetingHandlers  # noqa: E402

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'relay.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    return create_session_factory(engine=test_engine)


@pytest.fixture
def profile_repository(test_session_factory):
    return SqlProfileRepository(test_session_factory)


@pytest.fixture
def greeting_handlers():
    return GreetingHandlers(rng=random.Random(7), clock=lambda: FIXED_NOW)


@pytest.fixture
def app(test_session_factory, greeting_handlers):
    application = create_app(
        registry=build_app_registry(greeting=greeting_handlers),
    )
    application.dependency_overrides[get_session_scope] = (
        lambda: test_session_factory
    )
    return application


@pytest.fixture
async def client(app):
    """HTTP client bound to the test app, no network."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
