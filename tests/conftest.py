"""Pytest configuration and fixtures."""

import asyncio
import sys
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import config
from db import Base
from main import create_app
from models.application import Application

# Fix Windows asyncio event loop
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

JOIN_URL = "/join-waitlist"


def make_settings(tmp_path, **overrides) -> config.Settings:
    """Settings pointing at an isolated SQLite database file."""
    return config.Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'waitlist.db'}",
        DB_CREATE_ALL=False,
        **overrides,
    )


@pytest.fixture
def settings_overrides() -> dict:
    """Settings overrides; test modules override this fixture for other variants."""
    return {}


@pytest.fixture
def settings(tmp_path, settings_overrides):
    """Test settings."""
    return make_settings(tmp_path, **settings_overrides)


@pytest_asyncio.fixture
async def app(settings):
    """App with a freshly created schema."""
    test_app = create_app(settings)
    engine = test_app.state.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_app
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(app):
    """Create a test database session on the app's database."""
    async with app.state.session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def session_factory(app):
    """The app's session factory, for code that opens its own sessions."""
    return app.state.session_factory


@pytest_asyncio.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app, client=("203.0.113.7", 51234))
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


async def make_application(db_session, name: str = "Launch App", is_active: bool = True) -> Application:
    """Insert an application and return it."""
    application = Application(
        application_id=uuid4(),
        application_name=name,
        is_active=is_active,
    )
    db_session.add(application)
    await db_session.commit()
    await db_session.refresh(application)
    return application


@pytest_asyncio.fixture
async def application(db_session):
    """An active application."""
    return await make_application(db_session)


@pytest_asyncio.fixture
async def inactive_application(db_session):
    """A deactivated application."""
    return await make_application(db_session, name="Sunset App", is_active=False)


def join_body(application_id, email: str = "a@example.com", **extra) -> dict:
    """
    Helper function to build a join-waitlist request body.

    Args:
        application_id: Application ID (any type; stringified)
        email: Email to submit
        **extra: Additional or overriding camelCase fields

    Returns:
        Request body dict
    """
    body = {
        "applicationId": str(application_id),
        "email": email,
        "sourceUrl": "https://x.com",
    }
    body.update(extra)
    return body
