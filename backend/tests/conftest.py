"""
Mounjaro Tracker Backend — Test Configuration (conftest.py)
=============================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Reusable infrastructure: an isolated app per test on a throwaway
       SQLite file, an HTTP client, and ready-made users and tokens.
How:   pytest auto-discovers conftest.py; async fixtures use pytest-asyncio.

Fixture Hierarchy (all function-scoped):
    test_settings ─▶ app ─▶ context ─▶ registered_user ─▶ onboarded_user
                      │                      └─▶ session_token
                      └─▶ test_client
    mock_db_session: AsyncMock session for service-level unit tests

Note on lifespan:
    httpx's ASGITransport does not send lifespan events, so the `app`
    fixture creates the tables itself and disposes the engine afterwards.
"""

import os
import tempfile
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any tracker import: tracker.main builds a module-level app from
# the environment, and it must not point at a real database or the checkout
_IMPORT_DB_DIR = tempfile.mkdtemp(prefix="tracker_test_")
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{os.path.join(_IMPORT_DB_DIR, 'import.db')}"
)
os.environ["AUTH_SECRET"] = "test-secret-that-is-long-enough-for-hs256-and-fernet"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from tracker.config import Settings  # noqa: E402
from tracker.main import create_app  # noqa: E402
from tracker.schemas.profile import ProfileCreate  # noqa: E402
from tracker.security.session_token import SessionIdentity  # noqa: E402

TEST_EMAIL = "jane@example.com"
TEST_PASSWORD = "Password123"


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for one test: private SQLite file, fast bcrypt, generous limits."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tracker_test.db'}",
        auth_secret="test-secret-that-is-long-enough-for-hs256-and-fernet",
        bcrypt_rounds=4,
        db_create_tables=False,
        log_level="WARNING",
        auth_rate_limit_requests=1000,
        app_base_url="http://test",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """A fresh FastAPI app with its tables created."""
    application = create_app(test_settings)
    database = application.state.context.database
    await database.create_all()
    yield application
    await database.dispose()


@pytest.fixture
def context(app):
    return app.state.context


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app.

    Redirects are NOT followed, so tests can assert on 307 + Location.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Data Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def registered_user(context):
    """A user without a profile. Returns id, email and plaintext password."""
    async with context.database.session() as db:
        user = await context.auth_service.register(db, TEST_EMAIL, TEST_PASSWORD)
        user_id = user.id
    return {"id": user_id, "email": TEST_EMAIL, "password": TEST_PASSWORD}


@pytest.fixture
def profile_data() -> dict:
    return {
        "age": 42,
        "gender": "female",
        "height_cm": 168.5,
        "starting_weight_kg": 95.4,
        "goal_weight_kg": 75.0,
        "treatment_start_date": date(2024, 1, 8).isoformat(),
        "preferred_injection_day": 1,
        "reminder_days_before": 1,
    }


@pytest_asyncio.fixture
async def onboarded_user(context, registered_user, profile_data):
    """registered_user who has completed onboarding."""
    async with context.database.session() as db:
        await context.profiles.create(
            db, registered_user["id"], ProfileCreate(**profile_data)
        )
    return registered_user


@pytest.fixture
def issue_token(context):
    """Mint a valid session token for any (user_id, email)."""

    def _issue(user_id, email=TEST_EMAIL) -> str:
        return context.token_codec.issue(SessionIdentity(user_id=user_id, email=email))

    return _issue


@pytest.fixture
def session_token(issue_token, registered_user) -> str:
    return issue_token(registered_user["id"], registered_user["email"])


@pytest.fixture
def cookie_name(test_settings) -> str:
    return test_settings.session_cookie_name


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Helpers
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_user(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
            result = await UserService().get_by_id(mock_db_session, user_id)
    """
    session = AsyncMock()
    # Result objects are synchronous (scalar_one_or_none, first, rowcount)
    session.execute = AsyncMock(return_value=MagicMock())
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def auth_headers(cookie_name, session_token) -> dict:
    """Cookie header carrying registered_user's session."""
    return {"Cookie": f"{cookie_name}={session_token}"}
