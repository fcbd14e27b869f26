"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
The environment is pinned before anything from the app is imported, since
the FastAPI app and its settings are built at import time.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from datetime import datetime, timezone, timedelta
from typing import Optional

import jwt  # PyJWT
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api import app
from api.dependencies import reset_container
from api.middleware.rate_limit import get_rate_limiter
from modules.auth.passwords import CredentialHasher
from modules.auth.tokens import issue_access_token
from shared.config import get_settings
from shared.database import init_db
from shared.models import AuthenticatedUser, SubscriptionSnapshot, UserRole


TEST_PASSWORD = "Str0ng!Pass"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    role: str = "free",
    expired: bool = False,
    secret: Optional[str] = None,
) -> str:
    """
    Create a test access token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        role: Role claim
        expired: If True, creates an expired token
        secret: Signing secret, defaults to the configured access secret

    Returns:
        JWT token string
    """
    settings = get_settings()
    if not expired and secret is None:
        return issue_access_token(user_id, email, role, settings)

    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(minutes=15)
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": int(exp.timestamp()),
        "iat": int((exp - timedelta(minutes=15)).timestamp()),
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm="HS256")


def make_user(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    role: UserRole = UserRole.FREE,
    created_at: Optional[datetime] = None,
    subscription: Optional[SubscriptionSnapshot] = None,
) -> AuthenticatedUser:
    """Build an AuthenticatedUser without touching the database."""
    return AuthenticatedUser(
        id=user_id,
        email=email,
        name="Test User",
        role=role,
        email_verified=False,
        created_at=created_at or datetime.now(timezone.utc),
        subscription=subscription,
    )


@pytest.fixture(autouse=True)
def reset_app_state():
    """Reset the service container, rate limiter and overrides around each test."""
    reset_container()
    get_rate_limiter().reset()
    app.dependency_overrides.clear()
    yield
    reset_container()
    get_rate_limiter().reset()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory SQLite database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture(scope="session")
def hasher() -> CredentialHasher:
    """Cheap bcrypt cost for tests."""
    return CredentialHasher(rounds=4)


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid access token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
