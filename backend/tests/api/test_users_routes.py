"""Tests for /api/users endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api import app
from api.dependencies import get_user_service
from api.middleware.auth import require_auth
from modules.users.exceptions import UserNotFoundError
from modules.users.models import UserProfile
from tests.conftest import make_user

PROFILE = UserProfile(id="test-user-123", email="test@example.com", name="Ada")


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def authenticated():
    app.dependency_overrides[require_auth] = lambda: make_user()


@pytest.fixture
def mock_user_service():
    service = MagicMock()
    service.get_profile = AsyncMock(return_value=PROFILE)
    service.update_profile = AsyncMock(return_value=PROFILE)
    app.dependency_overrides[get_user_service] = lambda: service
    return service


class TestProfileEndpoints:
    def test_requires_authentication(self, client, mock_user_service):
        assert client.get("/api/users/profile").status_code == 401

    def test_get_profile(self, client, authenticated, mock_user_service):
        response = client.get("/api/users/profile")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "test-user-123"
        assert data["avatarUrl"] is None
        mock_user_service.get_profile.assert_awaited_once_with("test-user-123")

    def test_profile_not_found(self, client, authenticated, mock_user_service):
        mock_user_service.get_profile.side_effect = UserNotFoundError("test-user-123")
        response = client.get("/api/users/profile")
        assert response.status_code == 404
        assert response.json()["error"] == "USER_NOT_FOUND"

    def test_update_profile(self, client, authenticated, mock_user_service):
        response = client.patch(
            "/api/users/profile", json={"avatarUrl": "https://cdn.example.com/a.png"}
        )
        assert response.status_code == 200
        user_id, data = mock_user_service.update_profile.call_args.args
        assert user_id == "test-user-123"
        assert data.changes() == {"avatar_url": "https://cdn.example.com/a.png"}

    def test_update_profile_null_name(self, client, authenticated, mock_user_service):
        response = client.patch("/api/users/profile", json={"name": None})
        assert response.status_code == 400
        assert response.json()["message"] == "Name cannot be null"
