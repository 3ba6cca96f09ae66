import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from app import create_app
from zerospoil.api.dependencies import get_optional_user
from zerospoil.models.schemas import AuthResult
from zerospoil.services.auth_service import FirebaseAuthService, get_auth_service
from zerospoil.services.firestore_service import FirestoreService, get_firestore_service

TEST_USER = {
    "id": "user-123",
    "email": "sam@example.com",
    "email_verified": False,
    "user_metadata": {"full_name": "Sam Green", "avatar_url": ""},
}

TEST_SESSION = {
    "access_token": "id-token",
    "refresh_token": "refresh-token",
    "expires_in": 3600,
    "token_type": "bearer",
}


@pytest.fixture
def mock_auth():
    """Auth service double; signup and signin succeed by default."""
    auth = MagicMock(spec=FirebaseAuthService)
    auth.is_configured = True
    auth.sign_up = AsyncMock(return_value=AuthResult(user=TEST_USER, session=TEST_SESSION))
    auth.sign_in = AsyncMock(return_value=AuthResult(user=TEST_USER, session=TEST_SESSION))
    auth.get_user = AsyncMock(return_value=TEST_USER)
    auth.close = AsyncMock()
    return auth


@pytest.fixture
def mock_firestore():
    firestore = MagicMock(spec=FirestoreService)
    firestore.is_initialized = True
    firestore.list_food_items.return_value = []
    firestore.list_waste_logs.return_value = []
    firestore.list_completed_donations.return_value = []
    return firestore


@pytest.fixture
def app(mock_auth, mock_firestore):
    application = create_app()
    application.dependency_overrides[get_auth_service] = lambda: mock_auth
    application.dependency_overrides[get_firestore_service] = lambda: mock_firestore
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signed_in(app):
    """Treat every request as coming from TEST_USER."""
    app.dependency_overrides[get_optional_user] = lambda: TEST_USER
    return TEST_USER


@pytest.fixture
def signed_out(app):
    app.dependency_overrides[get_optional_user] = lambda: None
