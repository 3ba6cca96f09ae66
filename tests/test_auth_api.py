import pytest
from unittest.mock import AsyncMock

from zerospoil.models.schemas import AuthResult
from zerospoil.services.auth_service import AuthServiceError

from conftest import TEST_SESSION, TEST_USER


@pytest.mark.parametrize("body", [
    {"password": "secret123"},
    {"email": "sam@example.com"},
    {"email": "", "password": "secret123"},
    {},
])
def test_signup_missing_credentials(client, mock_auth, body):
    """Signup without email or password is rejected before reaching the auth provider."""
    response = client.post("/api/auth/signup", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Email and password are required"}
    mock_auth.sign_up.assert_not_called()

@pytest.mark.parametrize("path,body", [
    ("/api/auth/signup", {"email": 123, "password": "secret123"}),
    ("/api/auth/signup", {"email": "sam@example.com", "password": ["secret123"]}),
    ("/api/auth/signup", ["sam@example.com", "secret123"]),
    ("/api/auth/signin", {"email": "sam@example.com", "password": {"value": "secret123"}}),
])
def test_malformed_credentials_are_client_errors(client, mock_auth, path, body):
    response = client.post(path, json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Email and password are required"}
    mock_auth.sign_up.assert_not_called()
    mock_auth.sign_in.assert_not_called()

def test_signup_success_creates_profile(client, mock_auth, mock_firestore):
    response = client.post("/api/auth/signup", json={
        "email": "sam@example.com", "password": "secret123", "full_name": "Sam Green",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Account created successfully"
    assert data["data"]["user"]["id"] == "user-123"
    assert data["data"]["session"]["access_token"] == "id-token"

    mock_auth.sign_up.assert_awaited_once_with("sam@example.com", "secret123", "Sam Green")
    profile = mock_firestore.create_user_profile.call_args.args[0]
    assert profile["id"] == "user-123"
    assert profile["full_name"] == "Sam Green"
    assert profile["measurement_system"] == "metric"
    assert profile["theme"] == "light"
    assert profile["business_account"] is False
    assert profile["dietary_restrictions"] == []
    assert profile["notification_settings"] == {
        "expiration_alerts": True,
        "recipe_suggestions": True,
        "donation_reminders": True,
        "achievement_notifications": True,
        "email_notifications": False,
    }

def test_signup_succeeds_when_profile_insert_fails(client, mock_firestore):
    """A failing profile insert is logged but does not fail the signup."""
    mock_firestore.create_user_profile.side_effect = RuntimeError("permission denied")

    response = client.post("/api/auth/signup", json={"email": "sam@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == "sam@example.com"
    mock_firestore.create_user_profile.assert_called_once()

def test_signup_defaults_full_name(client, mock_auth, mock_firestore):
    client.post("/api/auth/signup", json={"email": "sam@example.com", "password": "secret123"})

    mock_auth.sign_up.assert_awaited_once_with("sam@example.com", "secret123", "")
    assert mock_firestore.create_user_profile.call_args.args[0]["full_name"] == ""

def test_signup_surfaces_provider_error(client, mock_auth, mock_firestore):
    mock_auth.sign_up.side_effect = AuthServiceError("User already registered", code="EMAIL_EXISTS")

    response = client.post("/api/auth/signup", json={"email": "sam@example.com", "password": "secret123"})

    assert response.status_code == 400
    assert response.json() == {"error": "User already registered"}
    mock_firestore.create_user_profile.assert_not_called()

def test_signup_without_user(client, mock_auth):
    mock_auth.sign_up.return_value = AuthResult(user=None, session=None)

    response = client.post("/api/auth/signup", json={"email": "sam@example.com", "password": "secret123"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create user"}

def test_signup_without_session_asks_for_confirmation(client, mock_auth):
    mock_auth.sign_up.return_value = AuthResult(user=TEST_USER, session=None)

    response = client.post("/api/auth/signup", json={"email": "sam@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["message"] == "Please check your email to confirm your account"
    assert response.json()["data"]["session"] is None

def test_signup_unexpected_error(client, mock_auth):
    mock_auth.sign_up.side_effect = ConnectionError("network unreachable")

    response = client.post("/api/auth/signup", json={"email": "sam@example.com", "password": "secret123"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}

def test_signup_invalid_json(client):
    response = client.post("/api/auth/signup", content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}

def test_signup_starts_session(client, mock_auth):
    """After signup the dashboard is reachable with the session cookie alone."""
    client.post("/api/auth/signup", json={"email": "sam@example.com", "password": "secret123"})

    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 200
    mock_auth.get_user.assert_awaited_with(TEST_SESSION["access_token"])

def test_signin(client, mock_auth):
    response = client.post("/api/auth/signin", json={"email": "sam@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["message"] == "Signed in successfully"
    mock_auth.sign_in.assert_awaited_once_with("sam@example.com", "secret123")

def test_signin_bad_credentials(client, mock_auth):
    mock_auth.sign_in.side_effect = AuthServiceError("Invalid login credentials")

    response = client.post("/api/auth/signin", json={"email": "sam@example.com", "password": "nope"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid login credentials"}

def test_signout_clears_session(client, mock_auth):
    client.post("/api/auth/signin", json={"email": "sam@example.com", "password": "secret123"})

    response = client.post("/api/auth/signout")
    assert response.status_code == 200
    assert response.json() == {"message": "Signed out successfully"}

    mock_auth.get_user = AsyncMock(return_value=TEST_USER)
    dashboard = client.get("/dashboard", follow_redirects=False)
    assert dashboard.status_code == 302
    mock_auth.get_user.assert_not_called()
