import aiohttp
import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from zerospoil.services.auth_service import AuthServiceError, FirebaseAuthService, describe_auth_error

SIGNUP_PAYLOAD = {
    "localId": "user-123",
    "email": "sam@example.com",
    "idToken": "id-token",
    "refreshToken": "refresh-token",
    "expiresIn": "3600",
}


class FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self._payload = payload

    async def json(self, content_type=None):
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


def _service_with_response(status, payload):
    service = FirebaseAuthService("api-key")
    session = MagicMock()
    session.post.return_value = FakeResponse(status, payload)
    service.get_session = AsyncMock(return_value=session)
    return service, session

@pytest.mark.parametrize("raw,expected", [
    ("EMAIL_EXISTS", "User already registered"),
    ("INVALID_LOGIN_CREDENTIALS", "Invalid login credentials"),
    ("WEAK_PASSWORD : Password should be at least 6 characters", "Password should be at least 6 characters"),
    ("OPERATION_NOT_ALLOWED", "Operation not allowed"),
    ("", "Authentication failed"),
])
def test_describe_auth_error(raw, expected):
    assert describe_auth_error(raw) == expected

def test_sign_up_builds_user_and_session():
    service = FirebaseAuthService("api-key")
    service._post = AsyncMock(side_effect=[SIGNUP_PAYLOAD, {}])

    result = asyncio.run(service.sign_up("sam@example.com", "secret123", "Sam Green"))

    assert result.user == {
        "id": "user-123",
        "email": "sam@example.com",
        "email_verified": False,
        "user_metadata": {"full_name": "Sam Green", "avatar_url": ""},
    }
    assert result.session == {
        "access_token": "id-token",
        "refresh_token": "refresh-token",
        "expires_in": 3600,
        "token_type": "bearer",
    }
    endpoints = [call.args[0] for call in service._post.await_args_list]
    assert endpoints == ["signUp", "update"]

def test_sign_up_without_name_skips_profile_update():
    service = FirebaseAuthService("api-key")
    service._post = AsyncMock(return_value=SIGNUP_PAYLOAD)

    asyncio.run(service.sign_up("sam@example.com", "secret123"))

    service._post.assert_awaited_once()

def test_sign_up_survives_display_name_failure():
    service = FirebaseAuthService("api-key")
    service._post = AsyncMock(side_effect=[SIGNUP_PAYLOAD, AuthServiceError("Invalid")])

    result = asyncio.run(service.sign_up("sam@example.com", "secret123", "Sam Green"))

    assert result.user["id"] == "user-123"

def test_post_raises_readable_error():
    service, session = _service_with_response(400, {"error": {"code": 400, "message": "EMAIL_EXISTS"}})

    with pytest.raises(AuthServiceError) as exc_info:
        asyncio.run(service.sign_up("sam@example.com", "secret123"))

    assert exc_info.value.message == "User already registered"
    assert exc_info.value.status_code == 400
    assert exc_info.value.code == "EMAIL_EXISTS"
    url = session.post.call_args.args[0]
    assert url.endswith("/accounts:signUp")
    assert session.post.call_args.kwargs["params"] == {"key": "api-key"}

def test_unconfigured_service_refuses():
    service = FirebaseAuthService(None)

    assert service.is_configured is False
    with pytest.raises(AuthServiceError, match="not configured"):
        asyncio.run(service.sign_in("sam@example.com", "secret123"))

def test_get_user_from_lookup():
    service, _ = _service_with_response(200, {"users": [{"localId": "user-123", "email": "sam@example.com",
                                                         "displayName": "Sam", "emailVerified": True}]})

    user = asyncio.run(service.get_user("id-token"))

    assert user["id"] == "user-123"
    assert user["email_verified"] is True
    assert user["user_metadata"]["full_name"] == "Sam"

def test_get_user_with_rejected_token():
    service, _ = _service_with_response(400, {"error": {"message": "INVALID_ID_TOKEN"}})

    assert asyncio.run(service.get_user("stale-token")) is None

def test_unreachable_provider_is_service_unavailable():
    service = FirebaseAuthService("api-key")
    session = MagicMock()
    session.post.side_effect = aiohttp.ClientConnectionError("connection refused")
    service.get_session = AsyncMock(return_value=session)

    with pytest.raises(AuthServiceError) as exc_info:
        asyncio.run(service.sign_in("sam@example.com", "secret123"))

    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Authentication service unavailable"

def test_non_json_reply_is_service_unavailable():
    service, _ = _service_with_response(200, None)
    response = service.get_session.return_value.post.return_value
    response.json = AsyncMock(side_effect=ValueError("Expecting value"))

    with pytest.raises(AuthServiceError) as exc_info:
        asyncio.run(service.get_user("id-token"))

    assert exc_info.value.status_code == 503

def test_get_user_raises_on_provider_outage():
    service, _ = _service_with_response(503, {"error": {"message": "BACKEND_ERROR"}})

    with pytest.raises(AuthServiceError) as exc_info:
        asyncio.run(service.get_user("id-token"))

    assert exc_info.value.status_code == 503

def test_get_user_without_configuration_is_anonymous():
    assert asyncio.run(FirebaseAuthService(None).get_user("id-token")) is None
