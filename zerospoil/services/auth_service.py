"""
Firebase Authentication client.

Talks to the Identity Toolkit REST API with aiohttp. Accounts, passwords and
tokens are owned by Firebase; this module only shapes requests and turns
provider error codes into messages a user can read.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from zerospoil.config.settings import get_settings
from zerospoil.models.schemas import AuthResult
from zerospoil.utils.error_handler import AppError

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

SERVICE_UNAVAILABLE_MESSAGE = "Authentication service unavailable"

# Firebase error codes and the message surfaced to the client
ERROR_MESSAGES = {
    "EMAIL_EXISTS": "User already registered",
    "INVALID_EMAIL": "Invalid email address",
    "MISSING_PASSWORD": "Password is required",
    "EMAIL_NOT_FOUND": "Invalid login credentials",
    "INVALID_PASSWORD": "Invalid login credentials",
    "INVALID_LOGIN_CREDENTIALS": "Invalid login credentials",
    "USER_DISABLED": "User account is disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later",
    "INVALID_ID_TOKEN": "Session expired. Please sign in again",
    "TOKEN_EXPIRED": "Session expired. Please sign in again",
    "USER_NOT_FOUND": "User not found",
}


class AuthServiceError(AppError):
    """An error reported by the auth provider, safe to show to the user."""

    def __init__(self, message: str, status_code: int = 400, code: Optional[str] = None):
        super().__init__(message, status_code=status_code, details={"code": code} if code else None)
        self.code = code


def describe_auth_error(raw_message: str) -> str:
    """
    Turn a Firebase error message into readable text.

    Firebase sends either a bare code ("EMAIL_EXISTS") or a code followed by
    a description ("WEAK_PASSWORD : Password should be at least 6 characters").
    """
    code, _, detail = raw_message.partition(":")
    code = code.strip()
    if code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]
    if detail.strip():
        return detail.strip()
    return code.replace("_", " ").capitalize() if code else "Authentication failed"


def _build_user(payload: Dict[str, Any], full_name: Optional[str] = None) -> Dict[str, Any]:
    display_name = payload.get("displayName")
    if display_name is None:
        display_name = full_name or ""
    return {
        "id": payload.get("localId"),
        "email": payload.get("email"),
        "email_verified": payload.get("emailVerified", False),
        "user_metadata": {
            "full_name": display_name,
            "avatar_url": payload.get("photoUrl", ""),
        },
    }


def _build_session(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not payload.get("idToken"):
        return None
    return {
        "access_token": payload["idToken"],
        "refresh_token": payload.get("refreshToken"),
        "expires_in": int(payload.get("expiresIn", 3600)),
        "token_type": "bearer",
    }


class FirebaseAuthService:
    """
    Account operations against Firebase Authentication.

    The aiohttp session is created on first use and must be released with
    `close()`.
    """

    def __init__(self, api_key: Optional[str], base_url: str = IDENTITY_TOOLKIT_URL):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None
        if not api_key:
            logger.warning("Firebase auth not configured (missing api key)")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def get_session(self) -> aiohttp.ClientSession:
        """
        Get or create an aiohttp ClientSession.

        Returns:
            A ClientSession for making HTTP requests.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close resources."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _post(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise AuthServiceError("Authentication is not configured", status_code=503)

        session = await self.get_session()
        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            async with session.post(url, params={"key": self.api_key}, json=body) as response:
                payload = await response.json(content_type=None)
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Firebase auth {endpoint} unreachable: {e}")
            raise AuthServiceError(SERVICE_UNAVAILABLE_MESSAGE, status_code=503) from e

        if not isinstance(payload, dict):
            payload = {}
        if status >= 400:
            raw = (payload.get("error") or {}).get("message", "")
            logger.warning(f"Firebase auth {endpoint} failed with status {status}: {raw}")
            raise AuthServiceError(describe_auth_error(raw), status_code=503 if status >= 500 else 400,
                                   code=raw.partition(":")[0].strip() or None)
        return payload

    async def sign_up(self, email: str, password: str, full_name: str = "") -> AuthResult:
        """Create an account and return the new user with its session."""
        logger.info(f"Signing up {email}")
        payload = await self._post("signUp", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        if full_name and payload.get("idToken"):
            # Display name is set in a second call; a failure here leaves the account usable
            try:
                await self._post("update", {
                    "idToken": payload["idToken"],
                    "displayName": full_name,
                    "returnSecureToken": False,
                })
            except AuthServiceError as e:
                logger.warning(f"Could not set display name for {email}: {e.message}")
        user = _build_user(payload, full_name) if payload.get("localId") else None
        return AuthResult(user=user, session=_build_session(payload))

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Exchange an email and password for a session."""
        logger.info(f"Signing in {email}")
        payload = await self._post("signInWithPassword", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        return AuthResult(user=_build_user(payload), session=_build_session(payload))

    async def get_user(self, id_token: str) -> Optional[Dict[str, Any]]:
        """
        Resolve the user behind an id token, or None when it is no longer valid.

        Provider outages (5xx) are raised rather than treated as a signed-out user.
        """
        if not self.is_configured:
            return None
        try:
            payload = await self._post("lookup", {"idToken": id_token})
        except AuthServiceError as e:
            if e.status_code >= 500:
                raise
            logger.info(f"Token lookup rejected: {e.message}")
            return None
        users = payload.get("users") or []
        return _build_user(users[0]) if users else None


_auth_service: Optional[FirebaseAuthService] = None


def get_auth_service() -> FirebaseAuthService:
    """FastAPI dependency returning the shared auth service."""
    global _auth_service
    if _auth_service is None:
        _auth_service = FirebaseAuthService(get_settings().firebase_api_key)
    return _auth_service
