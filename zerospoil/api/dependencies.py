"""
Request-scoped dependencies shared by the routers.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from zerospoil.services.auth_service import FirebaseAuthService, get_auth_service
from zerospoil.utils.error_handler import UnauthorizedError

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "access_token"
SESSION_USER_KEY = "user"


def store_session(request: Request, user: Dict[str, Any], session: Optional[Dict[str, Any]]) -> None:
    """Remember a signed-in user in the session cookie."""
    if not session:
        return
    request.session[SESSION_TOKEN_KEY] = session["access_token"]
    request.session[SESSION_USER_KEY] = user


def clear_session(request: Request) -> None:
    request.session.pop(SESSION_TOKEN_KEY, None)
    request.session.pop(SESSION_USER_KEY, None)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return None


async def get_optional_user(
    request: Request,
    auth: FirebaseAuthService = Depends(get_auth_service),
) -> Optional[Dict[str, Any]]:
    """
    Resolve the signed-in user from a bearer token or the session cookie.

    The token is checked with the auth provider on every request; a rejected
    session token is dropped from the cookie.
    """
    token = _bearer_token(request)
    from_session = token is None
    if from_session:
        token = request.session.get(SESSION_TOKEN_KEY)
    if not token:
        return None

    user = await auth.get_user(token)
    if user is None and from_session:
        logger.info("Clearing session with rejected token")
        clear_session(request)
    return user


async def get_current_user(user: Optional[Dict[str, Any]] = Depends(get_optional_user)) -> Dict[str, Any]:
    if user is None:
        raise UnauthorizedError()
    return user
