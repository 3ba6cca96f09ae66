import logging
from fastapi import APIRouter, Depends, Request
from typing import Dict, Any, Type, TypeVar
from pydantic import BaseModel, ValidationError as PydanticValidationError

from zerospoil.api.dependencies import clear_session, store_session
from zerospoil.models.schemas import SigninRequest, SignupRequest, UserProfile
from zerospoil.services.auth_service import FirebaseAuthService, get_auth_service
from zerospoil.services.firestore_service import FirestoreService, get_firestore_service
from zerospoil.utils.error_handler import AppError, ValidationError, handle_error, log_exception

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/auth")

Credentials = TypeVar("Credentials", bound=BaseModel)

async def _read_credentials(request: Request, model: Type[Credentials]) -> Credentials:
    """Parse the JSON body; a malformed body counts as missing credentials."""
    try:
        body = model(**await request.json())
    except (PydanticValidationError, TypeError) as e:
        raise ValidationError("Email and password are required") from e
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")
    return body

def default_profile(user: Dict[str, Any], full_name: str) -> Dict[str, Any]:
    """Profile row written for a freshly created account."""
    return UserProfile(id=user["id"], email=user.get("email"), full_name=full_name).model_dump()

@router.post("/signup")
@handle_error
async def signup(
    request: Request,
    auth: FirebaseAuthService = Depends(get_auth_service),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """
    Create an account and its profile row.

    The profile insert is best effort: when it fails the error is logged and
    the signup is still reported as successful.
    """
    body = await _read_credentials(request, SignupRequest)

    full_name = body.full_name or ""
    result = await auth.sign_up(body.email, body.password, full_name)
    if not result.user:
        raise AppError("Failed to create user", status_code=500)

    try:
        firestore.create_user_profile(default_profile(result.user, full_name))
    except Exception as e:
        log_exception(e, f"profile creation for user {result.user['id']}")

    store_session(request, result.user, result.session)
    return {
        "data": {"user": result.user, "session": result.session},
        "message": "Account created successfully" if result.session
        else "Please check your email to confirm your account",
    }

@router.post("/signin")
@handle_error
async def signin(request: Request, auth: FirebaseAuthService = Depends(get_auth_service)) -> Dict[str, Any]:
    """Sign in with email and password and start a session."""
    body = await _read_credentials(request, SigninRequest)

    result = await auth.sign_in(body.email, body.password)
    store_session(request, result.user, result.session)
    return {
        "data": {"user": result.user, "session": result.session},
        "message": "Signed in successfully",
    }

@router.post("/signout")
@handle_error
async def signout(request: Request) -> Dict[str, str]:
    clear_session(request)
    return {"message": "Signed out successfully"}
