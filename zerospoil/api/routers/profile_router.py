import logging
from fastapi import APIRouter, Depends
from typing import Dict, Any

from zerospoil.api.dependencies import get_current_user
from zerospoil.models.schemas import ProfileUpdate, UserProfile
from zerospoil.services.firestore_service import FirestoreService, FirestoreServiceError, get_firestore_service
from zerospoil.utils.error_handler import handle_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

@router.get("/profile")
@handle_error
async def get_profile(
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """
    Get the signed-in user's profile, creating it on first access.

    Accounts whose profile insert failed during signup get their row here.
    """
    profile = firestore.get_user_profile(user["id"])
    if profile:
        return {"data": profile}

    metadata = user.get("user_metadata") or {}
    new_profile = UserProfile(
        id=user["id"],
        email=user.get("email"),
        full_name=metadata.get("full_name") or "",
        avatar_url=metadata.get("avatar_url") or "",
    ).model_dump()
    try:
        firestore.create_user_profile(new_profile)
    except Exception as e:
        logger.error(f"Error creating profile: {e}")
        raise FirestoreServiceError("Failed to create profile") from e
    return {"data": new_profile}

@router.put("/profile")
@handle_error
async def update_profile(
    updates: ProfileUpdate,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """Upsert the profile; omitted preference fields are reset to their defaults."""
    provided = updates.model_dump(exclude_none=True)
    profile = UserProfile(id=user["id"], email=user.get("email"), **provided).model_dump()
    # Name and avatar keep their stored value when not sent
    for field in ("full_name", "avatar_url"):
        if field not in provided:
            profile.pop(field)
    return {"data": firestore.upsert_user_profile(user["id"], profile)}
