import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from typing import Dict, Any
from pydantic import ValidationError as PydanticValidationError

from zerospoil.api.dependencies import get_current_user
from zerospoil.models.schemas import DonationCreate, DonationFilters, DonationUpdate
from zerospoil.services.firestore_service import FirestoreService, get_firestore_service
from zerospoil.utils.error_handler import AppError, ValidationError, handle_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/donations")

def _not_found() -> AppError:
    return AppError("Donation not found", status_code=404)

@router.get("")
@handle_error
async def list_donations(
    filters: DonationFilters = Depends(),
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """List the user's donations, latest scheduled date first; status "all" disables the filter."""
    return {"data": firestore.list_donations(user["id"], filters.status)}

@router.post("")
@handle_error
async def create_donation(
    request: Request,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> JSONResponse:
    """Schedule a donation of one or more items at a drop-off location."""
    body = await request.json()
    if not isinstance(body, dict) or not body.get("location_id") or not body.get("scheduled_date") \
            or not body.get("items"):
        raise ValidationError("Missing required fields")
    try:
        donation = DonationCreate(**body)
    except PydanticValidationError as e:
        raise ValidationError("Invalid donation", details={"errors": e.errors(include_url=False)}) from e

    record = firestore.create_donation(user["id"], donation.model_dump(mode="json"))
    logger.info(f"Donation {record['id']} scheduled for {record['scheduled_date']}")
    return JSONResponse(status_code=201, content={"data": record})

@router.get("/{donation_id}")
@handle_error
async def get_donation(
    donation_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    donation = firestore.get_donation(user["id"], donation_id)
    if donation is None:
        raise _not_found()
    return {"data": donation}

@router.put("/{donation_id}")
@handle_error
async def update_donation(
    donation_id: str,
    updates: DonationUpdate,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """Update a donation, e.g. mark it completed or cancelled."""
    donation = firestore.update_donation(
        user["id"], donation_id, updates.model_dump(mode="json", exclude_unset=True)
    )
    if donation is None:
        raise _not_found()
    return {"data": donation}

@router.delete("/{donation_id}")
@handle_error
async def delete_donation(
    donation_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, str]:
    if not firestore.delete_donation(user["id"], donation_id):
        raise _not_found()
    return {"message": "Donation deleted successfully"}
