import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from typing import Dict, Any
from pydantic import ValidationError as PydanticValidationError

from zerospoil.api.dependencies import get_current_user
from zerospoil.models.schemas import FoodItemCreate, FoodItemFilters, FoodItemUpdate
from zerospoil.services.firestore_service import FirestoreService, get_firestore_service
from zerospoil.utils.error_handler import AppError, ValidationError, handle_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/food-items")

REQUIRED_FIELDS = ("name", "category", "purchase_date", "storage_location", "quantity", "unit")

def _not_found() -> AppError:
    return AppError("Food item not found", status_code=404)

@router.get("")
@handle_error
async def list_food_items(
    filters: FoodItemFilters = Depends(),
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """
    List the user's pantry, most recently added first.

    Args:
        filters: Optional status ("all" for every status), category and storage location
    """
    items = firestore.list_food_items(user["id"], filters.status, filters.category, filters.storage_location)
    return {"data": items}

@router.post("")
@handle_error
async def create_food_item(
    request: Request,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> JSONResponse:
    body = await request.json()
    if not isinstance(body, dict) or any(not body.get(field) for field in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields")
    try:
        food_item = FoodItemCreate(**body)
    except PydanticValidationError as e:
        raise ValidationError("Invalid food item", details={"errors": e.errors(include_url=False)}) from e

    record = firestore.create_food_item(user["id"], food_item.model_dump(mode="json"))
    return JSONResponse(status_code=201, content={"data": record})

@router.get("/{item_id}")
@handle_error
async def get_food_item(
    item_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    item = firestore.get_food_item(user["id"], item_id)
    if item is None:
        raise _not_found()
    return {"data": item}

@router.put("/{item_id}")
@handle_error
async def update_food_item(
    item_id: str,
    updates: FoodItemUpdate,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """Write only the fields present in the body."""
    item = firestore.update_food_item(user["id"], item_id, updates.model_dump(mode="json", exclude_unset=True))
    if item is None:
        raise _not_found()
    return {"data": item}

@router.delete("/{item_id}")
@handle_error
async def delete_food_item(
    item_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, str]:
    if not firestore.delete_food_item(user["id"], item_id):
        raise _not_found()
    return {"message": "Food item deleted successfully"}
