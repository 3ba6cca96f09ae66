import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from typing import Dict, Any
from pydantic import ValidationError as PydanticValidationError

from zerospoil.api.dependencies import get_current_user
from zerospoil.models.schemas import WasteLogCreate, WasteLogFilters
from zerospoil.services.firestore_service import FirestoreService, get_firestore_service
from zerospoil.utils.error_handler import ValidationError, handle_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

@router.get("/waste-logs")
@handle_error
async def list_waste_logs(
    filters: WasteLogFilters = Depends(),
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """
    List the user's waste logs, newest first.

    Args:
        filters: action ("all" or empty for every action), plus inclusive
            start_date and end_date (YYYY-MM-DD)
    """
    logs = firestore.list_waste_logs(user["id"], filters.action, filters.start_date, filters.end_date)
    return {"data": logs}

@router.post("/waste-logs")
@handle_error
async def create_waste_log(
    request: Request,
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> JSONResponse:
    body = await request.json()
    if not isinstance(body, dict) or not body.get("action") or not body.get("date"):
        raise ValidationError("Missing required fields")
    try:
        waste_log = WasteLogCreate(**body)
    except PydanticValidationError as e:
        raise ValidationError("Invalid waste log", details={"errors": e.errors(include_url=False)}) from e

    record = firestore.create_waste_log(user["id"], waste_log.model_dump(mode="json"))
    return JSONResponse(status_code=201, content={"data": record})
