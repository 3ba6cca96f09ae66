import datetime
import logging
from fastapi import APIRouter, Depends, Query
from typing import Dict, Any

from zerospoil.api.dependencies import get_current_user
from zerospoil.services.analytics_service import (
    compute_analytics,
    compute_category_insights,
    compute_waste_reduction,
    period_start,
)
from zerospoil.services.firestore_service import FirestoreService, get_firestore_service
from zerospoil.utils.error_handler import handle_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/analytics")

@router.get("")
@handle_error
async def get_analytics(
    period: int = Query(30, ge=1, le=3650),
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """
    Dashboard metrics for the last `period` days.

    Food item and donation counts cover everything the user has; waste logs
    are limited to the period.
    """
    today = datetime.date.today()
    food_items = firestore.list_food_items(user["id"])
    waste_logs = firestore.list_waste_logs(user["id"], start_date=period_start(period, today))
    donations = firestore.list_completed_donations(user["id"])
    return {"data": compute_analytics(food_items, waste_logs, donations, today)}

@router.get("/waste-reduction")
@handle_error
async def get_waste_reduction(
    days: int = Query(30, ge=1, le=3650),
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    today = datetime.date.today()
    waste_logs = firestore.list_waste_logs(
        user["id"], start_date=period_start(days, today), end_date=today.isoformat()
    )
    return {"data": compute_waste_reduction(waste_logs, days)}

@router.get("/category-insights")
@handle_error
async def get_category_insights(
    user: Dict[str, Any] = Depends(get_current_user),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    return {"data": compute_category_insights(firestore.list_food_items(user["id"]))}
