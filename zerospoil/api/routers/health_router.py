import logging
from fastapi import APIRouter, Depends
from typing import Dict, Any

from zerospoil import __version__
from zerospoil.services.auth_service import FirebaseAuthService, get_auth_service
from zerospoil.services.firestore_service import FirestoreService, get_firestore_service

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

@router.get("/health")
async def health_check(
    auth: FirebaseAuthService = Depends(get_auth_service),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> Dict[str, Any]:
    """
    Health check endpoint that reports on the status of services.

    Returns:
        JSON with status information
    """
    status = "ok"
    diagnostics = {
        "auth_configured": auth.is_configured,
        "firestore_initialized": firestore.is_initialized,
        "version": __version__,
    }

    # Check if services are healthy
    if not auth.is_configured or not firestore.is_initialized:
        status = "degraded"
        logger.warning(f"Health check status: {status}. Diagnostics: {diagnostics}")
    else:
        logger.info(f"Health check status: {status}")

    return {"status": status, "diagnostics": diagnostics}
