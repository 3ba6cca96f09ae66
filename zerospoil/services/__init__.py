"""
Service layer for business logic.
"""

from .auth_service import FirebaseAuthService, AuthServiceError, get_auth_service
from .firestore_service import FirestoreService, FirestoreServiceError, get_firestore_service
from .analytics_service import compute_analytics, compute_waste_reduction, compute_category_insights

__all__ = [
    'FirebaseAuthService', 'AuthServiceError', 'get_auth_service',
    'FirestoreService', 'FirestoreServiceError', 'get_firestore_service',
    'compute_analytics', 'compute_waste_reduction', 'compute_category_insights'
]
