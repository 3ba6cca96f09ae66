"""
API routers for the application.
"""

from .auth_router import router as auth_router
from .profile_router import router as profile_router
from .analytics_router import router as analytics_router
from .waste_logs_router import router as waste_logs_router
from .food_items_router import router as food_items_router
from .donations_router import router as donations_router
from .theme_router import router as theme_router
from .pages_router import router as pages_router
from .health_router import router as health_router

__all__ = [
    'auth_router',
    'profile_router',
    'analytics_router',
    'waste_logs_router',
    'food_items_router',
    'donations_router',
    'theme_router',
    'pages_router',
    'health_router'
]
