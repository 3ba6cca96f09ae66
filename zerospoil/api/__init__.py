"""
API package for the application.
"""

from .routers import (
    auth_router,
    profile_router,
    analytics_router,
    waste_logs_router,
    food_items_router,
    donations_router,
    theme_router,
    pages_router,
    health_router
)

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
