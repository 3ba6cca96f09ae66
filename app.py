# --- Entry point for the ZeroSpoil backend ---
import logging
from dotenv import load_dotenv

# Import FastAPI components
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

# Import configuration
from zerospoil import __version__
from zerospoil.config.settings import get_settings

# Import API routers
from zerospoil.api.routers import (
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

# Import middleware and error handling
from zerospoil.middleware.rate_limit import RateLimitMiddleware
from zerospoil.services.auth_service import get_auth_service
from zerospoil.utils.error_handler import register_exception_handlers

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("app")

# Quieter client libraries
logging.getLogger("google").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)

# Load environment variables
load_dotenv()


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware and routers."""
    settings = get_settings()
    logger.info(f"Loaded {settings}")

    app = FastAPI(
        title="ZeroSpoil",
        description="Smart food waste management dashboard",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json"
    )

    # Add rate limiting middleware for the auth endpoints
    app.add_middleware(RateLimitMiddleware, requests_per_minute=settings.rate_limit_per_minute)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add session middleware
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        max_age=settings.session_max_age,
        same_site="lax"
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router, tags=["Health Check"])
    app.include_router(pages_router, tags=["Pages"])
    app.include_router(auth_router, prefix="/api", tags=["Auth"])
    app.include_router(profile_router, prefix="/api", tags=["Profile"])
    app.include_router(analytics_router, prefix="/api", tags=["Analytics"])
    app.include_router(waste_logs_router, prefix="/api", tags=["Waste Logs"])
    app.include_router(food_items_router, prefix="/api", tags=["Food Items"])
    app.include_router(donations_router, prefix="/api", tags=["Donations"])
    app.include_router(theme_router, prefix="/api", tags=["Theme"])

    @app.on_event("shutdown")
    async def shutdown_event():
        """Clean up on shutdown."""
        await get_auth_service().close()
        logger.info("Application shutdown")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("app:app", host=settings.host, port=settings.port, reload=settings.reload)
