import functools
import logging
import traceback
from typing import Dict, Any, Callable, TypeVar, Optional
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

T = TypeVar('T')

INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_REQUEST_MESSAGE = "Invalid request"

class AppError(Exception):
    """Base application error class."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class UnauthorizedError(AppError):
    """Raised when a request carries no valid session."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)

class ValidationError(AppError):
    """Raised when a request body is missing required fields."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)

def error_response(message: str, status_code: int, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    """Build the `{"error": message}` body every route uses for failures."""
    return JSONResponse(status_code=status_code, content=format_error_response(message, details))

def handle_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator for handling errors in API endpoints.

    AppError subclasses become `{"error": message}` responses with their own
    status code; anything else is logged and answered with a generic 500.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that handles errors
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except AppError as e:
            logger.error(f"Application error: {e.message}, status_code: {e.status_code}, details: {e.details}")
            return error_response(e.message, e.status_code)
        except Exception as e:
            logger.exception(f"Unhandled error in {func.__name__}: {str(e)}")
            return error_response(INTERNAL_ERROR_MESSAGE, 500)

    return wrapper

def register_exception_handlers(app: FastAPI) -> None:
    """
    Give failures raised outside a decorated route the same `{"error": ...}` body.

    Request validation failures are answered with 400 instead of FastAPI's
    422. Anything left unhandled becomes a generic 500.
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message} ({exc.status_code})")
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.errors()}")
        return error_response(INVALID_REQUEST_MESSAGE, 400, {"errors": jsonable_encoder(exc.errors())})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error in {request.method} {request.url.path}: {str(exc)}")
        return error_response(INTERNAL_ERROR_MESSAGE, 500)

def format_error_response(message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Format a standardized error body.

    Args:
        message: The error message
        details: Additional error details

    Returns:
        Formatted error body
    """
    body: Dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return body

def log_exception(e: Exception, context: str = "") -> None:
    """
    Log an exception with context and stack trace.

    Args:
        e: The exception to log
        context: Additional context
    """
    if context:
        logger.error(f"Error in {context}: {str(e)}")
    else:
        logger.error(f"Error: {str(e)}")

    logger.error(traceback.format_exc())
