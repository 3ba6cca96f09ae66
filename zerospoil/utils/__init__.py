"""
Utility functions for the application.
"""

from .error_handler import (
    AppError,
    UnauthorizedError,
    ValidationError,
    error_response,
    handle_error,
    register_exception_handlers,
    format_error_response,
    log_exception
)

__all__ = [
    'AppError',
    'UnauthorizedError',
    'ValidationError',
    'error_response',
    'handle_error',
    'register_exception_handlers',
    'format_error_response',
    'log_exception'
]
