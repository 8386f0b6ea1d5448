"""
Global exception handling for the application.
Standardizes error responses using Problem Details for HTTP APIs (RFC 7807).
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppError):
    """Client-side validation failure, raised before any store call."""
    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class BusinessRuleViolationException(AppError):
    """Business logic violation error."""
    def __init__(
        self,
        message: str = "Business rule violation",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
    ):
        super().__init__(message, status_code, details)


class InvalidQuantityException(BusinessRuleViolationException):
    """Requested or target quantity is out of range."""
    def __init__(self, message: str = "Invalid quantity", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InsufficientStockException(BusinessRuleViolationException):
    """Sale quantity exceeds the stock on hand."""
    def __init__(self, message: str = "Insufficient stock", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, status.HTTP_409_CONFLICT)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class DuplicateRegistrationException(AppError):
    """Sign-up with an email that already has an account."""
    def __init__(self, message: str = "User already registered", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class StoreException(AppError):
    """The database rejected or failed a read/write."""
    def __init__(
        self,
        message: str = "Data store failure",
        details: Optional[Dict[str, Any]] = None,
        retryable: bool = True,
    ):
        details = {**(details or {}), "retryable": retryable}
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE, details)
        self.retryable = retryable


class InconsistentStateException(AppError):
    """A multi-record write could not be completed nor undone."""
    def __init__(self, message: str = "Inconsistent state", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.__class__.__name__,
                    "message": exc.message,
                    "details": exc.details,
                    "path": request.url.path,
                }
            },
        )

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "InternalServerError",
                "message": "An unexpected error occurred. Please try again later.",
                "path": request.url.path,
            }
        },
    )
