"""
Domain exceptions and their HTTP shape.

SECURITY PRINCIPLE: Don't expose internal details to users.
Use generic error messages externally, detailed logging internally.

Every error leaves the API as JSON: {"success": false, "message": "..."}.
Status codes are part of the client contract:
- 401 AuthenticationError (missing / invalid bearer token)
- 400 AuthorizationError, ValidationError, BusinessRuleError
- 404 NotFoundError
- 500 PersistenceError and anything unexpected
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class. `message` is always safe to show to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred. Please try again later."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required or token invalid."


class AuthorizationError(DomainError):
    """
    Caller is authenticated but does not own the store.

    SECURITY: Same message whether the store doesn't exist or belongs to
    someone else. 400 (not 403) is the established client contract.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Store verification failed or access denied."


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request payload structure or missing required fields."


class BusinessRuleError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request violates a business rule."


class InsufficientStockError(BusinessRuleError):
    def __init__(self, medicine_name: str, available: int, requested: int):
        self.medicine_name = medicine_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for '{medicine_name}': "
            f"{available} available, {requested} requested."
        )


class InventoryNotFoundError(BusinessRuleError):
    def __init__(self, inventory_id: str):
        self.inventory_id = inventory_id
        super().__init__(f"Inventory item {inventory_id} not found in this store.")


class NotFoundError(DomainError):
    """Generic 404 that doesn't confirm resource existence."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class PersistenceError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None, original_error: Optional[Exception] = None):
        if original_error is not None:
            logger.error(
                f"Persistence failure: {type(original_error).__name__}: {original_error}",
                exc_info=original_error,
            )
        super().__init__(message)


def describe_validation_error(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one line: 'items: List should have at least 1 item'."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    detail = "; ".join(parts)
    return f"{ValidationError.default_message} {detail}".strip()


def error_response(exc: DomainError, **extras: Any) -> JSONResponse:
    body = {"success": False, "message": exc.message}
    body.update(extras)
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error(f"Request failed: {exc.message}")
    else:
        logger.info(f"Request rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ValidationError(describe_validation_error(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
