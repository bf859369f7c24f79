"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Optional
import logging

from .config import settings

logger = logging.getLogger(__name__)

class StorefrontException(HTTPException):
    """Base exception class for the storefront application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(StorefrontException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(StorefrontException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenException(StorefrontException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )

class NotFoundException(StorefrontException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class EmptyCartException(BadRequestException):
    """Checkout attempted with nothing in the cart"""

    def __init__(self, detail: str = "Cart is empty"):
        super().__init__(detail=detail, error_code="EMPTY_CART")

class ProductUnavailableException(BadRequestException):
    """Product missing or deactivated"""

    def __init__(self, product_name: Optional[str] = None):
        super().__init__(
            detail=f"Product {product_name or 'Unknown'} is no longer available",
            error_code="PRODUCT_UNAVAILABLE"
        )

class InsufficientStockException(BadRequestException):
    """Product stock insufficient"""

    def __init__(self, product_name: str, available: int):
        super().__init__(
            detail=f"Only {available} items available for {product_name}",
            error_code="INSUFFICIENT_STOCK"
        )

class OrderNotFoundException(NotFoundException):
    """Order missing, or owned by someone else"""

    def __init__(self):
        super().__init__(detail="Order not found", error_code="ORDER_NOT_FOUND")

class TransitionNotAllowedException(BadRequestException):
    """Order cannot move to the requested status"""

    def __init__(self, detail: str = "Order cannot be updated in current status"):
        super().__init__(detail=detail, error_code="TRANSITION_NOT_ALLOWED")

def _error_body(message: str, code: Optional[str] = None, **extra) -> Dict[str, Any]:
    body = {"message": message}
    if code:
        body["code"] = code
    body.update(extra)
    return body

async def storefront_exception_handler(request: Request, exc: StorefrontException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, exc.error_code),
        headers=exc.headers
    )

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 with per-field messages"""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({
            "field": ".".join(location),
            "message": error.get("msg", "Invalid value")
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation failed", "VALIDATION_ERROR", errors=errors)
    )

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        extra={"request_id": getattr(request.state, "request_id", None)}
    )

    # Don't expose internal errors in production
    detail = str(exc) if settings.DEBUG else "Server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(detail, "INTERNAL_ERROR")
    )

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to the application"""
    app.add_exception_handler(StorefrontException, storefront_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
