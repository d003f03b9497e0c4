"""
Application exceptions and error handlers.

Taxonomy:
- PreconditionError: input rejected before any network call
- NotRegisteredError: caller identity has no registration record
- TransactionPendingError: another ledger mutation is still in flight
- WriteRejectedError: a submitted transaction was declined, reverted or never confirmed
- SessionUnavailableError: no chain connection, wrong network or no account

Read-path failures are degraded inside the services and never reach these handlers.
"""

import logging
from typing import Any, Dict

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class PreconditionError(AppException):
    """Raised when input is invalid. No network call has been made."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PRECONDITION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class NotRegisteredError(AppException):
    """Raised when the acting identity is not registered on the ledger."""

    def __init__(self, address: str | None = None):
        super().__init__(
            message="Account is not registered",
            error_code="ERR_NOT_REGISTERED",
            status_code=status.HTTP_403_FORBIDDEN,
            details={"address": address}
        )


class TransactionPendingError(AppException):
    """Raised when a mutation is attempted while another is still outstanding."""

    def __init__(self):
        super().__init__(
            message="Another transaction is still pending",
            error_code="ERR_TX_PENDING",
            status_code=status.HTTP_409_CONFLICT
        )


class WriteRejectedError(AppException):
    """Raised when a transaction is declined, reverts or is never confirmed."""

    def __init__(self, message: str, tx_hash: str | None = None):
        super().__init__(
            message=message,
            error_code="ERR_WRITE_REJECTED",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"tx_hash": tx_hash}
        )
        self.tx_hash = tx_hash


class SessionUnavailableError(AppException):
    """Raised when there is no usable chain session."""

    def __init__(self, message: str = "No ledger connection, check the wallet and network"):
        super().__init__(
            message=message,
            error_code="ERR_SESSION_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        500: "ERR_INTERNAL_SERVER"
    }

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code_map.get(exc.status_code, "ERR_UNKNOWN"),
            "message": exc.detail,
            "details": {}
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request body validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": jsonable_errors(exc)
            }
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raw exception object
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]
