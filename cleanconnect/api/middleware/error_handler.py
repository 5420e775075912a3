"""Error handling middleware and exception handlers."""

import logging

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cleanconnect.errors import MarketplaceError
from cleanconnect.services.notifier import NotificationError

logger = structlog.get_logger(__name__)

HTTP_ERROR_TYPES = {
    400: "bad_request",
    401: "authentication_failed",
    403: "access_denied",
    404: "not_found",
    405: "method_not_allowed",
    429: "rate_limit_exceeded",
    503: "service_unavailable",
}


class ErrorResponse:
    """Standardized error response format."""

    @staticmethod
    def create(
        error_type: str,
        message: str,
        details: str | dict | list | None = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: dict | None = None,
    ) -> JSONResponse:
        """Create error response.

        The message is repeated at the top level, where existing web
        clients read it.

        Args:
            error_type: Error type identifier
            message: Human-readable error message
            details: Additional error details
            status_code: HTTP status code
            headers: Extra response headers

        Returns:
            JSONResponse with error information
        """
        content = {
            "message": message,
            "error": {
                "type": error_type,
                "message": message,
            },
        }

        if details:
            content["error"]["details"] = details

        return JSONResponse(
            status_code=status_code,
            content=content,
            headers=headers,
        )


async def marketplace_exception_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """Handle domain errors raised by the service layer."""
    logger.info(
        "request_rejected",
        path=request.url.path,
        error_type=exc.error_type,
        message=exc.message,
    )

    return ErrorResponse.create(
        error_type=exc.error_type,
        message=exc.message,
        details=exc.details,
        status_code=exc.status_code,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTPException raised by dependencies and routing."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return ErrorResponse.create(
        error_type=HTTP_ERROR_TYPES.get(exc.status_code, "http_error"),
        message=message,
        details=None if isinstance(exc.detail, str) else exc.detail,
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body and parameter validation errors.

    Args:
        request: FastAPI request
        exc: Validation error

    Returns:
        JSON error response
    """
    logger.warning("request_validation_failed", path=request.url.path, errors=len(exc.errors()))

    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return ErrorResponse.create(
        error_type="validation_error",
        message="Request validation failed",
        details=errors,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


async def notification_exception_handler(request: Request, exc: NotificationError) -> JSONResponse:
    """Handle email delivery failures that abort a request."""
    logger.error("notification_failed", path=request.url.path, error=str(exc))

    return ErrorResponse.create(
        error_type="notification_failed",
        message="Email could not be sent. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Args:
        request: FastAPI request
        exc: Any exception

    Returns:
        JSON error response
    """
    logger.error("unexpected_error", path=request.url.path, error=str(exc), exc_info=exc)

    return ErrorResponse.create(
        error_type="internal_error",
        message="An unexpected error occurred. Please try again later.",
        details=str(exc) if logging.getLogger().isEnabledFor(logging.DEBUG) else None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
