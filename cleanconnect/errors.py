"""Domain exceptions raised by the service layer.

Each exception carries the HTTP status code the API layer maps it to, so
services never import FastAPI.
"""


class MarketplaceError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500
    error_type = "marketplace_error"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(MarketplaceError):
    """Request is well-formed but violates a business rule."""

    status_code = 400
    error_type = "validation_failed"


class Conflict(MarketplaceError):
    """Resource already exists (duplicate email, repeated review, ...)."""

    status_code = 400
    error_type = "conflict"


class AuthenticationFailed(MarketplaceError):
    """Missing, malformed or rejected credentials."""

    status_code = 401
    error_type = "authentication_failed"


class AccessDenied(MarketplaceError):
    """Caller is authenticated but not allowed to perform the action."""

    status_code = 403
    error_type = "access_denied"


class NotFound(MarketplaceError):
    """Referenced resource does not exist."""

    status_code = 404
    error_type = "not_found"
