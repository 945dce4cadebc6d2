"""Domain error taxonomy shared by all services.

Service-layer code raises these; `libs.common.error_handler` turns them into
JSON responses of the form ``{"detail": ..., "code": ...}``.
"""

from typing import Any, Optional


class StoreError(Exception):
    """Base class for errors surfaced directly to the API caller."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class NotFoundError(StoreError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ValidationFailed(StoreError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class InvalidQuantityError(ValidationFailed):
    code = "INVALID_QUANTITY"
    default_message = "Quantity must be greater than 0"


class OutOfStockError(ValidationFailed):
    code = "OUT_OF_STOCK"
    default_message = "Product is out of stock"


class ConflictError(StoreError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Resource was modified concurrently, please retry"


class AlreadyExistsError(ConflictError):
    code = "ALREADY_EXISTS"
    default_message = "Resource already exists"


class UnauthorizedError(StoreError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Could not validate credentials"


class ForbiddenError(StoreError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Not allowed"


class UpstreamError(StoreError):
    status_code = 502
    code = "UPSTREAM_ERROR"
    default_message = "Upstream service failed"
