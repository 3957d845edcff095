"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Not found errors (404)
    TAG_NOT_FOUND = "TAG_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    ADDRESS_NOT_FOUND = "ADDRESS_NOT_FOUND"
    CART_NOT_FOUND = "CART_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TAG_FORMAT = "INVALID_TAG_FORMAT"
    INVALID_TAG_REFERENCE = "INVALID_TAG_REFERENCE"
    CART_NOT_DRAFT = "CART_NOT_DRAFT"

    # Conflict errors (409)
    DUPLICATE_TAG = "DUPLICATE_TAG"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class NotFoundError(AppException):
    """A referenced resource does not exist (or is not active)."""

    def __init__(
        self, error_code: ErrorCode, message: str, details: Any | None = None
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=404,
            details=details,
        )


class ConflictError(AppException):
    """The request conflicts with existing state."""

    def __init__(
        self, error_code: ErrorCode, message: str, details: Any | None = None
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=409,
            details=details,
        )


class ValidationError(AppException):
    """Input is well-formed JSON but violates a domain rule."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details=details,
        )


class TagNotFoundError(NotFoundError):
    """Tag not found or inactive."""

    def __init__(self, tag: str) -> None:
        super().__init__(
            error_code=ErrorCode.TAG_NOT_FOUND,
            message=f"Tag not found or inactive: {tag}",
            details={"tag": tag},
        )


class CustomerNotFoundError(NotFoundError):
    """Customer not found."""

    def __init__(self, customer_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CUSTOMER_NOT_FOUND,
            message=f"Customer not found: {customer_id}",
            details={"customer_id": customer_id},
        )


class AddressNotFoundError(NotFoundError):
    """Address not found on the customer."""

    def __init__(self, address_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ADDRESS_NOT_FOUND,
            message=f"Address not found: {address_id}",
            details={"address_id": address_id},
        )


class CartNotFoundError(NotFoundError):
    """Cart/order not found."""

    def __init__(self, order_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CART_NOT_FOUND,
            message=f"Cart not found: {order_id}",
            details={"order_id": order_id},
        )


class DuplicateTagError(ConflictError):
    """A catalog entry with the same full tag already exists."""

    def __init__(self, full_tag: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_TAG,
            message=f"Tag '{full_tag}' already exists",
            details={"full_tag": full_tag},
        )


class InvalidTagFormatError(ValidationError):
    """Prefix or code does not match the lowercase kebab-case format."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_TAG_FORMAT,
            message=(
                f"Invalid {field} '{value}': use lowercase letters, digits "
                "and single hyphens (e.g. 'categoria-di-sconto')"
            ),
            details={"field": field, "value": value},
        )


class InvalidTagReferenceError(ValidationError):
    """A stored or submitted tag reference cannot be interpreted."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_TAG_REFERENCE,
            message=f"Cannot interpret tag reference: {value!r}",
            details={"value": repr(value)},
        )


class CartNotDraftError(ValidationError):
    """Operation requires a draft cart."""

    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.CART_NOT_DRAFT,
            message=f"Cart {order_id} is not a draft (status: {status})",
            details={"order_id": order_id, "status": status},
        )
