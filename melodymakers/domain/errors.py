"""Application error hierarchy.

Every exception here carries a stable ``kind`` and an HTTP status; the
handlers registered in ``main.py`` render them as
``{"error": true, "kind": ..., "message": ...}``.
"""
from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    DUPLICATE_PAYMENT = "duplicate_payment"
    CLASS_FULL = "class_full"
    BAD_REQUEST = "bad_request"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    VALIDATION_ERROR = "validation_error"
    RATE_LIMITED = "rate_limited"
    PAYMENT_PROVIDER_ERROR = "payment_provider_error"
    INTERNAL = "internal"


class AppError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred", context: dict | None = None):
        self.message = message
        # logged server-side only, never returned to the client
        self.context = context or {}
        super().__init__(message)


class Unauthenticated(AppError):
    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401


class Forbidden(AppError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class Conflict(AppError):
    kind = ErrorKind.CONFLICT
    status_code = 409


class DuplicatePayment(Conflict):
    kind = ErrorKind.DUPLICATE_PAYMENT


class ClassFull(Conflict):
    kind = ErrorKind.CLASS_FULL


class PaymentProviderError(AppError):
    kind = ErrorKind.PAYMENT_PROVIDER_ERROR
    status_code = 502
