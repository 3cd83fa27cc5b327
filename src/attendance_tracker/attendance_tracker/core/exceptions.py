from __future__ import annotations

from .enums import ErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""

    code: ErrorCode = ErrorCode.CONFLICT


class NotAuthenticatedError(DomainError):
    """Raised when no employee identity can be resolved."""

    code = ErrorCode.NOT_AUTHENTICATED


class ConflictError(DomainError):
    """Raised when a transition is not legal for the current record."""

    code = ErrorCode.CONFLICT


class AlreadySignedInError(ConflictError):
    pass


class NotSignedInError(ConflictError):
    pass


class AlreadyExistsError(ConflictError):
    pass


class AlreadyRequestedError(ConflictError):
    pass


class ConcurrentUpdateError(ConflictError):
    """Raised when the record kept changing underneath a transition."""


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND


class QuotaExceededError(DomainError):
    code = ErrorCode.QUOTA_EXCEEDED


class OutOfWindowError(DomainError):
    code = ErrorCode.OUT_OF_WINDOW


class InvalidInputError(DomainError):
    """Raised when input data is malformed (hours, dates, types)."""

    code = ErrorCode.INVALID_INPUT


class StorageError(DomainError):
    """Repository I/O failure. Not retried by the core."""

    code = ErrorCode.STORAGE_FAILURE


HTTP_STATUS_BY_CODE = {
    ErrorCode.NOT_AUTHENTICATED: 401,
    ErrorCode.CONFLICT: 409,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.QUOTA_EXCEEDED: 409,
    ErrorCode.OUT_OF_WINDOW: 422,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.STORAGE_FAILURE: 500,
}
