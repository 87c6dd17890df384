"""
Subscription service exceptions.

Every error raised by the plan and subscription services derives from
SubscriptionServiceError so the request layer can render them with one handler.
"""

from typing import Any


class SubscriptionServiceError(Exception):
    """
    Base error with the context needed to build an API response.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        status_code: HTTP status code for this error type
        context: Identifiers involved in the failure
    """

    error_code = 'SUBSCRIPTION_ERROR'
    status_code = 400

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            'detail': self.message,
            'error_code': self.error_code,
            'context': self.context,
        }


class NotFoundError(SubscriptionServiceError):
    """Organization, subscription or plan referenced by id does not exist."""

    error_code = 'NOT_FOUND'
    status_code = 404


class ValidationError(SubscriptionServiceError):
    """Malformed input: bad duration phrase, bad quota values, unsupported status."""

    error_code = 'VALIDATION_ERROR'
    status_code = 422


class ConflictError(SubscriptionServiceError):
    """Operation conflicts with existing state (plan still referenced, duplicate subscription)."""

    error_code = 'CONFLICT'
    status_code = 409


class StorageError(SubscriptionServiceError):
    """The backing transaction failed and was rolled back."""

    error_code = 'STORAGE_ERROR'
    status_code = 500
