"""Shared domain error messages and error types."""

from enum import Enum
from typing import Optional

from sqlalchemy.exc import DisconnectionError, OperationalError


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class NothingToDeleteError(NotFoundError):
    """A batch delete matched no records.

    This is a soft condition: callers report it to the user and carry on.
    """


class DisallowedOperationError(DomainError):
    """Operation is not permitted on this entity."""


class BackendErrorCategory(str, Enum):
    """Coarse categories for store failures."""

    PERMISSION_DENIED = "permission-denied"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class BackendError(DomainError):
    """Failure reported by the backing store."""

    def __init__(self, message: str, category: BackendErrorCategory = BackendErrorCategory.UNKNOWN):
        super().__init__(message)
        self.category = category


class PermissionDeniedError(BackendError):
    """Write or read against a record owned by another user."""

    def __init__(self, message: str = "permission-denied: record belongs to another user"):
        super().__init__(message, BackendErrorCategory.PERMISSION_DENIED)


AUTH_ERROR_MESSAGES = {
    "auth/invalid-email": "Please enter a valid e-mail address.",
    "auth/weak-password": "The password must be at least 6 characters long.",
    "auth/user-not-found": "No user found with this e-mail.",
    "auth/wrong-password": "Wrong password. Please try again.",
    "auth/email-already-in-use": "This e-mail is already in use by another account.",
}

DEFAULT_AUTH_MESSAGE = "An error occurred during authentication. Please try again."


class AuthError(DomainError):
    """Authentication failure with a provider-style error code."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or AUTH_ERROR_MESSAGES.get(code, DEFAULT_AUTH_MESSAGE))
        self.code = code


def map_backend_error(error: Exception) -> DomainError:
    """Map a raw store failure to a domain error.

    Domain errors pass through untouched. Known patterns get a friendlier
    category; anything else keeps its original message.
    """
    if isinstance(error, DomainError):
        return error

    message = str(error)
    lowered = message.lower()
    if "permission-denied" in lowered or "permission denied" in lowered:
        return BackendError(
            "You do not have permission to perform this operation.",
            BackendErrorCategory.PERMISSION_DENIED,
        )
    if isinstance(error, (OperationalError, DisconnectionError)):
        return BackendError(
            f"The data store is unavailable: {message}",
            BackendErrorCategory.UNAVAILABLE,
        )
    return BackendError(message)


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def group_not_found(group_id: str) -> str:
    """Return message for missing group."""
    return f"Group {group_id} not found"


def description_not_found(description_id: str) -> str:
    """Return message for missing predefined description."""
    return f"Description {description_id} not found"


def installment_member_locked(transaction_id: str, action: str) -> str:
    """Return message when a single installment member is edited or deleted."""
    return (
        f"Cannot {action} transaction {transaction_id}: it is part of an installment "
        "group. Delete the whole installment group instead."
    )


def no_installments_found(parcela_id: str) -> str:
    """Return message when an installment group has no members."""
    return f"No installments found for group {parcela_id}; nothing was deleted"
