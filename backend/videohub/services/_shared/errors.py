"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. Each error carries an :class:`ErrorKind`; the API layer maps kinds to
status codes in one table (``videohub.core.errors.STATUS_BY_KIND``) instead of
catching and re-wrapping per service.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # SQLite reports "UNIQUE constraint failed: users.email" without the name
    if constraint_name.startswith("uq_"):
        table_col = constraint_name[3:]
        table, _, column = table_col.partition("_")
        return f"{table}.{column}" in message
    return False


class ErrorKind(Enum):
    """Stable classification of service failures."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTH = "auth"
    NOT_FOUND = "not_found"


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    :param message: Client-safe summary.
    :type message: str
    :param errors: Optional structured details (field messages and the like).
    :type errors: list[Any] | None

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION
    default_message: ClassVar[str] = "Bad request"

    def __init__(self, message: str | None = None, *, errors: list[Any] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Raised when input is missing, blank, or malformed."""

    kind = ErrorKind.VALIDATION
    default_message = "Invalid input"


class ConflictError(ServiceError):
    """Raised when a unique constraint or business rule conflict occurs."""

    kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class AuthError(ServiceError):
    """Raised for bad credentials and invalid, expired, or reused tokens."""

    kind = ErrorKind.AUTH
    default_message = "Unauthorized request"


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int | None
    """

    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"

    def __init__(self, entity: str, key: str | int | None = None) -> None:
        self.entity = entity
        self.key = key
        message = f"{entity} does not exist" if key is None else f"{entity} not found: {key}"
        super().__init__(message)
