"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models. No
output DTO carries the password hash or the refresh token.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param username: Public handle (stored lowercase).
    :type username: str
    :param email: Login email (stored lowercase).
    :type email: str
    :param full_name: Display name.
    :type full_name: str
    :param password: Raw password, hashed before persisting.
    :type password: str
    :param avatar_ref: Optional media reference; a placeholder is used otherwise.
    :type avatar_ref: str | None
    :param cover_image_ref: Optional media reference.
    :type cover_image_ref: str | None
    """

    username: str
    email: str
    full_name: str
    password: str
    avatar_ref: str | None = None
    cover_image_ref: str | None = None


@dataclass(frozen=True, slots=True)
class UserAccountUpdateIn:
    """
    Input DTO for overwriting profile fields.

    :param user_id: User identifier.
    :type user_id: int
    :param full_name: New display name.
    :type full_name: str
    :param email: New email.
    :type email: str
    """

    user_id: int
    full_name: str
    email: str


@dataclass(frozen=True, slots=True)
class UserPasswordChangeIn:
    """
    Input DTO for changing a user's password.

    :param user_id: User identifier.
    :type user_id: int
    :param old_password: Current password.
    :type old_password: str
    :param new_password: Replacement password.
    :type new_password: str
    """

    user_id: int
    old_password: str
    new_password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe view of a user.

    :param id: User identifier.
    :type id: int
    :param username: Handle.
    :type username: str
    :param email: Email.
    :type email: str
    :param full_name: Display name.
    :type full_name: str
    :param avatar_ref: Avatar reference.
    :type avatar_ref: str
    :param cover_image_ref: Cover image reference (may be empty).
    :type cover_image_ref: str
    :param created_at: Creation timestamp.
    :type created_at: datetime | None
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar_ref: str
    cover_image_ref: str
    created_at: datetime | None = None


def to_public(user) -> UserPublicOut:
    """Project a loaded :class:`~videohub.models.user.User` to its public DTO."""
    return UserPublicOut(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar_ref=user.avatar_ref,
        cover_image_ref=user.cover_image_ref or "",
        created_at=user.created_at,
    )
