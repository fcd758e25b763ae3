"""
IdentityService
===============

Aggregate service responsible for the ``User`` record:
- Registration with uniqueness checks
- Profile reads and field overwrites (account, avatar, cover image)
- Password lifecycle (change invalidates the live session)
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from videohub.repositories.user import UserRepository
from videohub.services._shared.base import BaseService
from videohub.services._shared.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ValidationError,
    violates,
)
from videohub.services._shared.ports import RefreshTokenStore
from videohub.services.identity.dto import (
    UserAccountUpdateIn,
    UserPasswordChangeIn,
    UserPublicOut,
    UserRegisterIn,
    to_public,
)
from videohub.services.identity.passwords import hash_password, verify_password

log = logging.getLogger(__name__)


def _require(**fields: str | None) -> dict[str, str]:
    """Strip each value and raise one ValidationError naming all blank fields."""
    blank = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if blank:
        raise ValidationError(
            "All fields are required",
            errors=[{"field": name, "message": "must not be blank"} for name in blank],
        )
    return {name: str(value).strip() for name, value in fields.items()}


def _registration_values(dto: UserRegisterIn) -> dict[str, str]:
    return _require(
        username=dto.username,
        email=dto.email,
        fullName=dto.full_name,
        password=dto.password,
    )


class IdentityService(BaseService):
    """
    Application service for the ``User`` aggregate.

    :param session: Session used by every unit of work.
    :param refresh_store: Store cleared when the password changes.
    :param default_avatar_url: Placeholder used when registration has no avatar.
    """

    def __init__(
        self,
        *,
        session: Session,
        refresh_store: RefreshTokenStore,
        default_avatar_url: str,
    ) -> None:
        super().__init__(session=session)
        self.refresh_store = refresh_store
        self.default_avatar_url = default_avatar_url

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def ensure_registrable(self, dto: UserRegisterIn) -> None:
        """
        Run the registration checks without writing anything.

        Lets callers reject a request before storing uploaded media.

        :raises ValidationError: If any required field is blank.
        :raises ConflictError: If the username or email is already taken.
        """
        values = _registration_values(dto)
        with self.ro_uow() as uow:
            if uow.users.exists_by_username_or_email(values["username"], values["email"]):
                raise ConflictError("User with email or username already exists")

    def register(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ValidationError: If any required field is blank.
        :raises ConflictError: If the username or email is already taken.
        """
        values = _registration_values(dto)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_username_or_email(values["username"], values["email"]):
                raise ConflictError("User with email or username already exists")

            try:
                user = repo.add(
                    repo.model(
                        username=values["username"],
                        email=values["email"],
                        full_name=values["fullName"],
                        password_hash=hash_password(dto.password),
                        avatar_ref=(dto.avatar_ref or "").strip() or self.default_avatar_url,
                        cover_image_ref=(dto.cover_image_ref or "").strip(),
                    )
                )
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            except IntegrityError as exc:
                # Lost a race against a concurrent registration
                if violates(exc, "uq_users_email") or violates(exc, "uq_users_username"):
                    raise ConflictError("User with email or username already exists") from exc
                raise

            out = to_public(user)

        log.info("user registered", extra={"user_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return to_public(user)

    # --------------------------------------------------------------------- #
    # Updates
    # --------------------------------------------------------------------- #

    def update_account(self, dto: UserAccountUpdateIn) -> UserPublicOut:
        """
        Overwrite full name and email.

        :raises ValidationError: If either field is blank.
        :raises ConflictError: If the email belongs to another user.
        :raises NotFoundError: If the user no longer exists.
        """
        values = _require(fullName=dto.full_name, email=dto.email)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)
            if repo.email_taken_by_other(values["email"], dto.user_id):
                raise ConflictError("Email is already in use")
            try:
                repo.update(user, full_name=values["fullName"], email=values["email"])
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("Email is already in use") from exc
                raise
            return to_public(user)

    def update_avatar(self, user_id: int, avatar_ref: str | None) -> UserPublicOut:
        """Replace the avatar reference.

        :raises ValidationError: If no reference was produced for the upload.
        """
        return self._update_media(user_id, "avatar_ref", avatar_ref, "Avatar file is missing")

    def update_cover_image(self, user_id: int, cover_image_ref: str | None) -> UserPublicOut:
        """Replace the cover image reference.

        :raises ValidationError: If no reference was produced for the upload.
        """
        return self._update_media(
            user_id, "cover_image_ref", cover_image_ref, "Cover image file is missing"
        )

    def _update_media(
        self, user_id: int, field: str, ref: str | None, missing_message: str
    ) -> UserPublicOut:
        if not ref or not ref.strip():
            raise ValidationError(missing_message)
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.update(user, **{field: ref.strip()})
            return to_public(user)

    # --------------------------------------------------------------------- #
    # Password lifecycle
    # --------------------------------------------------------------------- #

    def change_password(self, dto: UserPasswordChangeIn) -> None:
        """
        Verify the old password, store a new hash, and end the live session.

        :param dto: Password change DTO.
        :type dto: UserPasswordChangeIn
        :raises ValidationError: If either password is blank.
        :raises NotFoundError: If the user does not exist.
        :raises AuthError: If the old password does not match.
        """
        _require(oldPassword=dto.old_password, newPassword=dto.new_password)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)
            if not verify_password(user.password_hash, dto.old_password):
                raise AuthError("Invalid old password")
            repo.update_password(user, hash_password(dto.new_password))

        self.refresh_store.clear(dto.user_id)
        log.info("password changed", extra={"user_id": dto.user_id})
