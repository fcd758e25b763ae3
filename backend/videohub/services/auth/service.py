"""
SessionService
==============

Session lifecycle over a single live refresh token per user:

``login`` records the issued refresh token, ``authorize`` checks an access
token without touching storage, ``refresh`` rotates the pair through an
atomic compare-and-swap, and ``logout`` clears the stored token.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from videohub.services._shared.base import BaseService
from videohub.services._shared.errors import AuthError, ValidationError
from videohub.services._shared.ports import (
    RefreshTokenStore,
    RotationResult,
    TokenError,
)
from videohub.services.auth.dto import LoginIn, LoginOut, RefreshIn, TokenPairOut
from videohub.services.auth.tokens import TokenIssuer, subject_of
from videohub.services.identity.dto import to_public
from videohub.services.identity.passwords import verify_password

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid user credentials"
INVALID_ACCESS = "Invalid access token"
INVALID_REFRESH = "Invalid refresh token"
STALE_REFRESH = "Refresh token is expired or used"


def _profile_claims(user) -> dict[str, Any]:
    return {"username": user.username, "email": user.email, "fullName": user.full_name}


class SessionService(BaseService):
    """
    Authentication lifecycle service (login / authorize / refresh / logout).

    :param session: Session used for user lookups.
    :param issuer: Mints and verifies token pairs.
    :param refresh_store: Holder of each user's live refresh token.
    :param expose_details: Append token verification causes to error messages.
    """

    def __init__(
        self,
        *,
        session: Session,
        issuer: TokenIssuer,
        refresh_store: RefreshTokenStore,
        expose_details: bool = False,
    ) -> None:
        super().__init__(session=session)
        self.issuer = issuer
        self.refresh_store = refresh_store
        self.expose_details = expose_details

    def _auth_error(self, message: str, exc: Exception) -> AuthError:
        if self.expose_details and str(exc):
            return AuthError(f"{message}: {exc}")
        return AuthError(message)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials, issue a pair, and record the refresh token.

        Unknown identity and wrong password are indistinguishable: both run a
        full hash check and raise the same :class:`AuthError`.

        :param dto: Login input.
        :returns: Public user plus the issued pair.
        :raises ValidationError: If neither username nor email was given.
        :raises AuthError: If credentials are invalid.
        """
        identity = (dto.username or "").strip() or (dto.email or "").strip()
        if not identity:
            raise ValidationError("Username or email is required")
        if not dto.password:
            raise ValidationError("Password is required")

        with self.ro_uow() as uow:
            user = uow.users.find_by_identity(identity)
            stored_hash = user.password_hash if user is not None else None
            matched = verify_password(stored_hash, dto.password)
            if user is None or not matched:
                raise AuthError(INVALID_CREDENTIALS)
            public = to_public(user)
            profile = _profile_claims(user)

        tokens = self.issuer.issue_pair(public.id, profile=profile)
        self.refresh_store.set(public.id, tokens.refresh_token)
        log.info("user logged in", extra={"user_id": public.id})
        return LoginOut(user=public, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Authorization
    # ------------------------------------------------------------------ #

    def authorize(self, access_token: str | None) -> int:
        """
        Return the user id carried by a valid access token.

        Signature, expiry and token type are checked; storage is not consulted.

        :raises AuthError: On a missing, malformed, forged or expired token.
        """
        if not access_token:
            raise AuthError("Unauthorized request")
        try:
            return subject_of(self.issuer.decode_access(access_token))
        except (TokenError, KeyError, ValueError) as exc:
            raise self._auth_error(INVALID_ACCESS, exc) from exc

    # ------------------------------------------------------------------ #
    # Refresh (rotation)
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token into a new pair.

        The presented token must equal the stored one; replacement happens in
        one compare-and-swap so concurrent callers presenting the same token
        cannot both succeed.

        :param dto: Refresh input.
        :returns: New token pair.
        :raises AuthError: If the token is missing, invalid, expired, or no
            longer the stored value.
        """
        presented = (dto.refresh_token or "").strip()
        if not presented:
            raise AuthError("Unauthorized request")

        try:
            user_id = subject_of(self.issuer.decode_refresh(presented))
        except (TokenError, KeyError, ValueError) as exc:
            raise self._auth_error(INVALID_REFRESH, exc) from exc

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise AuthError(INVALID_REFRESH)
            profile = _profile_claims(user)

        tokens = self.issuer.issue_pair(user_id, profile=profile)
        result = self.refresh_store.compare_and_swap(user_id, presented, tokens.refresh_token)
        if result is not RotationResult.OK:
            log.warning(
                "refresh token rejected: %s",
                result.name.lower(),
                extra={"user_id": user_id},
            )
            raise AuthError(STALE_REFRESH)

        log.info("refresh token rotated", extra={"user_id": user_id})
        return tokens

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int) -> None:
        """End the user's session regardless of which device holds it."""
        self.refresh_store.clear(user_id)
        log.info("user logged out", extra={"user_id": user_id})
