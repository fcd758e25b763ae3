"""Token issuance: minting access/refresh pairs and decoding them back."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from videohub.services._shared.ports import TokenProvider
from videohub.services.auth.dto import AuthTokenConfig, TokenPairOut

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenIssuer:
    """
    Mint and verify tokens for a user identity.

    Issuance has no storage side effect; callers persist the refresh token.

    :param provider: Signing adapter holding one key per token type.
    :param cfg: Expiry configuration.
    """

    def __init__(self, provider: TokenProvider, cfg: AuthTokenConfig | None = None) -> None:
        self.provider = provider
        self.cfg = cfg or AuthTokenConfig()

    @staticmethod
    def _base_claims(user_id: int, lifetime) -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "sub": str(user_id),
            # Unique per token so two pairs minted in the same second differ
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + lifetime,
        }

    def issue_access_token(self, user_id: int, *, profile: Mapping[str, Any] | None = None) -> str:
        """
        Mint a short-lived access token.

        :param user_id: Subject of the token.
        :param profile: Optional ``username``/``email``/``fullName`` claims.
        :returns: Encoded token.
        :rtype: str
        """
        claims = self._base_claims(user_id, self.cfg.access_expires)
        if profile:
            claims.update({k: v for k, v in profile.items() if v is not None})
        return self.provider.encode(claims, token_type=ACCESS_TOKEN_TYPE)

    def issue_refresh_token(self, user_id: int) -> str:
        """Mint a long-lived refresh token carrying only the subject."""
        claims = self._base_claims(user_id, self.cfg.refresh_expires)
        return self.provider.encode(claims, token_type=REFRESH_TOKEN_TYPE)

    def issue_pair(self, user_id: int, *, profile: Mapping[str, Any] | None = None) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.issue_access_token(user_id, profile=profile),
            refresh_token=self.issue_refresh_token(user_id),
        )

    # ---- verification (raises TokenError from the provider) ----

    def decode_access(self, token: str) -> dict[str, Any]:
        return self.provider.decode(token, token_type=ACCESS_TOKEN_TYPE)

    def decode_refresh(self, token: str) -> dict[str, Any]:
        return self.provider.decode(token, token_type=REFRESH_TOKEN_TYPE)


def subject_of(claims: Mapping[str, Any]) -> int:
    """
    Extract the integer user id from the ``sub`` claim.

    :raises ValueError: If ``sub`` is missing or not an integer string.
    """
    return int(str(claims["sub"]))
