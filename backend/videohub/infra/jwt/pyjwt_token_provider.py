from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import jwt

from videohub.services._shared.ports import TokenError, TokenProvider

ACCESS = "access"
REFRESH = "refresh"


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    PyJWT adapter that signs each token type with its own secret.

    :param access_secret: Key for ``"access"`` tokens.
    :param refresh_secret: Key for ``"refresh"`` tokens.
    :param algorithm: HMAC algorithm shared by both keys.
    :param leeway: Clock skew tolerance in seconds when checking ``exp``.
    """

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    leeway: int = 0
    _keys: Mapping[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Both access and refresh secrets are required.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets.")
        self._keys = {ACCESS: self.access_secret, REFRESH: self.refresh_secret}

    def _key(self, token_type: str) -> str:
        try:
            return self._keys[token_type]
        except KeyError:
            raise ValueError(f"Unknown token type: {token_type!r}") from None

    def encode(self, claims: dict[str, Any], *, token_type: str) -> str:
        payload = dict(claims)
        payload["type"] = token_type
        return jwt.encode(payload, self._key(token_type), algorithm=self.algorithm)

    def decode(self, token: str, *, token_type: str) -> dict[str, Any]:
        """
        Verify signature, expiry and type, returning the claims.

        :raises TokenError: On any verification failure; the PyJWT exception
            is chained as the cause.
        """
        try:
            claims = jwt.decode(
                token,
                self._key(token_type),
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={"require": ["exp", "sub", "type"]},
            )
        except jwt.PyJWTError as exc:
            raise TokenError(str(exc)) from exc
        if claims.get("type") != token_type:
            raise TokenError(f"Expected a {token_type} token")
        return claims
