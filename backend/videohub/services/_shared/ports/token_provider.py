from __future__ import annotations

from typing import Any, Protocol


class TokenError(Exception):
    """Raised by a :class:`TokenProvider` when a token cannot be trusted.

    The provider-specific cause is chained as ``__cause__``.
    """


class TokenProvider(Protocol):
    """Port for signing and verifying self-contained tokens.

    Each token type is signed with its own key; decoding with the wrong type
    fails even when the signature algorithm matches.
    """

    def encode(self, claims: dict[str, Any], *, token_type: str) -> str: ...

    def decode(self, token: str, *, token_type: str) -> dict[str, Any]: ...
