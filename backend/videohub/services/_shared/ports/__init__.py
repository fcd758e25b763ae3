"""
videohub.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider` signs and verifies tokens; :class:`~.TokenError`.
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore`, :class:`~.RotationResult` and the
    in-memory adapter.
- :mod:`media_resolver`:
    :class:`~.MediaResolver` turns uploaded files into references.

Concrete adapters (PyJWT, SQL, Redis, local filesystem) live under
``videohub.infra``.
"""

from __future__ import annotations

from .media_resolver import MediaResolver
from .refresh_token_store import InMemoryRefreshTokenStore, RefreshTokenStore, RotationResult
from .token_provider import TokenError, TokenProvider

__all__ = [
    "TokenProvider",
    "TokenError",
    "RefreshTokenStore",
    "RotationResult",
    "InMemoryRefreshTokenStore",
    "MediaResolver",
]
