from __future__ import annotations

import threading
from enum import Enum, auto
from typing import Protocol


class RotationResult(Enum):
    """Outcome of an atomic refresh rotation attempt."""

    OK = auto()
    MISMATCH = auto()
    NOT_FOUND = auto()


class RefreshTokenStore(Protocol):
    """
    Stateful holder of each user's single live refresh token.

    Rotation MUST be a single atomic compare-and-swap: two callers presenting
    the same token can never both observe :attr:`RotationResult.OK`.
    """

    def get(self, user_id: int) -> str | None: ...

    def set(self, user_id: int, token: str) -> None: ...

    def clear(self, user_id: int) -> None: ...

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> RotationResult: ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """Lock-guarded in-memory store for unit tests and local tooling."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tokens: dict[int, str] = {}

    def get(self, user_id: int) -> str | None:
        with self._lock:
            return self._tokens.get(user_id)

    def set(self, user_id: int, token: str) -> None:
        with self._lock:
            self._tokens[user_id] = token

    def clear(self, user_id: int) -> None:
        with self._lock:
            self._tokens.pop(user_id, None)

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> RotationResult:
        with self._lock:
            current = self._tokens.get(user_id)
            if current is None:
                return RotationResult.NOT_FOUND
            if current != expected:
                return RotationResult.MISMATCH
            self._tokens[user_id] = new
            return RotationResult.OK
