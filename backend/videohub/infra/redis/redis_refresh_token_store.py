# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass

import redis  # type: ignore[import-untyped]

from videohub.services._shared.ports import RefreshTokenStore, RotationResult


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store with atomic rotation.

    One string key per user holds the live refresh token. Keys expire with the
    token lifetime so abandoned sessions clean themselves up.

    :param r: A Redis client (already connected).
    :param ttl_seconds: Expiry applied on every write; ``0`` disables expiry.
    """

    r: redis.Redis
    ttl_seconds: int = 0

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _s(raw: bytes | str | None) -> str | None:
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, bytes | bytearray) else str(raw)

    def get(self, user_id: int) -> str | None:
        return self._s(self.r.get(self._ku(user_id)))

    def set(self, user_id: int, token: str) -> None:
        self.r.set(self._ku(user_id), token, ex=self.ttl_seconds or None)

    def clear(self, user_id: int) -> None:
        self.r.delete(self._ku(user_id))

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> RotationResult:
        """
        Replace the stored token only when it still equals ``expected``.

        Uses WATCH/MULTI/EXEC (optimistic locking): the key is watched, its
        value compared, and the write queued in a transaction that Redis
        aborts if another client touched the key in between.
        """
        key = self._ku(user_id)

        # Retry loop for optimistic locking in case of concurrent modifications
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    current = self._s(p.get(key))
                    if current is None:
                        p.unwatch()
                        return RotationResult.NOT_FOUND
                    if current != expected:
                        p.unwatch()
                        return RotationResult.MISMATCH

                    p.multi()
                    p.set(key, new, ex=self.ttl_seconds or None)
                    p.execute()
                return RotationResult.OK
            except redis.WatchError:
                # Key changed under us; re-read and decide again
                continue
