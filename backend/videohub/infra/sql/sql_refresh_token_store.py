from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from videohub.services._shared.ports import RefreshTokenStore, RotationResult
from videohub.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


@dataclass(slots=True)
class SqlRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store backed by the ``users.refresh_token`` column.

    Every call runs in its own read-write unit of work, so the token write is
    committed before the new pair leaves the service.

    :param session: Session used for the per-call unit of work.
    """

    session: Session

    def _uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session=self.session)

    def get(self, user_id: int) -> str | None:
        with self._uow() as uow:
            return uow.users.get_refresh_token(user_id)

    def set(self, user_id: int, token: str) -> None:
        with self._uow() as uow:
            uow.users.set_refresh_token(user_id, token)

    def clear(self, user_id: int) -> None:
        with self._uow() as uow:
            uow.users.set_refresh_token(user_id, None)

    def compare_and_swap(self, user_id: int, expected: str, new: str) -> RotationResult:
        with self._uow() as uow:
            if uow.users.compare_and_swap_refresh_token(user_id, expected, new):
                return RotationResult.OK
            # Distinguish "no live session" from "stale token" for logging only
            current = uow.users.get_refresh_token(user_id)
        return RotationResult.NOT_FOUND if current is None else RotationResult.MISMATCH
