"""
SQLAlchemy implementation of UnitOfWork.

The session is injected by the caller (usually the Flask-scoped session built
in :mod:`videohub.api.deps`), never looked up from a global.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import event
from sqlalchemy.orm import Session, scoped_session

from videohub.repositories import (
    SubscriptionRepository,
    UserRepository,
    VideoRepository,
    WatchHistoryRepository,
)
from videohub.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.subscriptions = SubscriptionRepository(session=self.session)
        self.videos = VideoRepository(session=self.session)
        self.watch_history = WatchHistoryRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW: commits on clean exit, rolls back when the block raises.
    """

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work.

    Installs a ``before_flush`` guard for the duration of the block and always
    rolls back on exit, so view builders observe a snapshot and can never
    persist changes. ``commit()`` is disallowed.
    """

    def __init__(self, *, session: Session) -> None:
        super().__init__(session=session)
        self._guard_installed = False

    def _guarded(self) -> Session:
        # Listen on the concrete session, not the scoped_session class-wide
        if isinstance(self.session, scoped_session):
            return self.session()
        return self.session

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self._guarded(), "before_flush", self._block_flush)
        self._guard_installed = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            if self._guard_installed:
                with suppress(Exception):
                    event.remove(self._guarded(), "before_flush", self._block_flush)
                self._guard_installed = False

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def commit(self) -> None:
        """
        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()
