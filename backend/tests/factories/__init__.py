"""Factory Boy helpers wired to the project's SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Store the session provided by the pytest fixture layer."""

    _session = None

    @classmethod
    def set(cls, session):
        """Register the SQLAlchemy session used to persist factory objects."""
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered SQLAlchemy session.

        Raises
        ------
        RuntimeError
            If factories are used in a test that does not request ``db``.
        """
        if cls._session is None:
            raise RuntimeError("Factories session not set. Did you request the 'db' fixture?")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class configuring Factory Boy for the test session.

    Objects are committed so HTTP requests, which run in their own app context
    and session, can see them.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "commit"


from .subscription import SubscriptionFactory  # noqa: E402
from .user import DEFAULT_PASSWORD, UserFactory  # noqa: E402
from .video import VideoFactory  # noqa: E402
from .watch_history import WatchHistoryEntryFactory  # noqa: E402

__all__ = [
    "BaseFactory",
    "DEFAULT_PASSWORD",
    "SQLAlchemySession",
    "SubscriptionFactory",
    "UserFactory",
    "VideoFactory",
    "WatchHistoryEntryFactory",
]
