from __future__ import annotations

from sqlalchemy.orm import Session

from videohub.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Keep services thin, orchestration-only, no web leakage.

    Notes
    -----
    - The session is injected; services never touch a global handle.
    - Errors are raised as :class:`~videohub.services._shared.errors.ServiceError`
      subclasses and translated once by the API layer.
    """

    def __init__(self, *, session: Session) -> None:
        """
        :param session: Session shared by every unit of work this service opens.
        :type session: :class:`sqlalchemy.orm.Session`
        """
        self.session = session

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork(session=self.session)

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(session=self.session)
