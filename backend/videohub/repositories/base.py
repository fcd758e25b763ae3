"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Primary-key lookups, existence checks and single-row finds.
- Safe update helpers with per-repository updatable-field whitelists.
- No business logic, no commit/rollback; Units of Work own transactions.

Design decisions
----------------
* Repositories remain thin and persistence-focused.
* The session is injected; repositories never reach for a global handle.
* Updates do not allow mass-assignment: each repo exposes an explicit
  ``_updatable_fields`` whitelist.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, and_, select
from sqlalchemy.orm import InstrumentedAttribute, Session

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``; they MAY override ``_updatable_fields``
    and ``_default_eagerload``.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session) -> None:
        """
        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session`
        """
        self.session = session

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Attach eager-loading options to generic lookups (no-op by default)."""
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _updatable_fields(self) -> set[str]:
        """Whitelist of attribute names that :meth:`update` may assign.

        :returns: Set of allowed keys; empty means nothing is updatable.
        :rtype: set[str]
        """
        return set()

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``fields`` restricted to the whitelist.

        :raises ValueError: If unknown or non-updatable keys are present.
        """
        allowed = self._updatable_fields()
        unknown = [k for k in fields if k not in allowed]
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize the PK.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk = self._pk_attr()
        if pk is None:
            raise RuntimeError(f"{self.model.__name__} has no 'id' attribute.")
        stmt = self._default_eagerload(select(self.model).where(pk == entity_id))
        return self.session.execute(stmt).scalars().first()

    def exists(self, **filters: Any) -> bool:
        """Return ``True`` when at least one row matches the filters."""
        pk = self._pk_attr()
        clauses = [getattr(self.model, k) == v for k, v in filters.items()]
        stmt = select(pk if pk is not None else self.model)
        if clauses:
            stmt = stmt.where(and_(*clauses))
        return self.session.execute(stmt.limit(1)).first() is not None

    def update(self, instance: E, **fields: Any) -> E:
        """Assign whitelisted fields on ``instance`` and flush."""
        for key, value in self._sanitize_update_fields(fields).items():
            setattr(instance, key, value)
        self.flush()
        return instance

    def flush(self) -> None:
        self.session.flush()
