"""User repository: persistence for identity records and the session field."""

from __future__ import annotations

from sqlalchemy import or_, select, update

from videohub.models.user import User
from videohub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Hashing and token minting never happen here; callers pass derived values.
    """

    model = User

    def _updatable_fields(self) -> set[str]:
        """Profile fields a user may overwrite (not password or session)."""
        return {"email", "full_name", "avatar_ref", "cover_image_ref"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username (case-insensitive).

        :param username: Handle to normalise and search.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.username == username.strip().lower())
        return self.session.execute(stmt).scalars().first()

    def find_by_identity(self, username_or_email: str) -> User | None:
        """Look a user up by either username or email.

        :param username_or_email: Login identifier as typed by the user.
        :type username_or_email: str
        :returns: Matching user or ``None``.
        :rtype: User | None
        """
        value = username_or_email.strip().lower()
        if not value:
            return None
        stmt = select(User).where(or_(User.username == value, User.email == value))
        return self.session.execute(stmt).scalars().first()

    def exists_by_username_or_email(self, username: str, email: str) -> bool:
        """Return ``True`` when either identifier is already taken."""
        stmt = select(User.id).where(
            or_(User.username == username.strip().lower(), User.email == email.strip().lower())
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    def email_taken_by_other(self, email: str, user_id: int) -> bool:
        stmt = select(User.id).where(User.email == email.strip().lower(), User.id != user_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Credential ops ----------------------------

    def update_password(self, user: User, password_hash: str) -> None:
        """Overwrite the stored hash without touching other fields.

        :param user: Loaded user instance.
        :type user: User
        :param password_hash: Already-derived hash.
        :type password_hash: str
        """
        user.password_hash = password_hash
        self.flush()

    # ---------------------------- Session field ----------------------------

    def get_refresh_token(self, user_id: int) -> str | None:
        stmt = select(User.refresh_token).where(User.id == user_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Unconditionally overwrite the stored refresh token.

        :returns: ``True`` when the user row exists.
        :rtype: bool
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session="fetch")
        )
        return self.session.execute(stmt).rowcount == 1

    def compare_and_swap_refresh_token(self, user_id: int, expected: str, new: str) -> bool:
        """Replace the refresh token only if it still equals ``expected``.

        Issued as one ``UPDATE ... WHERE id = :id AND refresh_token = :expected``
        so the comparison and the write happen in a single statement.

        :param user_id: Owner of the session field.
        :param expected: Token the caller presented.
        :param new: Replacement token.
        :returns: ``True`` when exactly one row was updated.
        :rtype: bool
        """
        if not expected:
            return False
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
            .execution_options(synchronize_session="fetch")
        )
        return self.session.execute(stmt).rowcount == 1
