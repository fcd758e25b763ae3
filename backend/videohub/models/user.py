"""User model: the identity record owned by the credential store."""

from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from videohub.core.config import DEFAULT_AVATAR_URL
from videohub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Identity record with profile fields and the single live refresh token.

    The model carries data only. Hashing, verification and token minting are
    free functions in the service layer so they can be tested without storage.

    Fields
    ------
    username : str
        Public handle, stored lowercase. Unique.
    email : str
        Login email, stored lowercase and trimmed. Unique.
    full_name : str
        Display name.
    avatar_ref : str
        Media reference; defaults to a placeholder image.
    cover_image_ref : str
        Media reference; empty when unset.
    password_hash : str
        Salted one-way hash. Never serialized outward.
    refresh_token : str | None
        Most recently issued refresh token, or ``None`` when logged out.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_ref: Mapped[str] = mapped_column(
        String(512), nullable=False, default=DEFAULT_AVATAR_URL
    )
    cover_image_ref: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
    )

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize email to lowercase without surrounding whitespace.

        :raises ValueError: If email is missing or malformed.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Email is required.")
        v = value.strip().lower()
        if "@" not in v:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        """
        Normalize username to lowercase without surrounding whitespace.

        :raises ValueError: If username is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip().lower()
