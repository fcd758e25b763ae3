"""Ordered watch history entries."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from videohub.core.extensions import db

from .base import PKMixin, ReprMixin


class WatchHistoryEntry(PKMixin, ReprMixin, db.Model):
    """
    One position in a user's watch history.

    ``video_id`` carries no foreign key: deleting a video leaves
    the entry in place and readers drop it at join time.
    """

    __tablename__ = "watch_history"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    video_id: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    watched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("ix_watch_history_user_position", "user_id", "position"),)
