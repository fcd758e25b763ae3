"""Watch history repository."""

from __future__ import annotations

from sqlalchemy import delete, func, select

from videohub.models.watch_history import WatchHistoryEntry
from videohub.repositories.base import BaseRepository


class WatchHistoryRepository(BaseRepository[WatchHistoryEntry]):
    """Ordered id list per user, stored one row per position."""

    model = WatchHistoryEntry

    def list_video_ids(self, user_id: int) -> list[int]:
        """Return the user's history ids, oldest first.

        :param user_id: History owner.
        :returns: Video ids in recorded order; may reference deleted videos.
        :rtype: list[int]
        """
        stmt = (
            select(WatchHistoryEntry.video_id)
            .where(WatchHistoryEntry.user_id == user_id)
            .order_by(WatchHistoryEntry.position.asc(), WatchHistoryEntry.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def append(
        self,
        user_id: int,
        video_id: int,
        *,
        dedup: bool = False,
        max_len: int = 0,
    ) -> WatchHistoryEntry:
        """Append ``video_id`` to the end of the user's history.

        :param dedup: Remove earlier entries for the same video first, so a
            repeat view moves to the end.
        :param max_len: Keep only the newest ``max_len`` entries; ``0`` keeps all.
        :returns: The new entry.
        :rtype: WatchHistoryEntry
        """
        if dedup:
            self.session.execute(
                delete(WatchHistoryEntry)
                .where(
                    WatchHistoryEntry.user_id == user_id,
                    WatchHistoryEntry.video_id == video_id,
                )
                .execution_options(synchronize_session="fetch")
            )

        last = self.session.execute(
            select(func.max(WatchHistoryEntry.position)).where(
                WatchHistoryEntry.user_id == user_id
            )
        ).scalar_one_or_none()
        entry = self.add(
            WatchHistoryEntry(
                user_id=user_id,
                video_id=video_id,
                position=0 if last is None else last + 1,
            )
        )

        if max_len > 0:
            stale = self.session.execute(
                select(WatchHistoryEntry.id)
                .where(WatchHistoryEntry.user_id == user_id)
                .order_by(WatchHistoryEntry.position.desc())
                .offset(max_len)
            ).scalars().all()
            if stale:
                self.session.execute(
                    delete(WatchHistoryEntry)
                    .where(WatchHistoryEntry.id.in_(stale))
                    .execution_options(synchronize_session="fetch")
                )
        return entry
