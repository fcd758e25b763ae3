"""Video repository: catalog reads used by the watch-history view."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import joinedload

from videohub.models.video import Video
from videohub.repositories.base import BaseRepository


class VideoRepository(BaseRepository[Video]):
    """Persistence-only repository for :class:`Video`."""

    model = Video

    def _default_eagerload(self, stmt):
        return stmt.options(joinedload(Video.owner))

    def get_many(self, video_ids: Iterable[int]) -> dict[int, Video]:
        """Fetch the existing videos among ``video_ids`` with their owners.

        :param video_ids: Identifiers to look up; unknown ids are ignored.
        :returns: Mapping of id to video for every id that still exists.
        :rtype: dict[int, Video]
        """
        ids = set(video_ids)
        if not ids:
            return {}
        stmt = self._default_eagerload(select(Video).where(Video.id.in_(ids)))
        rows = self.session.execute(stmt).unique().scalars().all()
        return {video.id: video for video in rows}

    def increment_views(self, video_id: int) -> None:
        """Bump the view counter in a single ``UPDATE``."""
        stmt = (
            update(Video)
            .where(Video.id == video_id)
            .values(views=Video.views + 1)
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(stmt)
