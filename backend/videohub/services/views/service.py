"""
ViewService
===========

Read-only projections over users, subscriptions and the video catalog.

Each pipeline is a sequence of named steps instead of one opaque query so
every stage can be read, tested and profiled on its own.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from videohub.models.user import User
from videohub.models.video import Video
from videohub.services._shared.base import BaseService
from videohub.services._shared.errors import NotFoundError, ValidationError
from videohub.services.views.dto import ChannelViewOut, EnrichedVideoOut, OwnerSummaryOut
from videohub.uow.sqlalchemy_uow import SQLAlchemyRepositoryContainer

log = logging.getLogger(__name__)


class ViewService(BaseService):
    """
    Builds channel profiles and watch histories; records views.

    :param session: Session shared by the units of work.
    :param history_dedup: Move repeat views to the end instead of appending.
    :param history_max: Keep only the newest N entries (``0`` keeps all).
    """

    def __init__(
        self,
        *,
        session: Session,
        history_dedup: bool = False,
        history_max: int = 0,
    ) -> None:
        super().__init__(session=session)
        self.history_dedup = history_dedup
        self.history_max = max(0, int(history_max))

    # ------------------------------------------------------------------ #
    # Channel profile
    # ------------------------------------------------------------------ #

    def build_channel_view(self, username: str | None, requester_id: int | None) -> ChannelViewOut:
        """
        Profile of the channel owned by ``username``.

        :param username: Target handle (case-insensitive).
        :param requester_id: Viewing user, or ``None`` when anonymous.
        :raises ValidationError: If ``username`` is blank.
        :raises NotFoundError: If no such user exists.
        """
        if not username or not username.strip():
            raise ValidationError("Username is missing")

        with self.ro_uow() as uow:
            channel = self._resolve_channel(uow, username)
            return self._project_channel(
                channel,
                subscribers=uow.subscriptions.count_subscribers(channel.id),
                subscribed_to=uow.subscriptions.count_subscribed_to(channel.id),
                is_subscribed=self._is_subscribed(uow, requester_id, channel.id),
            )

    @staticmethod
    def _resolve_channel(uow: SQLAlchemyRepositoryContainer, username: str) -> User:
        channel = uow.users.get_by_username(username)
        if channel is None:
            raise NotFoundError("Channel", username.strip().lower())
        return channel

    @staticmethod
    def _is_subscribed(
        uow: SQLAlchemyRepositoryContainer, requester_id: int | None, channel_id: int
    ) -> bool:
        if requester_id is None:
            return False
        return uow.subscriptions.exists_edge(requester_id, channel_id)

    @staticmethod
    def _project_channel(
        channel: User, *, subscribers: int, subscribed_to: int, is_subscribed: bool
    ) -> ChannelViewOut:
        return ChannelViewOut(
            full_name=channel.full_name,
            username=channel.username,
            email=channel.email,
            avatar_ref=channel.avatar_ref,
            cover_image_ref=channel.cover_image_ref or "",
            subscribers_count=subscribers,
            channels_subscribed_to_count=subscribed_to,
            is_subscribed=is_subscribed,
        )

    # ------------------------------------------------------------------ #
    # Watch history
    # ------------------------------------------------------------------ #

    def build_watch_history(self, user_id: int) -> list[EnrichedVideoOut]:
        """
        The user's watch history, joined against the catalog in recorded order.

        Ids whose video no longer exists are dropped silently.

        :raises NotFoundError: If the user does not exist.
        """
        with self.ro_uow() as uow:
            history = self._history_ids(uow, user_id)
            catalog = uow.videos.get_many(history)
            items = [self._enrich(catalog[vid]) for vid in history if vid in catalog]

        dropped = len(history) - len(items)
        if dropped:
            log.debug(
                "watch history skipped %d missing videos", dropped, extra={"user_id": user_id}
            )
        return items

    @staticmethod
    def _history_ids(uow: SQLAlchemyRepositoryContainer, user_id: int) -> list[int]:
        """Recorded video ids, oldest first."""
        if not uow.users.exists(id=user_id):
            raise NotFoundError("User", user_id)
        return uow.watch_history.list_video_ids(user_id)

    @staticmethod
    def _owner_summary(owner: User | None) -> OwnerSummaryOut | None:
        if owner is None:
            return None
        return OwnerSummaryOut(
            full_name=owner.full_name,
            username=owner.username,
            avatar_ref=owner.avatar_ref,
        )

    def _enrich(self, video: Video) -> EnrichedVideoOut:
        return EnrichedVideoOut(
            id=video.id,
            title=video.title,
            description=video.description,
            video_file=video.video_file,
            thumbnail=video.thumbnail,
            duration=video.duration,
            views=video.views,
            is_published=video.is_published,
            owner=self._owner_summary(video.owner),
            created_at=video.created_at,
        )

    # ------------------------------------------------------------------ #
    # Recording
    # ------------------------------------------------------------------ #

    def record_view(self, user_id: int, video_id: int) -> None:
        """
        Append ``video_id`` to the user's history and bump its view count.

        :raises NotFoundError: If the user or the video does not exist.
        """
        with self.rw_uow() as uow:
            if not uow.users.exists(id=user_id):
                raise NotFoundError("User", user_id)
            if not uow.videos.exists(id=video_id):
                raise NotFoundError("Video", video_id)
            uow.watch_history.append(
                user_id,
                video_id,
                dedup=self.history_dedup,
                max_len=self.history_max,
            )
            uow.videos.increment_views(video_id)
