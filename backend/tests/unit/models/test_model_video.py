"""Tests for the Video, Subscription and WatchHistoryEntry models."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from tests.factories import SubscriptionFactory, UserFactory, VideoFactory
from videohub.models.subscription import Subscription
from videohub.models.video import Video
from videohub.models.watch_history import WatchHistoryEntry


class TestVideo:
    def test_owner_is_loaded_with_video(self, session):
        owner = UserFactory(username="maker")
        video_id = VideoFactory(owner=owner).id
        session.expunge_all()

        video = session.get(Video, video_id)
        assert video.owner.username == "maker"
        assert video.views == 0
        assert video.is_published is True

    def test_owner_is_optional(self, session):
        assert VideoFactory(owner=None).owner_id is None


class TestSubscription:
    def test_pair_is_unique(self, session):
        edge = SubscriptionFactory()

        session.add(Subscription(subscriber_id=edge.subscriber_id, channel_id=edge.channel_id))
        with pytest.raises(IntegrityError):
            session.commit()


class TestWatchHistoryEntry:
    def test_defaults(self, session):
        user = UserFactory()
        entry = WatchHistoryEntry(user_id=user.id, video_id=10, position=0)
        session.add(entry)
        session.commit()

        assert entry.watched_at is not None
