"""
Unit tests for WatchHistoryRepository ordering, dedup and capping.
"""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from tests.factories.video import VideoFactory
from videohub.repositories.video import VideoRepository
from videohub.repositories.watch_history import WatchHistoryRepository


@pytest.fixture()
def repo(session) -> WatchHistoryRepository:
    return WatchHistoryRepository(session=session)


def test_append_preserves_order(repo):
    user_id = UserFactory().id

    for video_id in (5, 3, 9):
        repo.append(user_id, video_id)

    assert repo.list_video_ids(user_id) == [5, 3, 9]


def test_histories_are_per_user(repo):
    first, second = UserFactory().id, UserFactory().id

    repo.append(first, 1)
    repo.append(second, 2)

    assert repo.list_video_ids(first) == [1]
    assert repo.list_video_ids(second) == [2]


def test_dedup_moves_entry_to_end(repo):
    user_id = UserFactory().id

    for video_id in (1, 2, 3):
        repo.append(user_id, video_id)
    repo.append(user_id, 1, dedup=True)

    assert repo.list_video_ids(user_id) == [2, 3, 1]


def test_cap_drops_oldest(repo):
    user_id = UserFactory().id

    for video_id in range(1, 6):
        repo.append(user_id, video_id, max_len=3)

    assert repo.list_video_ids(user_id) == [3, 4, 5]


def test_unknown_user_has_empty_history(repo):
    assert repo.list_video_ids(12345) == []


def test_get_many_skips_missing_ids(session):
    videos = VideoRepository(session=session)
    kept = VideoFactory()

    found = videos.get_many([kept.id, 999, kept.id])

    assert set(found) == {kept.id}
    assert found[kept.id].owner is not None
