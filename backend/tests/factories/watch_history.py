"""Factory Boy definition for :class:`videohub.models.watch_history.WatchHistoryEntry`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from videohub.models.watch_history import WatchHistoryEntry


class WatchHistoryEntryFactory(BaseFactory):
    """History row; pass ``user_id`` and ``video_id`` explicitly."""

    class Meta:
        model = WatchHistoryEntry

    id = None
    position = factory.Sequence(lambda n: n)
