"""Persistence-only repositories, one per aggregate."""

from .subscription import SubscriptionRepository
from .user import UserRepository
from .video import VideoRepository
from .watch_history import WatchHistoryRepository

__all__ = [
    "UserRepository",
    "SubscriptionRepository",
    "VideoRepository",
    "WatchHistoryRepository",
]
