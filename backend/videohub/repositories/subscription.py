"""Read-side repository for subscription edges."""

from __future__ import annotations

from sqlalchemy import func, select

from videohub.models.subscription import Subscription
from videohub.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Counting and existence queries over :class:`Subscription`."""

    model = Subscription

    def count_subscribers(self, channel_id: int) -> int:
        """Number of edges whose channel is ``channel_id``."""
        stmt = select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)
        return int(self.session.execute(stmt).scalar_one())

    def count_subscribed_to(self, subscriber_id: int) -> int:
        """Number of edges whose subscriber is ``subscriber_id``."""
        stmt = select(func.count(Subscription.id)).where(
            Subscription.subscriber_id == subscriber_id
        )
        return int(self.session.execute(stmt).scalar_one())

    def exists_edge(self, subscriber_id: int, channel_id: int) -> bool:
        return self.exists(subscriber_id=subscriber_id, channel_id=channel_id)
