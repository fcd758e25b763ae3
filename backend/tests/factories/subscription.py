"""Factory Boy definition for :class:`videohub.models.subscription.Subscription`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from videohub.models.subscription import Subscription


class SubscriptionFactory(BaseFactory):
    """Edge ``subscriber_id -> channel_id``; both ends default to new users."""

    class Meta:
        model = Subscription

    id = None
    subscriber_id = factory.LazyFunction(lambda: _new_user_id())
    channel_id = factory.LazyFunction(lambda: _new_user_id())


def _new_user_id() -> int:
    from tests.factories.user import UserFactory

    return UserFactory().id
