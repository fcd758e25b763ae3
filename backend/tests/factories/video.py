"""Factory Boy definition for :class:`videohub.models.video.Video`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from videohub.models.video import Video


class VideoFactory(BaseFactory):
    class Meta:
        model = Video

    id = None
    title = factory.Faker("sentence", nb_words=4)
    description = factory.Faker("paragraph")
    video_file = factory.Sequence(lambda n: f"https://cdn.example.com/videos/{n}.mp4")
    thumbnail = factory.Sequence(lambda n: f"https://cdn.example.com/thumbs/{n}.jpg")
    duration = 120.5
    views = 0
    is_published = True
    owner = factory.SubFactory(UserFactory)
