"""
DTOs for the read-only relational views.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ChannelViewOut:
    """
    Public channel profile with subscription aggregates.

    :param full_name: Channel owner's display name.
    :param username: Channel handle.
    :param email: Channel owner's email.
    :param avatar_ref: Avatar reference.
    :param cover_image_ref: Cover image reference.
    :param subscribers_count: Edges pointing at this channel.
    :param channels_subscribed_to_count: Edges leaving this channel's owner.
    :param is_subscribed: Whether the requester follows this channel.
    """

    full_name: str
    username: str
    email: str
    avatar_ref: str
    cover_image_ref: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


@dataclass(frozen=True, slots=True)
class OwnerSummaryOut:
    """
    Denormalized owner of a video (a single value, never a list).

    :param full_name: Owner display name.
    :param username: Owner handle.
    :param avatar_ref: Owner avatar reference.
    """

    full_name: str
    username: str
    avatar_ref: str


@dataclass(frozen=True, slots=True)
class EnrichedVideoOut:
    """
    Watch-history item joined with its owner.

    ``owner`` is ``None`` when the uploading account no longer exists.
    """

    id: int
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    owner: OwnerSummaryOut | None
    created_at: datetime | None = None
