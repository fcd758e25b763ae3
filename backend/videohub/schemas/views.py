"""Schemas for the read-only channel and watch-history views."""

from __future__ import annotations

from marshmallow import Schema, fields


class ChannelViewSchema(Schema):
    """Public channel profile."""

    full_name = fields.String(data_key="fullName")
    username = fields.String()
    email = fields.String()
    avatar_ref = fields.String(data_key="avatar")
    cover_image_ref = fields.String(data_key="coverImage")
    subscribers_count = fields.Integer(data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(data_key="channelsSubscribedToCount")
    is_subscribed = fields.Boolean(data_key="isSubscribed")


class OwnerSummarySchema(Schema):
    full_name = fields.String(data_key="fullName")
    username = fields.String()
    avatar_ref = fields.String(data_key="avatar")


class EnrichedVideoSchema(Schema):
    """Watch-history item with its owner collapsed into one object."""

    id = fields.Integer()
    title = fields.String()
    description = fields.String()
    video_file = fields.String(data_key="videoFile")
    thumbnail = fields.String()
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean(data_key="isPublished")
    owner = fields.Nested(OwnerSummarySchema, allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
