"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for account registration (JSON or multipart form fields)."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True, validate=validate.Length(max=50))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    full_name = fields.String(data_key="fullName", required=True, validate=validate.Length(max=100))
    password = fields.String(required=True, validate=validate.Length(max=128))
    avatar = fields.String(load_default=None, validate=validate.Length(max=512))
    cover_image = fields.String(
        data_key="coverImage", load_default=None, validate=validate.Length(max=512)
    )


class UpdateAccountSchema(Schema):
    """Fields a user may overwrite on their own account."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(data_key="fullName", required=True, validate=validate.Length(max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))


class UserSchema(Schema):
    """Public representation of a user. Never includes credentials."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    full_name = fields.String(data_key="fullName")
    avatar_ref = fields.String(data_key="avatar")
    cover_image_ref = fields.String(data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
