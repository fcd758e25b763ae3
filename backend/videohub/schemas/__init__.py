"""Expose Marshmallow schemas for request validation and serialization."""

from __future__ import annotations

from .auth import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    TokenPairSchema,
)
from .user import RegisterSchema, UpdateAccountSchema, UserSchema
from .views import ChannelViewSchema, EnrichedVideoSchema, OwnerSummarySchema

__all__ = [
    "ChangePasswordSchema",
    "ChannelViewSchema",
    "EnrichedVideoSchema",
    "LoginResponseSchema",
    "LoginSchema",
    "OwnerSummarySchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UpdateAccountSchema",
    "UserSchema",
]
