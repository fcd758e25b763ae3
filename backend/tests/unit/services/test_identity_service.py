"""Unit tests for IdentityService (registration, profile updates, passwords)."""

from __future__ import annotations

import pytest

from tests.factories import DEFAULT_PASSWORD, UserFactory
from videohub.models.user import User
from videohub.services._shared.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from videohub.services.identity.dto import (
    UserAccountUpdateIn,
    UserPasswordChangeIn,
    UserPublicOut,
    UserRegisterIn,
)
from videohub.services.identity.passwords import verify_password
from videohub.services.identity.service import IdentityService

DEFAULT_AVATAR = "https://cdn.example.com/avatars/placeholder.png"


@pytest.fixture()
def service(session, memory_store) -> IdentityService:
    return IdentityService(
        session=session,
        refresh_store=memory_store,
        default_avatar_url=DEFAULT_AVATAR,
    )


def _register_in(**overrides) -> UserRegisterIn:
    data = {
        "username": "Channel_One",
        "email": "One@Example.com",
        "full_name": "Channel One",
        "password": "s3cret!",
    }
    data.update(overrides)
    return UserRegisterIn(**data)


class TestRegister:
    def test_normalises_and_hashes(self, service, session):
        out = service.register(_register_in())

        assert isinstance(out, UserPublicOut)
        assert out.username == "channel_one"
        assert out.email == "one@example.com"
        assert out.avatar_ref == DEFAULT_AVATAR
        assert out.cover_image_ref == ""
        assert not hasattr(out, "password_hash")

        stored = session.get(User, out.id)
        assert stored.password_hash != "s3cret!"
        assert verify_password(stored.password_hash, "s3cret!")
        assert stored.refresh_token is None

    def test_keeps_given_media_refs(self, service):
        out = service.register(
            _register_in(avatar_ref="/media/a.png", cover_image_ref="/media/c.png")
        )
        assert out.avatar_ref == "/media/a.png"
        assert out.cover_image_ref == "/media/c.png"

    @pytest.mark.parametrize("field", ["username", "email", "full_name", "password"])
    def test_blank_field_is_rejected(self, service, field):
        with pytest.raises(ValidationError) as info:
            service.register(_register_in(**{field: "   "}))
        assert info.value.message == "All fields are required"
        assert info.value.errors

    def test_duplicate_username_differing_in_case(self, service, session):
        UserFactory(username="channel_one")
        before = session.query(User).count()

        with pytest.raises(ConflictError):
            service.register(_register_in(username="CHANNEL_ONE"))
        assert session.query(User).count() == before

    def test_duplicate_email(self, service, session):
        UserFactory(email="one@example.com")
        before = session.query(User).count()

        with pytest.raises(ConflictError, match="already exists"):
            service.register(_register_in(username="someone_else"))
        assert session.query(User).count() == before

    def test_email_without_at_sign(self, service):
        with pytest.raises(ValidationError):
            service.register(_register_in(email="not-an-email"))


class TestEnsureRegistrable:
    def test_free_identity_passes_without_writing(self, service, session):
        assert service.ensure_registrable(_register_in()) is None
        assert session.query(User).count() == 0

    def test_taken_username_or_email(self, service):
        UserFactory(username="channel_one", email="elsewhere@example.com")

        with pytest.raises(ConflictError):
            service.ensure_registrable(_register_in())
        with pytest.raises(ConflictError):
            service.ensure_registrable(
                _register_in(username="fresh", email="ELSEWHERE@example.com")
            )

    def test_blank_field(self, service):
        with pytest.raises(ValidationError, match="All fields are required"):
            service.ensure_registrable(_register_in(password=""))


class TestGetUser:
    def test_returns_public_view(self, service):
        user = UserFactory(username="reader")

        out = service.get_user(user.id)
        assert out.username == "reader"

    def test_missing_user(self, service):
        with pytest.raises(NotFoundError):
            service.get_user(9999)


class TestUpdates:
    def test_update_account_overwrites_fields(self, service):
        user = UserFactory()

        out = service.update_account(
            UserAccountUpdateIn(user_id=user.id, full_name="New Name", email="NEW@example.com")
        )
        assert out.full_name == "New Name"
        assert out.email == "new@example.com"

    def test_update_account_rejects_foreign_email(self, service):
        UserFactory(email="taken@example.com")
        user = UserFactory()

        with pytest.raises(ConflictError):
            service.update_account(
                UserAccountUpdateIn(user_id=user.id, full_name="X", email="taken@example.com")
            )

    def test_update_account_allows_own_email(self, service):
        user = UserFactory(email="mine@example.com")

        out = service.update_account(
            UserAccountUpdateIn(user_id=user.id, full_name="Renamed", email="mine@example.com")
        )
        assert out.full_name == "Renamed"

    def test_update_account_requires_both_fields(self, service):
        user = UserFactory()

        with pytest.raises(ValidationError):
            service.update_account(UserAccountUpdateIn(user_id=user.id, full_name="", email=""))

    def test_update_avatar_and_cover(self, service):
        user = UserFactory()

        assert service.update_avatar(user.id, "/media/new.png").avatar_ref == "/media/new.png"
        assert service.update_cover_image(user.id, "/media/c.png").cover_image_ref == "/media/c.png"

    @pytest.mark.parametrize("ref", [None, "", "  "])
    def test_update_avatar_without_reference(self, service, ref):
        user = UserFactory()

        with pytest.raises(ValidationError, match="Avatar file is missing"):
            service.update_avatar(user.id, ref)

    def test_update_cover_for_missing_user(self, service):
        with pytest.raises(NotFoundError):
            service.update_cover_image(4242, "/media/c.png")


class TestChangePassword:
    def test_replaces_hash_and_clears_session(self, service, session, memory_store):
        user = UserFactory()
        memory_store.set(user.id, "live-refresh-token")

        service.change_password(
            UserPasswordChangeIn(
                user_id=user.id, old_password=DEFAULT_PASSWORD, new_password="n3w-pass"
            )
        )

        stored = session.get(User, user.id)
        assert verify_password(stored.password_hash, "n3w-pass")
        assert not verify_password(stored.password_hash, DEFAULT_PASSWORD)
        assert memory_store.get(user.id) is None

    def test_wrong_old_password(self, service, memory_store):
        user = UserFactory()
        memory_store.set(user.id, "live-refresh-token")

        with pytest.raises(AuthError, match="Invalid old password"):
            service.change_password(
                UserPasswordChangeIn(user_id=user.id, old_password="nope", new_password="x")
            )
        assert memory_store.get(user.id) == "live-refresh-token"

    def test_missing_user(self, service):
        with pytest.raises(NotFoundError):
            service.change_password(
                UserPasswordChangeIn(user_id=777, old_password="a", new_password="b")
            )
