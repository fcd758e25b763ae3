"""Unit tests for SessionService: login, authorize, refresh rotation, logout."""

from __future__ import annotations

import threading
import time
from datetime import timedelta

import pytest
from freezegun import freeze_time

from tests.factories import DEFAULT_PASSWORD, UserFactory
from videohub.core.extensions import db as _db
from videohub.infra.jwt import JWTTokenProvider
from videohub.infra.sql import SqlRefreshTokenStore
from videohub.services._shared.errors import AuthError, ValidationError
from videohub.services._shared.ports import InMemoryRefreshTokenStore
from videohub.services.auth.dto import AuthTokenConfig, LoginIn, RefreshIn
from videohub.services.auth.service import (
    INVALID_CREDENTIALS,
    STALE_REFRESH,
    SessionService,
)
from videohub.services.auth.tokens import TokenIssuer
from videohub.services.identity.dto import UserPasswordChangeIn
from videohub.services.identity.service import IdentityService


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def issuer() -> TokenIssuer:
    provider = JWTTokenProvider(
        access_secret="session-access-secret-0123456789",
        refresh_secret="session-refresh-secret-0123456789",
    )
    return TokenIssuer(
        provider,
        AuthTokenConfig(access_expires=timedelta(minutes=15), refresh_expires=timedelta(days=10)),
    )


@pytest.fixture()
def service(session, issuer, memory_store) -> SessionService:
    return SessionService(session=session, issuer=issuer, refresh_store=memory_store)


# -------------------------------- Tests ----------------------------------- #
class TestLogin:
    def test_by_username_records_refresh_token(self, service, memory_store):
        user = UserFactory(username="viewer")

        out = service.login(LoginIn(username="Viewer", password=DEFAULT_PASSWORD))

        assert out.user.id == user.id
        assert memory_store.get(user.id) == out.tokens.refresh_token
        assert service.authorize(out.tokens.access_token) == user.id

    def test_by_email(self, service):
        user = UserFactory(email="viewer@example.com")

        out = service.login(LoginIn(email="VIEWER@example.com", password=DEFAULT_PASSWORD))
        assert out.user.id == user.id

    def test_unknown_user_and_wrong_password_look_the_same(self, service):
        UserFactory(username="known")

        with pytest.raises(AuthError) as unknown:
            service.login(LoginIn(username="ghost", password=DEFAULT_PASSWORD))
        with pytest.raises(AuthError) as wrong:
            service.login(LoginIn(username="known", password="wrong"))

        assert unknown.value.message == wrong.value.message == INVALID_CREDENTIALS

    def test_requires_an_identity(self, service):
        with pytest.raises(ValidationError):
            service.login(LoginIn(password="x"))

    def test_requires_a_password(self, service):
        with pytest.raises(ValidationError):
            service.login(LoginIn(username="someone", password=""))

    def test_second_login_replaces_first_session(self, service):
        UserFactory(username="twice")

        first = service.login(LoginIn(username="twice", password=DEFAULT_PASSWORD))
        service.login(LoginIn(username="twice", password=DEFAULT_PASSWORD))

        with pytest.raises(AuthError):
            service.refresh(RefreshIn(refresh_token=first.tokens.refresh_token))


class TestAuthorize:
    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, service, token):
        with pytest.raises(AuthError, match="Unauthorized request"):
            service.authorize(token)

    def test_refresh_token_is_not_accepted(self, service):
        UserFactory(username="typed")
        out = service.login(LoginIn(username="typed", password=DEFAULT_PASSWORD))

        with pytest.raises(AuthError):
            service.authorize(out.tokens.refresh_token)

    def test_expired_access_token(self, service):
        UserFactory(username="late")
        with freeze_time("2026-03-01 08:00:00"):
            out = service.login(LoginIn(username="late", password=DEFAULT_PASSWORD))
        with freeze_time("2026-03-01 08:20:00"):
            with pytest.raises(AuthError):
                service.authorize(out.tokens.access_token)

    def test_details_hidden_unless_enabled(self, session, issuer, memory_store):
        quiet = SessionService(session=session, issuer=issuer, refresh_store=memory_store)
        loud = SessionService(
            session=session, issuer=issuer, refresh_store=memory_store, expose_details=True
        )

        with pytest.raises(AuthError) as hidden:
            quiet.authorize("garbage")
        with pytest.raises(AuthError) as shown:
            loud.authorize("garbage")

        assert hidden.value.message == "Invalid access token"
        assert shown.value.message.startswith("Invalid access token: ")


class TestRefresh:
    def test_rotates_and_rejects_replay(self, service, memory_store):
        user = UserFactory(username="rotor")
        first = service.login(LoginIn(username="rotor", password=DEFAULT_PASSWORD)).tokens

        second = service.refresh(RefreshIn(refresh_token=first.refresh_token))

        assert second.refresh_token != first.refresh_token
        assert memory_store.get(user.id) == second.refresh_token
        with pytest.raises(AuthError, match=STALE_REFRESH):
            service.refresh(RefreshIn(refresh_token=first.refresh_token))
        # The replay must not disturb the legitimate holder
        assert memory_store.get(user.id) == second.refresh_token
        assert service.refresh(RefreshIn(refresh_token=second.refresh_token))

    def test_after_logout(self, service):
        user = UserFactory(username="leaver")
        tokens = service.login(LoginIn(username="leaver", password=DEFAULT_PASSWORD)).tokens

        service.logout(user.id)

        with pytest.raises(AuthError, match=STALE_REFRESH):
            service.refresh(RefreshIn(refresh_token=tokens.refresh_token))

    def test_access_token_cannot_refresh(self, service):
        UserFactory(username="mixup")
        tokens = service.login(LoginIn(username="mixup", password=DEFAULT_PASSWORD)).tokens

        with pytest.raises(AuthError, match="Invalid refresh token"):
            service.refresh(RefreshIn(refresh_token=tokens.access_token))

    def test_expired_refresh_token(self, service):
        UserFactory(username="stale")
        with freeze_time("2026-03-01 08:00:00"):
            tokens = service.login(LoginIn(username="stale", password=DEFAULT_PASSWORD)).tokens
        with freeze_time("2026-03-12 08:00:00"):
            with pytest.raises(AuthError):
                service.refresh(RefreshIn(refresh_token=tokens.refresh_token))

    def test_blank_token(self, service):
        with pytest.raises(AuthError):
            service.refresh(RefreshIn(refresh_token="  "))

    def test_user_deleted_after_login(self, service, session):
        user = UserFactory(username="gone")
        tokens = service.login(LoginIn(username="gone", password=DEFAULT_PASSWORD)).tokens
        session.delete(user)
        session.commit()

        with pytest.raises(AuthError):
            service.refresh(RefreshIn(refresh_token=tokens.refresh_token))

    def test_rotation_over_the_users_table(self, session, issuer):
        store = SqlRefreshTokenStore(session=session)
        service = SessionService(session=session, issuer=issuer, refresh_store=store)
        user = UserFactory(username="sql")
        first = service.login(LoginIn(username="sql", password=DEFAULT_PASSWORD)).tokens

        assert store.get(user.id) == first.refresh_token
        second = service.refresh(RefreshIn(refresh_token=first.refresh_token))
        assert store.get(user.id) == second.refresh_token
        with pytest.raises(AuthError):
            service.refresh(RefreshIn(refresh_token=first.refresh_token))


class TestPasswordChangeEndsSession:
    def test_old_refresh_and_old_password_stop_working(self, service, session, memory_store):
        user = UserFactory(username="mover")
        tokens = service.login(LoginIn(username="mover", password=DEFAULT_PASSWORD)).tokens
        identity = IdentityService(
            session=session, refresh_store=memory_store, default_avatar_url="/a.png"
        )

        identity.change_password(
            UserPasswordChangeIn(
                user_id=user.id, old_password=DEFAULT_PASSWORD, new_password="fresh-pass-1"
            )
        )

        with pytest.raises(AuthError):
            service.refresh(RefreshIn(refresh_token=tokens.refresh_token))
        with pytest.raises(AuthError):
            service.login(LoginIn(username="mover", password=DEFAULT_PASSWORD))
        assert service.login(LoginIn(username="mover", password="fresh-pass-1"))


class _GatedStore(InMemoryRefreshTokenStore):
    """Holds every caller at the swap until all of them have arrived."""

    def __init__(self, parties: int) -> None:
        super().__init__()
        self.gate = threading.Barrier(parties, timeout=5)

    def compare_and_swap(self, user_id, expected, new):
        self.gate.wait()
        return super().compare_and_swap(user_id, expected, new)


class TestConcurrentRefresh:
    def test_same_token_has_exactly_one_winner(self, app, session, issuer):
        store = _GatedStore(parties=2)
        user_id = UserFactory(username="racer").id
        login = SessionService(session=session, issuer=issuer, refresh_store=store)
        token = login.login(
            LoginIn(username="racer", password=DEFAULT_PASSWORD)
        ).tokens.refresh_token
        outcomes: dict[int, str] = {}

        def attempt(slot: int) -> None:
            # Own app context, so each thread gets its own scoped session
            with app.app_context():
                service = SessionService(session=_db.session, issuer=issuer, refresh_store=store)
                try:
                    service.refresh(RefreshIn(refresh_token=token))
                    outcomes[slot] = "ok"
                except AuthError:
                    outcomes[slot] = "rejected"

        first = threading.Thread(target=attempt, args=(0,))
        second = threading.Thread(target=attempt, args=(1,))
        first.start()
        # Start the second caller once the first is parked at the swap, so the
        # database reads never overlap on the shared in-memory connection
        deadline = time.monotonic() + 5
        while store.gate.n_waiting < 1 and time.monotonic() < deadline:
            time.sleep(0.005)
        second.start()
        first.join(timeout=10)
        second.join(timeout=10)

        assert sorted(outcomes.values()) == ["ok", "rejected"]
        assert store.get(user_id) not in (None, token)
