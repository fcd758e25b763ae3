"""Unit tests for TokenIssuer over the PyJWT provider."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from freezegun import freeze_time

from videohub.infra.jwt import JWTTokenProvider
from videohub.services._shared.ports import TokenError
from videohub.services.auth.dto import AuthTokenConfig
from videohub.services.auth.tokens import TokenIssuer, subject_of

ACCESS_SECRET = "unit-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-secret-0123456789abcdef"


@pytest.fixture
def provider() -> JWTTokenProvider:
    return JWTTokenProvider(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def issuer(provider) -> TokenIssuer:
    return TokenIssuer(
        provider,
        AuthTokenConfig(access_expires=timedelta(minutes=15), refresh_expires=timedelta(days=10)),
    )


class TestIssue:
    def test_access_token_claims(self, issuer):
        token = issuer.issue_access_token(
            7, profile={"username": "ann", "email": "ann@example.com", "fullName": "Ann"}
        )
        claims = issuer.decode_access(token)

        assert subject_of(claims) == 7
        assert claims["type"] == "access"
        assert claims["username"] == "ann"
        assert claims["exp"] - claims["iat"] == 15 * 60
        assert claims["jti"]

    def test_refresh_token_carries_only_identity(self, issuer):
        claims = issuer.decode_refresh(issuer.issue_refresh_token(7))

        assert subject_of(claims) == 7
        assert claims["type"] == "refresh"
        assert "username" not in claims
        assert claims["exp"] - claims["iat"] == 10 * 24 * 3600

    def test_pairs_are_unique_even_within_one_second(self, issuer):
        with freeze_time("2026-01-01 12:00:00"):
            first = issuer.issue_pair(1)
            second = issuer.issue_pair(1)

        assert first.refresh_token != second.refresh_token
        assert first.access_token != second.access_token

    def test_tokens_use_distinct_keys(self, issuer):
        pair = issuer.issue_pair(3)

        jwt.decode(pair.access_token, ACCESS_SECRET, algorithms=["HS256"])
        jwt.decode(pair.refresh_token, REFRESH_SECRET, algorithms=["HS256"])
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(pair.refresh_token, ACCESS_SECRET, algorithms=["HS256"])


class TestDecode:
    def test_refresh_token_is_not_an_access_token(self, issuer):
        refresh = issuer.issue_refresh_token(1)

        with pytest.raises(TokenError):
            issuer.decode_access(refresh)

    def test_access_token_is_not_a_refresh_token(self, issuer):
        with pytest.raises(TokenError):
            issuer.decode_refresh(issuer.issue_access_token(1))

    def test_type_claim_is_checked_even_with_the_right_key(self, provider):
        forged = jwt.encode(
            {"sub": "1", "type": "refresh", "exp": 4102444800}, ACCESS_SECRET, algorithm="HS256"
        )
        with pytest.raises(TokenError, match="Expected a access token"):
            provider.decode(forged, token_type="access")

    def test_expired_access_token(self, issuer):
        with freeze_time("2026-01-01 12:00:00"):
            token = issuer.issue_access_token(1)
        with freeze_time("2026-01-01 12:16:00"):
            with pytest.raises(TokenError) as info:
                issuer.decode_access(token)
        assert isinstance(info.value.__cause__, jwt.ExpiredSignatureError)

    def test_malformed_token(self, issuer):
        with pytest.raises(TokenError):
            issuer.decode_access("not-a-jwt")

    def test_missing_subject_is_rejected(self, provider):
        token = jwt.encode({"type": "access", "exp": 4102444800}, ACCESS_SECRET, algorithm="HS256")
        with pytest.raises(TokenError):
            provider.decode(token, token_type="access")


class TestProviderConfig:
    def test_same_secret_for_both_types_is_refused(self):
        with pytest.raises(ValueError):
            JWTTokenProvider(access_secret="same-secret", refresh_secret="same-secret")

    def test_unknown_token_type(self, provider):
        with pytest.raises(ValueError):
            provider.encode({"sub": "1"}, token_type="id")
