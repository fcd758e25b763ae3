"""Pytest fixtures configuring an isolated database per test.

Each test gets freshly created tables on an in-memory SQLite database (a single
shared connection via Flask-SQLAlchemy's StaticPool), dropped again afterwards,
so committed data never leaks between cases.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

import pytest
from flask import Flask

from videohub.core.config import TestingConfig
from videohub.core.extensions import db as _db
from videohub.factory import create_app
from videohub.services._shared.ports import InMemoryRefreshTokenStore


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Never talks to Redis; refresh tokens live on the users table.
    - Keeps token failure causes visible so assertions can read them.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REDIS_URL = None
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app(tmp_path_factory) -> Flask:
    """Create a Flask application configured for testing."""

    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    application = create_app(TestConfig, instance_relative_config=False)
    media = tmp_path_factory.mktemp("media")
    application.config.update(
        UPLOAD_TEMP_DIR=str(media / "temp"),
        MEDIA_ROOT=str(media / "public"),
    )
    return application


@pytest.fixture()
def db(app: Flask) -> Generator[Any, None, None]:
    """Create all tables for one test and drop them afterwards."""

    with app.app_context():
        _db.create_all()
        try:
            yield _db
        finally:
            _db.session.remove()
            _db.drop_all()


@pytest.fixture()
def session(db):
    """The Flask-scoped session used by services under test."""

    return db.session


@pytest.fixture()
def client(app: Flask, db):
    """Return a Flask test client backed by a fresh schema."""

    return app.test_client()


@pytest.fixture()
def memory_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the session fixture --------------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "db" not in request.fixturenames:
        SQLAlchemySession.set(None)
        yield
        return
    SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
