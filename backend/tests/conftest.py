"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Session and
revocation stores are the in-memory implementations, recreated per test.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from sessionguard.core.config import TestingConfig
from sessionguard.core.extensions import REFRESH_STORE_KEY, REVOCATION_LIST_KEY
from sessionguard.core.extensions import db as _db  # Flask-SQLAlchemy instance
from sessionguard.factory import create_app  # application factory under test
from sessionguard.services._shared.ports import (
    InMemoryRefreshTokenStore,
    InMemoryRevocationList,
)


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Never talks to Redis; the in-memory stores are attached instead.
    - Fixed signing keys (32+ bytes, as PyJWT expects for HS256).
    """

    SECRET_KEY = "test-secret-key-with-enough-entropy-0001"
    JWT_SECRET_KEY = "test-jwt-key-with-enough-entropy-000001"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REDIS_URL = ""
    LOG_LEVEL = "WARNING"
    CORS_ORIGINS = "http://localhost:5173"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session."""
    with app.app_context():
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(app, db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    with app.app_context():
        conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(app, db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    SQLAlchemy 2.0 pattern for transactional tests: begin a top-level
    transaction, start a SAVEPOINT per test, and reinstall the SAVEPOINT
    whenever SQLAlchemy ends one.

    Each test also gets its own application context, so ``g`` never
    carries state from one test into the next.
    """
    ctx = app.app_context()
    ctx.push()
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()
        ctx.pop()


@pytest.fixture(autouse=True)
def stores(app):
    """Attach fresh in-memory session/revocation stores for every test.

    Returns
    -------
    tuple[InMemoryRefreshTokenStore, InMemoryRevocationList]
        The stores the API and CLI will resolve from ``app.extensions``.
    """
    refresh_store = InMemoryRefreshTokenStore()
    revocation_list = InMemoryRevocationList()
    app.extensions[REFRESH_STORE_KEY] = refresh_store
    app.extensions[REVOCATION_LIST_KEY] = revocation_list
    return refresh_store, revocation_list


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
