"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

if TYPE_CHECKING:
    from sessionguard.services._shared.ports import RefreshTokenStore, RevocationList

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

REFRESH_STORE_KEY = "refresh_token_store"
REVOCATION_LIST_KEY = "revocation_list"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the token stores.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. When ``REDIS_URL`` is
        configured the session and revocation stores are Redis-backed;
        otherwise process-local in-memory stores are attached, which is only
        suitable for tests and single-worker development.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from sessionguard import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        app.extensions.pop("redis_client", None)
        _attach_in_memory_stores(app)
        return

    timeout = float(app.config.get("STORAGE_TIMEOUT_SECONDS", 2.0))
    client = redis.Redis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = client
    _attach_redis_stores(app, client)


def _attach_in_memory_stores(app: Flask) -> None:
    from sessionguard.services._shared.ports import (
        InMemoryRefreshTokenStore,
        InMemoryRevocationList,
    )

    app.extensions[REFRESH_STORE_KEY] = InMemoryRefreshTokenStore()
    app.extensions[REVOCATION_LIST_KEY] = InMemoryRevocationList()


def _attach_redis_stores(app: Flask, client: redis.Redis) -> None:
    from sessionguard.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
    from sessionguard.infra.redis.redis_revocation_list import RedisRevocationList

    app.extensions[REFRESH_STORE_KEY] = RedisRefreshTokenStore(r=client)
    app.extensions[REVOCATION_LIST_KEY] = RedisRevocationList(r=client)


def get_refresh_token_store() -> RefreshTokenStore:
    """Return the session store bound to the current application."""
    return current_app.extensions[REFRESH_STORE_KEY]


def get_revocation_list() -> RevocationList:
    """Return the revocation list bound to the current application."""
    return current_app.extensions[REVOCATION_LIST_KEY]
