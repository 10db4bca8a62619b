"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from sessionguard.api.deps import json_response, timing
from sessionguard.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and session-store health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"

    store_status = "memory"
    if current_app.extensions.get("redis_client") is not None:
        try:
            current_app.extensions["redis_client"].ping()
            store_status = "ok"
        except RedisError:  # pragma: no cover - needs a live Redis
            current_app.logger.exception("healthcheck.redis_error")
            store_status = "fail"

    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": "ok", "db": db_status, "sessions": store_status, "version": version}
    return json_response(payload)
