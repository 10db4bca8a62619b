"""Profile endpoints for the authenticated user."""

from __future__ import annotations

from flask import Blueprint, request

from sessionguard.api.deps import (
    get_identity_service,
    get_session_coordinator,
    json_response,
    require_identity,
    timing,
    unwrap_or_raise,
)
from sessionguard.core.errors import NotFound
from sessionguard.schemas import UserSchema, UserUpdateSchema
from sessionguard.services.identity.dto import UserUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_update_schema = UserUpdateSchema()


def _current_user_id() -> int:
    identity = require_identity(get_session_coordinator())
    if not isinstance(identity, int):
        # tokens minted for non-numeric subjects have no user row
        raise NotFound("User not found", code="user_not_found")
    return identity


@bp.get("/me")
@timing
def get_me():
    """Return the authenticated user's profile."""

    user_id = _current_user_id()
    user = unwrap_or_raise(get_identity_service().get_user_info(user_id))
    return json_response({"data": user_schema.dump(user)})


@bp.patch("/me")
@timing
def update_me():
    """Apply a partial profile update."""

    user_id = _current_user_id()
    payload = user_update_schema.load(request.get_json(silent=True) or {})
    user = unwrap_or_raise(get_identity_service().edit_user_info(user_id, UserUpdateIn(**payload)))
    return json_response({"data": user_schema.dump(user)})
