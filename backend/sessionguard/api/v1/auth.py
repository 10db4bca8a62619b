"""Authentication endpoints: register, login, refresh rotation and logout."""

from __future__ import annotations

from flask import Blueprint, Response, request

from sessionguard.api.deps import (
    clear_refresh_cookie,
    get_identity_service,
    get_session_coordinator,
    json_response,
    refresh_cookie_name,
    set_refresh_cookie,
    timing,
    unwrap_or_raise,
)
from sessionguard.api.transport import extract_bearer_token, extract_refresh_token
from sessionguard.core.errors import Unauthorized
from sessionguard.schemas import (
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenResponseSchema,
    UserSchema,
)
from sessionguard.services.auth.dto import LoginIn, LogoutIn, RefreshIn, TokenPairOut
from sessionguard.services.identity.dto import UserRegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
token_schema = TokenResponseSchema()
user_schema = UserSchema()


def _token_response(pair: TokenPairOut, expires_in: int) -> Response:
    body = {
        "data": token_schema.dump(
            {
                "access_token": pair.access_token,
                "refresh_token": pair.refresh_token,
                "expires_in": expires_in,
            }
        )
    }
    response = json_response(body)
    set_refresh_cookie(response, pair.refresh_token)
    return response


@bp.post("/register")
@timing
def register():
    """Register a new user and return the created representation."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    user = unwrap_or_raise(get_identity_service().register(UserRegisterIn(**payload)))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials; return the pair and set the refresh cookie."""

    data = login_schema.load(request.get_json(silent=True) or {})
    coordinator = get_session_coordinator()
    outcome = coordinator.login(LoginIn(email=data["email"], password=data["password"]))
    pair = unwrap_or_raise(outcome)
    return _token_response(pair, int(coordinator.cfg.access_expires.total_seconds()))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh token from the cookie (or JSON body fallback)."""

    body = refresh_schema.load(request.get_json(silent=True) or {})
    token = extract_refresh_token(request.cookies, refresh_cookie_name(), body)
    if token is None:
        raise Unauthorized("Refresh token is not valid", code="refresh_invalid")

    coordinator = get_session_coordinator()
    pair = unwrap_or_raise(coordinator.rotate(RefreshIn(refresh_token=token)))
    return _token_response(pair, int(coordinator.cfg.access_expires.total_seconds()))


@bp.post("/logout")
@timing
def logout():
    """End the session: bearer access token plus refresh cookie are required."""

    access_token = extract_bearer_token(request.headers.get("Authorization"))
    body = refresh_schema.load(request.get_json(silent=True) or {})
    refresh_token = extract_refresh_token(request.cookies, refresh_cookie_name(), body)
    if access_token is None or refresh_token is None:
        raise Unauthorized("Token is not valid", code="invalid_token")

    unwrap_or_raise(
        get_session_coordinator().logout(
            LogoutIn(access_token=access_token, refresh_token=refresh_token)
        )
    )
    response = Response(status=204)
    clear_refresh_cookie(response)
    return response
