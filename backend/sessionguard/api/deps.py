"""Shared API helpers: service wiring, outcome mapping and cookies."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from http import HTTPStatus
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from sessionguard.api.transport import extract_bearer_token
from sessionguard.core.errors import APIError, Conflict, NotFound, ServiceUnavailable, Unauthorized
from sessionguard.core.extensions import get_refresh_token_store, get_revocation_list
from sessionguard.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from sessionguard.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from sessionguard.services._shared.outcome import ErrorKind, Outcome
from sessionguard.services.auth.dto import AuthTokenConfig
from sessionguard.services.auth.service import SessionCoordinator
from sessionguard.services.identity.service import IdentityService

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def get_session_coordinator() -> SessionCoordinator:
    """Build a coordinator over the stores attached to the current app."""
    cfg = AuthTokenConfig.from_config(current_app.config)
    return SessionCoordinator(
        token_codec=JWTTokenCodec(
            access_expires=cfg.access_expires,
            refresh_expires=cfg.refresh_expires,
        ),
        refresh_store=get_refresh_token_store(),
        revocation_list=get_revocation_list(),
        password_hasher=WerkzeugPasswordHasher(),
        token_cfg=cfg,
    )


def get_identity_service() -> IdentityService:
    return IdentityService(password_hasher=WerkzeugPasswordHasher())


# --------------------------------------------------------------------------- #
# Outcome -> HTTP
# --------------------------------------------------------------------------- #

_ERRORS: dict[ErrorKind, Callable[[], APIError]] = {
    ErrorKind.AUTHENTICATION_FAILED: lambda: Unauthorized(
        "Invalid email or password", code="authentication_failed"
    ),
    ErrorKind.DUPLICATE_EMAIL: lambda: Conflict("Email already in use", code="duplicate_email"),
    ErrorKind.REFRESH_EXPIRED: lambda: Unauthorized(
        "Refresh token has expired", code="refresh_expired"
    ),
    ErrorKind.REFRESH_INVALID: lambda: Unauthorized(
        "Refresh token is not valid", code="refresh_invalid"
    ),
    ErrorKind.INVALID_TOKEN: lambda: Unauthorized("Token is not valid", code="invalid_token"),
    ErrorKind.USER_NOT_FOUND: lambda: NotFound("User not found", code="user_not_found"),
    ErrorKind.INVALID_PROFILE: lambda: APIError(
        "Profile fields are not valid",
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
        code="invalid_profile",
    ),
    ErrorKind.STORAGE_ERROR: lambda: ServiceUnavailable(),
}


def unwrap_or_raise(outcome: Outcome[T]) -> T:
    """Return the outcome's value or raise the matching :class:`APIError`."""
    if outcome.error is not None:
        raise _ERRORS[outcome.error]()
    return outcome.value  # type: ignore[return-value]


def require_identity(coordinator: SessionCoordinator) -> int | str:
    """Return the identity of the bearer access token, or raise 401."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise Unauthorized("Missing bearer token", code="invalid_token")
    return unwrap_or_raise(coordinator.get_identity(token))


# --------------------------------------------------------------------------- #
# Refresh cookie
# --------------------------------------------------------------------------- #


def refresh_cookie_name() -> str:
    return str(current_app.config.get("REFRESH_COOKIE_NAME", "refreshToken"))


def set_refresh_cookie(response: Response, token: str) -> None:
    """Attach the refresh token as an HttpOnly cookie scoped to the auth routes."""
    lifetime = AuthTokenConfig.from_config(current_app.config).refresh_expires
    response.set_cookie(
        refresh_cookie_name(),
        token,
        max_age=int(lifetime.total_seconds()),
        httponly=True,
        secure=bool(current_app.config.get("REFRESH_COOKIE_SECURE", True)),
        samesite=current_app.config.get("REFRESH_COOKIE_SAMESITE", "Lax"),
        path=current_app.config.get("REFRESH_COOKIE_PATH", "/api/v1/auth"),
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        refresh_cookie_name(),
        httponly=True,
        secure=bool(current_app.config.get("REFRESH_COOKIE_SECURE", True)),
        samesite=current_app.config.get("REFRESH_COOKIE_SAMESITE", "Lax"),
        path=current_app.config.get("REFRESH_COOKIE_PATH", "/api/v1/auth"),
    )


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
