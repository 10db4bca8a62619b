"""Extract token strings from the HTTP envelope.

Pure functions: no Flask globals, no service imports, so the core never sees
headers or cookies.
"""

from __future__ import annotations

from collections.abc import Mapping

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header.

    The scheme is matched case-insensitively; anything else (missing header,
    other scheme, empty token) yields ``None``.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_PREFIX.strip().lower():
        return None
    token = token.strip()
    return token or None


def extract_refresh_token(
    cookies: Mapping[str, str],
    cookie_name: str,
    body: object = None,
) -> str | None:
    """Return the refresh token from the named cookie, else from ``body``.

    :param cookies: Request cookies.
    :param cookie_name: Name of the refresh cookie (``refreshToken`` by default).
    :param body: Parsed JSON body; only a mapping with a string
        ``refresh_token`` is consulted.
    """
    token = cookies.get(cookie_name)
    if token:
        return token
    if isinstance(body, Mapping):
        value = body.get("refresh_token")
        if isinstance(value, str) and value:
            return value
    return None
