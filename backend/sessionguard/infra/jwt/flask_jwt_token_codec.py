# sessionguard/infra/jwt/flask_jwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

from sessionguard.services._shared.errors import TokenExpiredError, TokenInvalidError
from sessionguard.services._shared.ports import Identity, TokenCodec

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Token codec on top of Flask-JWT-Extended (PyJWT underneath).

    Every token carries ``sub`` (identity, as a string), ``type``, ``iat``,
    ``exp`` and a random ``jti``, so two tokens minted in the same second for
    the same identity are still distinct values.

    .. note::
       Requires an active Flask app context with ``JWT_SECRET_KEY`` set.

    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime.
    """

    access_expires: timedelta
    refresh_expires: timedelta

    # -------------------- issuing --------------------

    def issue_access_token(self, identity: Identity) -> str:
        return cast(
            str,
            create_access_token(identity=str(identity), expires_delta=self.access_expires),
        )

    def issue_refresh_token(self, identity: Identity) -> str:
        return cast(
            str,
            create_refresh_token(identity=str(identity), expires_delta=self.refresh_expires),
        )

    # -------------------- verification ---------------

    def verify_access_token(self, token: str) -> Identity:
        return self._verify(token, expected_type=ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> Identity:
        return self._verify(token, expected_type=REFRESH_TOKEN_TYPE)

    def remaining_validity(self, token: str) -> timedelta:
        claims = self._decode(token, allow_expired=True)
        expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
        return max(expires_at - datetime.now(UTC), timedelta(0))

    # -------------------- helpers --------------------

    def _verify(self, token: str, *, expected_type: str) -> Identity:
        claims = self._decode(token, allow_expired=False)
        if claims.get("type") != expected_type:
            raise TokenInvalidError(f"Expected a {expected_type} token.")
        return self._coerce_identity(claims.get("sub"))

    @staticmethod
    def _decode(token: str, *, allow_expired: bool) -> dict[str, Any]:
        if not token or not isinstance(token, str):
            raise TokenInvalidError("Token is missing.")
        try:
            claims = decode_token(token, allow_expired=allow_expired)
        except pyjwt.ExpiredSignatureError as exc:
            raise TokenExpiredError("Token has expired.") from exc
        except (pyjwt.InvalidTokenError, JWTExtendedException) as exc:
            raise TokenInvalidError("Token failed verification.") from exc
        if "exp" not in claims:
            raise TokenInvalidError("Token carries no expiry.")
        return cast(dict[str, Any], claims)

    @staticmethod
    def _coerce_identity(subject: Any) -> Identity:
        """Return numeric subjects as ``int``; keep other strings (UUIDs) as-is."""
        if isinstance(subject, int):
            return subject
        if isinstance(subject, str) and subject:
            return int(subject) if subject.isdigit() else subject
        raise TokenInvalidError("Token subject is missing.")
