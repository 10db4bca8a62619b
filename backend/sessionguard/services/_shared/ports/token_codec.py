from __future__ import annotations

from datetime import timedelta
from typing import Protocol

Identity = int | str


class TokenCodec(Protocol):
    """
    Port for issuing and verifying signed, expiring tokens.

    Two kinds exist: short-lived **access** tokens (never stored) and
    long-lived **refresh** tokens (tracked by the session store). Each
    carries the identity it was issued to and its own expiry.
    """

    def issue_access_token(self, identity: Identity) -> str:
        """Return a fresh access token for ``identity``. Always succeeds."""

    def issue_refresh_token(self, identity: Identity) -> str:
        """Return a fresh refresh token for ``identity``. Always succeeds."""

    def verify_access_token(self, token: str) -> Identity:
        """
        Return the identity bound to an access token.

        :raises TokenExpiredError: When the token is past its expiry.
        :raises TokenInvalidError: On bad signature, structure or token kind.
        """

    def verify_refresh_token(self, token: str) -> Identity:
        """
        Return the identity bound to a refresh token.

        :raises TokenExpiredError: When the token is past its expiry.
        :raises TokenInvalidError: On bad signature, structure or token kind.
        """

    def remaining_validity(self, token: str) -> timedelta:
        """
        Return how long ``token`` stays valid; ``timedelta(0)`` once expired.

        Expiry is not an error here, so callers can size revocation entries
        for tokens that are about to lapse.

        :raises TokenInvalidError: When the signature or structure is bad.
        """
