# sessionguard/services/auth/service.py
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from sessionguard.services._shared.base import BaseService
from sessionguard.services._shared.errors import (
    StorageError,
    TokenError,
    TokenExpiredError,
)
from sessionguard.services._shared.outcome import ErrorKind, Outcome
from sessionguard.services._shared.ports import (
    Identity,
    PasswordHasher,
    RefreshTokenStore,
    RevocationList,
    TokenCodec,
)
from sessionguard.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    TokenPairOut,
)

log = logging.getLogger(__name__)


class SessionCoordinator(BaseService):
    """
    Authentication lifecycle service (login / rotate / logout).

    Composes a :class:`TokenCodec`, a single-slot :class:`RefreshTokenStore`
    and a :class:`RevocationList`. Every public method returns an
    :class:`Outcome`; token and storage exceptions are translated here and
    never reach the caller.

    Log events carry the identity and a reason, never token values.
    """

    def __init__(
        self,
        *,
        token_codec: TokenCodec,
        refresh_store: RefreshTokenStore,
        revocation_list: RevocationList,
        password_hasher: PasswordHasher,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        """
        Initialize the coordinator with its collaborators.

        :param token_codec: Adapter issuing/verifying JWTs.
        :param refresh_store: Session record per identity (compare-and-swap).
        :param revocation_list: Consumed refresh tokens, TTL-bounded.
        :param password_hasher: Verifies credentials at login.
        :param token_cfg: Lifetimes; the refresh lifetime is the session TTL.
        """
        super().__init__()
        self.tokens = token_codec
        self.refresh_store = refresh_store
        self.revocations = revocation_list
        self.passwords = password_hasher
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> Outcome[TokenPairOut]:
        """
        Verify credentials, issue a fresh pair and record the session.

        Unknown email and wrong password yield the same
        :attr:`ErrorKind.AUTHENTICATION_FAILED`. A previous session of the
        same identity is overwritten (one active session per identity).
        """
        try:
            with self.ro_uow() as uow:
                user = uow.users.get_by_email(dto.email or "")
                if user is None or not self.passwords.matches(
                    dto.password or "", user.password_hash
                ):
                    log.info("auth.login.failed", extra={"reason": "bad_credentials"})
                    return Outcome.failure(ErrorKind.AUTHENTICATION_FAILED)
                user_id: int = user.id
        except SQLAlchemyError as exc:
            return self.storage_failure("users.lookup", exc)

        pair = self._issue_pair(user_id)
        try:
            self.refresh_store.save(user_id, pair.refresh_token, self.cfg.refresh_expires)
        except StorageError as exc:
            return self.storage_failure(exc.operation, exc)

        log.info("auth.login.ok", extra={"identity": user_id})
        return Outcome.success(pair)

    # ------------------------------------------------------------------ #
    # Rotation
    # ------------------------------------------------------------------ #

    def rotate(self, dto: RefreshIn) -> Outcome[TokenPairOut]:
        """
        Consume a refresh token and emit a new pair.

        Order of checks
        ---------------
        1. Signature/expiry: expired -> ``REFRESH_EXPIRED``, anything else
           -> ``REFRESH_INVALID``. Runs before any store lookup, so an expired
           token is reported as expired whatever the stored state.
        2. The session record must hold exactly this token.
        3. The token must not be on the revocation list.
        4. Issue the new pair.
        5. Revoke the presented token for its remaining validity.
        6. Compare-and-swap the session record; losing -> ``REFRESH_INVALID``.

        The presented token is revoked (step 5) before the swap, so once any
        rotation of it has returned, no other rotation of it can succeed.
        """
        token = dto.refresh_token
        try:
            identity = self.tokens.verify_refresh_token(token)
        except TokenExpiredError:
            log.info("auth.rotate.rejected", extra={"reason": "expired"})
            return Outcome.failure(ErrorKind.REFRESH_EXPIRED)
        except TokenError:
            log.info("auth.rotate.rejected", extra={"reason": "invalid"})
            return Outcome.failure(ErrorKind.REFRESH_INVALID)

        try:
            if self.refresh_store.get(identity) != token:
                return self._reject_rotation(identity, "not_current")
            if self.revocations.contains(token):
                return self._reject_rotation(identity, "revoked")

            pair = self._issue_pair(identity)
            self.revocations.add(token, self.tokens.remaining_validity(token))

            swapped = self.refresh_store.replace(
                identity,
                expected=token,
                new_token=pair.refresh_token,
                ttl=self.cfg.refresh_expires,
            )
        except StorageError as exc:
            return self.storage_failure(exc.operation, exc)

        if not swapped:
            return self._reject_rotation(identity, "lost_race")

        log.info("auth.rotate.ok", extra={"identity": identity})
        return Outcome.success(pair)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> Outcome[None]:
        """
        End the session of the identity both tokens belong to.

        Both tokens are verified independently. Missing, malformed or expired
        tokens, tokens of two different identities, and an already revoked
        refresh token all yield ``INVALID_TOKEN``.
        """
        try:
            access_identity = self.tokens.verify_access_token(dto.access_token)
            identity = self.tokens.verify_refresh_token(dto.refresh_token)
        except TokenError:
            log.info("auth.logout.rejected", extra={"reason": "invalid"})
            return Outcome.failure(ErrorKind.INVALID_TOKEN)

        if access_identity != identity:
            log.warning(
                "auth.logout.rejected",
                extra={"identity": access_identity, "reason": "identity_mismatch"},
            )
            return Outcome.failure(ErrorKind.INVALID_TOKEN)

        try:
            if self.revocations.contains(dto.refresh_token):
                log.info("auth.logout.rejected", extra={"identity": identity, "reason": "revoked"})
                return Outcome.failure(ErrorKind.INVALID_TOKEN)

            self.refresh_store.delete(identity)
            remaining = self.tokens.remaining_validity(dto.refresh_token)
            if remaining > timedelta(0):
                self.revocations.add(dto.refresh_token, remaining)
        except StorageError as exc:
            return self.storage_failure(exc.operation, exc)

        log.info("auth.logout.ok", extra={"identity": identity})
        return Outcome.success()

    # ------------------------------------------------------------------ #
    # Identity / operator helpers
    # ------------------------------------------------------------------ #

    def get_identity(self, access_token: str) -> Outcome[Identity]:
        """Verify an access token and return its identity."""
        try:
            return Outcome.success(self.tokens.verify_access_token(access_token))
        except TokenError:
            return Outcome.failure(ErrorKind.INVALID_TOKEN)

    def revoke_session(self, identity: Identity) -> Outcome[None]:
        """
        Drop the session record of ``identity``.

        The outstanding refresh token then fails rotation as not current.
        Access tokens already issued stay valid until they expire.
        """
        try:
            self.refresh_store.delete(identity)
        except StorageError as exc:
            return self.storage_failure(exc.operation, exc)
        log.info("auth.session.revoked", extra={"identity": identity})
        return Outcome.success()

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, identity: Identity) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.tokens.issue_access_token(identity),
            refresh_token=self.tokens.issue_refresh_token(identity),
        )

    @staticmethod
    def _reject_rotation(identity: Identity, reason: str) -> Outcome[TokenPairOut]:
        log.info("auth.rotate.rejected", extra={"identity": identity, "reason": reason})
        return Outcome.failure(ErrorKind.REFRESH_INVALID)
