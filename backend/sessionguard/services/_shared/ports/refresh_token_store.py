from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from .token_codec import Identity


class RefreshTokenStore(Protocol):
    """
    Single-slot session registry: identity -> current refresh token value.

    Absence of an entry means "no active session" (never logged in, expired,
    or logged out). Entries expire on their own after the TTL given at write
    time, which mirrors the refresh token lifetime.
    """

    def save(self, identity: Identity, refresh_token: str, ttl: timedelta) -> None:
        """Overwrite the session record for ``identity``."""

    def get(self, identity: Identity) -> str | None:
        """Return the active refresh token for ``identity``, if any."""

    def delete(self, identity: Identity) -> None:
        """Drop the session record. Idempotent."""

    def replace(
        self,
        identity: Identity,
        *,
        expected: str,
        new_token: str,
        ttl: timedelta,
    ) -> bool:
        """
        Atomically swap ``expected`` for ``new_token``.

        :returns: ``False`` (and no write) when the stored value is absent or
            differs from ``expected``; of two concurrent callers presenting
            the same ``expected`` value at most one gets ``True``.
        """


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class _Entry:
    token: str
    expires_at: datetime


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Process-local session store with lock-guarded compare-and-swap.

    .. note::
       Suitable for unit tests and single-worker development only. The
       ``clock`` hook lets tests move time forward without sleeping.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._entries: dict[str, _Entry] = {}
        self._clock = clock
        self._lock = threading.Lock()

    @staticmethod
    def _k(identity: Identity) -> str:
        return str(identity)

    def _live(self, key: str) -> _Entry | None:
        # caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    def save(self, identity: Identity, refresh_token: str, ttl: timedelta) -> None:
        with self._lock:
            self._entries[self._k(identity)] = _Entry(
                token=refresh_token, expires_at=self._clock() + ttl
            )

    def get(self, identity: Identity) -> str | None:
        with self._lock:
            entry = self._live(self._k(identity))
            return entry.token if entry else None

    def delete(self, identity: Identity) -> None:
        with self._lock:
            self._entries.pop(self._k(identity), None)

    def replace(
        self,
        identity: Identity,
        *,
        expected: str,
        new_token: str,
        ttl: timedelta,
    ) -> bool:
        key = self._k(identity)
        with self._lock:
            entry = self._live(key)
            if entry is None or entry.token != expected:
                return False
            self._entries[key] = _Entry(token=new_token, expires_at=self._clock() + ttl)
            return True
