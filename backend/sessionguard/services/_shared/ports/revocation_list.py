from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

from .refresh_token_store import utc_now


class RevocationList(Protocol):
    """
    Time-bounded set of consumed or logged-out token values.

    Once :meth:`add` returns, every later :meth:`contains` for the same value
    answers ``True`` until the entry's TTL lapses.
    """

    def add(self, token: str, ttl: timedelta) -> None:
        """Reject ``token`` for ``ttl`` from now. A non-positive ``ttl`` is a no-op."""

    def contains(self, token: str) -> bool: ...


class InMemoryRevocationList(RevocationList):
    """Process-local revocation list with passive expiry."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._revoked: dict[str, datetime] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def add(self, token: str, ttl: timedelta) -> None:
        if ttl <= timedelta(0):
            return
        with self._lock:
            self._revoked[token] = self._clock() + ttl

    def contains(self, token: str) -> bool:
        with self._lock:
            expires_at = self._revoked.get(token)
            if expires_at is None:
                return False
            if expires_at <= self._clock():
                del self._revoked[token]
                return False
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)
