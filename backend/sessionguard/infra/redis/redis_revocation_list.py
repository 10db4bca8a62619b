from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import timedelta
from typing import cast

import redis  # type: ignore[import-untyped]

from sessionguard.services._shared.ports import RevocationList

from .storage_guard import storage_guard, to_millis


@dataclass(slots=True)
class RedisRevocationList(RevocationList):
    """
    Revocation list for **refresh tokens**, keyed by the SHA-256 of the value.

    Entries carry a millisecond TTL equal to the token's remaining validity,
    so an entry never outlives the token it guards.
    """

    r: redis.Redis

    @staticmethod
    def _k(token: str) -> str:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return f"deny:rt:{digest}"

    def add(self, token: str, ttl: timedelta) -> None:
        px = to_millis(ttl)
        if px < 1:
            return
        with storage_guard("revocation.add"):
            # idempotent marker; a later add refreshes the TTL
            self.r.set(self._k(token), "1", px=px)

    def contains(self, token: str) -> bool:
        with storage_guard("revocation.contains"):
            return cast(int, self.r.exists(self._k(token))) == 1
