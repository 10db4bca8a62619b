# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import redis  # type: ignore[import-untyped]

from sessionguard.services._shared.ports import Identity, RefreshTokenStore

from .storage_guard import as_text, storage_guard, to_millis


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed session store: one key per identity holding the current
    refresh token, expiring together with it.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(identity: Identity) -> str:
        return f"rt:u:{identity}"

    @staticmethod
    def _px(ttl: timedelta) -> int:
        # Redis rejects PX <= 0; an already-elapsed TTL keeps the key for 1 ms
        return max(1, to_millis(ttl))

    # -------------------- API ------------------------

    def save(self, identity: Identity, refresh_token: str, ttl: timedelta) -> None:
        with storage_guard("refresh.save"):
            self.r.set(self._k(identity), refresh_token, px=self._px(ttl))

    def get(self, identity: Identity) -> str | None:
        with storage_guard("refresh.get"):
            return as_text(self.r.get(self._k(identity)))

    def delete(self, identity: Identity) -> None:
        with storage_guard("refresh.delete"):
            self.r.delete(self._k(identity))

    def replace(
        self,
        identity: Identity,
        *,
        expected: str,
        new_token: str,
        ttl: timedelta,
    ) -> bool:
        """
        Swap ``expected`` for ``new_token`` with WATCH/MULTI/EXEC.

        A concurrent write to the key between WATCH and EXEC aborts the
        transaction; the loop then re-reads and, since the value no longer
        matches, returns ``False``.
        """
        key = self._k(identity)
        with storage_guard("refresh.replace"):
            while True:
                try:
                    with self.r.pipeline() as p:
                        p.watch(key)
                        if as_text(p.get(key)) != expected:
                            p.unwatch()
                            return False
                        p.multi()
                        p.set(key, new_token, px=self._px(ttl))
                        p.execute()
                        return True
                except redis.WatchError:
                    continue
