# tests/unit/ports/test_in_memory_stores.py
"""In-memory session store and revocation list, driven by a fake clock."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest

from sessionguard.services._shared.ports import InMemoryRefreshTokenStore, InMemoryRevocationList


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


# --------------------------- Refresh token store -------------------------- #
def test_session_record_expires_with_its_ttl(clock):
    store = InMemoryRefreshTokenStore(clock=clock)
    store.save(1, "rt", timedelta(minutes=10))

    clock.advance(timedelta(minutes=9))
    assert store.get(1) == "rt"

    clock.advance(timedelta(minutes=1))
    assert store.get(1) is None


def test_int_and_str_identities_share_a_slot(clock):
    store = InMemoryRefreshTokenStore(clock=clock)
    store.save(1, "rt", timedelta(minutes=1))

    assert store.get("1") == "rt"


def test_replace_is_compare_and_swap(clock):
    store = InMemoryRefreshTokenStore(clock=clock)
    store.save(1, "a", timedelta(minutes=1))

    assert store.replace(1, expected="x", new_token="b", ttl=timedelta(minutes=1)) is False
    assert store.replace(1, expected="a", new_token="b", ttl=timedelta(minutes=1)) is True
    assert store.get(1) == "b"


def test_replace_on_expired_record_fails(clock):
    store = InMemoryRefreshTokenStore(clock=clock)
    store.save(1, "a", timedelta(seconds=1))
    clock.advance(timedelta(seconds=2))

    assert store.replace(1, expected="a", new_token="b", ttl=timedelta(minutes=1)) is False


def test_concurrent_replace_single_winner():
    store = InMemoryRefreshTokenStore()
    store.save(1, "a", timedelta(minutes=1))
    start = threading.Barrier(8)
    results: list[bool] = []
    lock = threading.Lock()

    def _swap(i: int) -> None:
        start.wait(timeout=5)
        ok = store.replace(1, expected="a", new_token=f"b{i}", ttl=timedelta(minutes=1))
        with lock:
            results.append(ok)

    threads = [threading.Thread(target=_swap, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert results.count(True) == 1
    assert results.count(False) == 7


def test_delete_is_idempotent():
    store = InMemoryRefreshTokenStore()
    store.delete(1)
    store.save(1, "a", timedelta(minutes=1))
    store.delete(1)
    assert store.get(1) is None


# ----------------------------- Revocation list ---------------------------- #
def test_revocation_entry_lapses_after_ttl(clock):
    revocations = InMemoryRevocationList(clock=clock)
    revocations.add("t", timedelta(seconds=30))

    assert revocations.contains("t") is True
    clock.advance(timedelta(seconds=30))
    assert revocations.contains("t") is False
    assert len(revocations) == 0


@pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-1)])
def test_revocation_with_non_positive_ttl_is_skipped(clock, ttl):
    revocations = InMemoryRevocationList(clock=clock)
    revocations.add("t", ttl)

    assert revocations.contains("t") is False
    assert len(revocations) == 0
