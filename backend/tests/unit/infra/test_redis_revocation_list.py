# tests/unit/infra/test_redis_revocation_list.py
from __future__ import annotations

import hashlib
from datetime import timedelta

import fakeredis
import pytest
import redis

from sessionguard.infra.redis.redis_revocation_list import RedisRevocationList
from sessionguard.services._shared.errors import StorageError


@pytest.fixture
def fake_redis():
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def revocations(fake_redis):
    return RedisRevocationList(r=fake_redis)


def test_add_then_contains(revocations):
    revocations.add("token-1", timedelta(minutes=5))

    assert revocations.contains("token-1") is True
    assert revocations.contains("token-2") is False


def test_key_is_digest_with_millisecond_ttl(revocations, fake_redis):
    revocations.add("token-1", timedelta(seconds=90))

    key = "deny:rt:" + hashlib.sha256(b"token-1").hexdigest()
    assert fake_redis.exists(key) == 1
    assert 0 < fake_redis.pttl(key) <= 90_000
    # raw token values never appear in key names
    assert not any(b"token-1" in k for k in fake_redis.keys("*"))


@pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-3), timedelta(microseconds=500)])
def test_non_positive_ttl_is_skipped(revocations, fake_redis, ttl):
    revocations.add("token-1", ttl)

    assert revocations.contains("token-1") is False
    assert fake_redis.dbsize() == 0


def test_faults_raise_storage_error():
    class _DownRedis:
        def set(self, *args, **kwargs):
            raise redis.ConnectionError("down")

        def exists(self, *args):
            raise redis.TimeoutError("slow")

    revocations = RedisRevocationList(r=_DownRedis())

    with pytest.raises(StorageError):
        revocations.add("t", timedelta(minutes=1))
    with pytest.raises(StorageError):
        revocations.contains("t")
