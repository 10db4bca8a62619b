from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta

import redis  # type: ignore[import-untyped]

from sessionguard.services._shared.errors import StorageError


@contextmanager
def storage_guard(operation: str) -> Iterator[None]:
    """Re-raise any ``redis.RedisError`` (timeouts included) as :class:`StorageError`."""
    try:
        yield
    except redis.RedisError as exc:
        raise StorageError(operation) from exc


def as_text(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


def to_millis(ttl: timedelta) -> int:
    return int(ttl.total_seconds() * 1000)
