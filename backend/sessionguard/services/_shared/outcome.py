"""Typed results returned by application services instead of exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(Enum):
    """Failure kinds surfaced to callers.

    ``REFRESH_INVALID`` deliberately covers forged, stale, reused and missing
    refresh tokens alike so callers cannot tell which one they hit.
    """

    AUTHENTICATION_FAILED = "authentication_failed"
    DUPLICATE_EMAIL = "duplicate_email"
    REFRESH_EXPIRED = "refresh_expired"
    REFRESH_INVALID = "refresh_invalid"
    INVALID_TOKEN = "invalid_token"
    USER_NOT_FOUND = "user_not_found"
    INVALID_PROFILE = "invalid_profile"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """
    Either a value or an :class:`ErrorKind`, never both.

    :ivar value: Payload of a successful call (may be ``None`` for commands).
    :ivar error: Failure kind, ``None`` on success.
    """

    value: T | None = None
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind) -> Outcome[T]:
        return cls(error=kind)

    def unwrap(self) -> T:
        """Return the value, raising ``ValueError`` on a failed outcome."""
        if self.error is not None:
            raise ValueError(f"Outcome failed with {self.error.value}")
        return self.value  # type: ignore[return-value]
