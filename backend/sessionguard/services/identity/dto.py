"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param email: Login email (normalized to lowercase by the model).
    :type email: str
    :param password: Raw password, hashed by the service.
    :type password: str
    :param name: Display name.
    :type name: str
    :param weight: Optional body weight (kg).
    :type weight: float | None
    :param daily_caffeine_limit: Optional daily caffeine budget (mg).
    :type daily_caffeine_limit: int | None
    """

    email: str
    password: str
    name: str
    weight: float | None = None
    daily_caffeine_limit: int | None = None


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for profile edits. ``None`` means "leave unchanged".

    :param email: Optional new email.
    :type email: str | None
    :param name: Optional new display name.
    :type name: str | None
    :param weight: Optional new weight.
    :type weight: float | None
    :param daily_caffeine_limit: Optional new caffeine budget.
    :type daily_caffeine_limit: int | None
    """

    email: str | None = None
    name: str | None = None
    weight: float | None = None
    daily_caffeine_limit: int | None = None

    def provided_fields(self) -> dict[str, Any]:
        """Return only the fields the caller actually set."""
        return {
            k: v
            for k, v in {
                "email": self.email,
                "name": self.name,
                "weight": self.weight,
                "daily_caffeine_limit": self.daily_caffeine_limit,
            }.items()
            if v is not None
        }


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe representation of a user (no password hash).

    :param id: User identifier.
    :type id: int
    :param email: Normalized email.
    :type email: str
    :param name: Display name.
    :type name: str
    :param weight: Body weight or ``None``.
    :type weight: float | None
    :param daily_caffeine_limit: Caffeine budget or ``None``.
    :type daily_caffeine_limit: int | None
    """

    id: int
    email: str
    name: str
    weight: float | None = None
    daily_caffeine_limit: int | None = None
