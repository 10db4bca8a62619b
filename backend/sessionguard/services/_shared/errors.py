"""
Service-layer exceptions.

These exceptions are **framework-agnostic**: they never import Flask or
HTTP helpers. Adapters raise them, and application services catch them at
their boundary and turn them into typed :class:`~.outcome.Outcome` values,
so none of them reaches transport code.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


class ServiceError(Exception):
    """Base class for all service-level errors."""

    pass


# --------------------------------------------------------------------------- #
# Token verification
# --------------------------------------------------------------------------- #


class TokenError(ServiceError):
    """Base class for token verification failures."""


class TokenExpiredError(TokenError):
    """The token is well-formed and correctly signed but past its expiry."""


class TokenInvalidError(TokenError):
    """The token is malformed, forged, or of the wrong kind."""


# --------------------------------------------------------------------------- #
# Storage
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class StorageError(ServiceError):
    """
    Raised by store adapters when the backing service faults or times out.

    :param operation: Store operation that failed (e.g. ``"refresh.save"``).
    :type operation: str
    """

    operation: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Storage operation failed: {self.operation}"


# --------------------------------------------------------------------------- #
# Integrity helpers
# --------------------------------------------------------------------------- #


def violates(exc: IntegrityError, constraint_name: str, column: str | None = None) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL names the constraint in its message; SQLite only names the
    column (``UNIQUE constraint failed: users.email``), hence ``column``.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').
    column : str | None
        Optional ``table.column`` fallback for dialects that omit the name.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    return bool(column) and column.lower() in message
