"""User repository: the credential store consumed by the auth services."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from sessionguard.models.user import User, normalize_email
from sessionguard.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER issues tokens or verifies passwords; the session coordinator
    owns both.
    """

    model = User

    def _updatable_fields(self):
        """Profile fields a user may edit (not including the password hash)."""
        return {"email", "name", "weight", "daily_caffeine_limit"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: User instance or ``None`` when not found.
        """
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return bool(self.session.execute(stmt).first())

    def find_id_by_email(self, email: str) -> int | None:
        """Return the id owning ``email``, or ``None`` when the email is free."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return cast(int | None, self.session.execute(stmt).scalar_one_or_none())
