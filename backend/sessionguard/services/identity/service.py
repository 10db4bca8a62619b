"""
IdentityService
===============

Service responsible for the `User` aggregate outside the token lifecycle:
- Registration with email uniqueness
- Profile read
- Profile edit (self-collision on email is not a conflict)
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sessionguard.models.user import User
from sessionguard.repositories.user import UserRepository
from sessionguard.services._shared.base import BaseService
from sessionguard.services._shared.errors import violates
from sessionguard.services._shared.outcome import ErrorKind, Outcome
from sessionguard.services._shared.ports import PasswordHasher
from sessionguard.services.identity.dto import UserPublicOut, UserRegisterIn, UserUpdateIn

log = logging.getLogger(__name__)


def _is_duplicate_email(exc: IntegrityError) -> bool:
    return violates(exc, "uq_users_email", column="users.email")


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring email uniqueness.
    - Retrieve and update the user profile safely.
    """

    def __init__(self, *, password_hasher: PasswordHasher) -> None:
        super().__init__()
        self.passwords = password_hasher

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(self, dto: UserRegisterIn) -> Outcome[UserPublicOut]:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO, or ``DUPLICATE_EMAIL`` when the email
            is taken (no record is created).
        :rtype: Outcome[UserPublicOut]
        """
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if repo.exists_by_email(dto.email):
                    log.info("identity.register.rejected", extra={"reason": "duplicate_email"})
                    return Outcome.failure(ErrorKind.DUPLICATE_EMAIL)

                user = repo.add(
                    User(
                        email=dto.email,
                        password_hash=self.passwords.hash(dto.password),
                        name=dto.name,
                        weight=dto.weight,
                        daily_caffeine_limit=dto.daily_caffeine_limit,
                    )
                )
                out = self._to_public(user)
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            if _is_duplicate_email(exc):
                return Outcome.failure(ErrorKind.DUPLICATE_EMAIL)
            return self.storage_failure("users.register", exc)
        except SQLAlchemyError as exc:
            return self.storage_failure("users.register", exc)
        except ValueError as exc:
            return self._invalid_profile("identity.register.rejected", None, exc)

        log.info("identity.register.ok", extra={"identity": out.id})
        return Outcome.success(out)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user_info(self, user_id: int) -> Outcome[UserPublicOut]:
        """
        Retrieve a user by identifier.

        :param user_id: User primary key.
        :type user_id: int
        :returns: Public-safe user DTO or ``USER_NOT_FOUND``.
        :rtype: Outcome[UserPublicOut]
        """
        try:
            with self.ro_uow() as uow:
                user = uow.users.get(user_id)
                if user is None:
                    return Outcome.failure(ErrorKind.USER_NOT_FOUND)
                return Outcome.success(self._to_public(user))
        except SQLAlchemyError as exc:
            return self.storage_failure("users.get", exc)

    # --------------------------------------------------------------------- #
    # Update
    # --------------------------------------------------------------------- #

    def edit_user_info(self, user_id: int, dto: UserUpdateIn) -> Outcome[UserPublicOut]:
        """
        Update the provided (non-null) profile fields.

        An email already owned by *another* user is ``DUPLICATE_EMAIL``;
        re-submitting the caller's own email is accepted.

        :param user_id: User identifier.
        :type user_id: int
        :param dto: Input DTO containing new values.
        :type dto: UserUpdateIn
        :returns: Updated user DTO.
        :rtype: Outcome[UserPublicOut]
        """
        updates = dto.provided_fields()
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get(user_id)
                if user is None:
                    return Outcome.failure(ErrorKind.USER_NOT_FOUND)

                if "email" in updates:
                    owner_id = repo.find_id_by_email(updates["email"])
                    if owner_id is not None and owner_id != user.id:
                        log.info(
                            "identity.edit.rejected",
                            extra={"identity": user.id, "reason": "duplicate_email"},
                        )
                        return Outcome.failure(ErrorKind.DUPLICATE_EMAIL)

                repo.update(user, **updates)
                out = self._to_public(user)
        except IntegrityError as exc:
            if _is_duplicate_email(exc):
                return Outcome.failure(ErrorKind.DUPLICATE_EMAIL)
            return self.storage_failure("users.update", exc)
        except SQLAlchemyError as exc:
            return self.storage_failure("users.update", exc)
        except ValueError as exc:
            return self._invalid_profile("identity.edit.rejected", user_id, exc)

        log.info("identity.edit.ok", extra={"identity": out.id})
        return Outcome.success(out)

    # --------------------------------------------------------------------- #
    # Mapping
    # --------------------------------------------------------------------- #

    @staticmethod
    def _invalid_profile(
        event: str, identity: int | None, exc: ValueError
    ) -> Outcome[UserPublicOut]:
        """Turn a model validator rejection into ``INVALID_PROFILE``."""
        log.info(event, extra={"identity": identity, "reason": str(exc)})
        return Outcome.failure(ErrorKind.INVALID_PROFILE)

    @staticmethod
    def _to_public(user: User) -> UserPublicOut:
        return UserPublicOut(
            id=user.id,
            email=user.email,
            name=user.name,
            weight=user.weight,
            daily_caffeine_limit=user.daily_caffeine_limit,
        )
