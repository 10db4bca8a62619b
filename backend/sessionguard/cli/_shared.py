from __future__ import annotations

import click

from sessionguard.repositories.user import UserRepository
from sessionguard.uow import SQLAlchemyReadOnlyUnitOfWork


def resolve_user_id(user: str) -> int:
    """Accept a numeric id or an email address and return the user id.

    :raises click.ClickException: If no user matches.
    """
    if user.isdigit():
        return int(user)
    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        repo: UserRepository = uow.users
        user_id = repo.find_id_by_email(user)
    if user_id is None:
        raise click.ClickException(f"No user with email {user!r}.")
    return user_id
