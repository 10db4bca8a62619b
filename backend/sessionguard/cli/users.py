"""Operator commands for user accounts."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from sessionguard.api.deps import get_identity_service
from sessionguard.services._shared.outcome import ErrorKind
from sessionguard.services.identity.dto import UserRegisterIn


@click.group("users")
def users_cli() -> None:
    """Manage user accounts."""


@users_cli.command("register")
@click.option("--email", required=True, help="Login email.")
@click.option("--name", required=True, help="Display name.")
@click.password_option(help="Password (prompted when omitted).")
@click.option("--weight", type=float, default=None, help="Body weight in kg.")
@click.option("--caffeine-limit", type=int, default=None, help="Daily caffeine budget in mg.")
@with_appcontext
def register_command(
    email: str,
    name: str,
    password: str,
    weight: float | None,
    caffeine_limit: int | None,
) -> None:
    """Create a user account without going through the HTTP API."""
    if len(password) < 8:
        raise click.BadParameter("must be at least 8 characters", param_hint="--password")
    outcome = get_identity_service().register(
        UserRegisterIn(
            email=email,
            password=password,
            name=name,
            weight=weight,
            daily_caffeine_limit=caffeine_limit,
        )
    )
    if outcome.error is ErrorKind.DUPLICATE_EMAIL:
        raise click.ClickException(f"Email {email!r} is already registered.")
    if not outcome.ok:
        raise click.ClickException("Could not register the user (storage error).")
    user = outcome.unwrap()
    click.echo(f"Created user {user.id} <{user.email}>.")
