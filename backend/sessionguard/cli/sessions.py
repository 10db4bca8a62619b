"""Operator commands for refresh sessions."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from sessionguard.api.deps import get_session_coordinator
from sessionguard.core.extensions import get_refresh_token_store
from sessionguard.services._shared.errors import StorageError

from ._shared import resolve_user_id

LOGGER = logging.getLogger(__name__)


@click.group("sessions")
def sessions_cli() -> None:
    """Inspect and revoke refresh sessions."""


@sessions_cli.command("status")
@click.argument("user")
@with_appcontext
def status_command(user: str) -> None:
    """Report whether USER (id or email) has an active session."""
    user_id = resolve_user_id(user)
    try:
        active = get_refresh_token_store().get(user_id) is not None
    except StorageError as exc:
        raise click.ClickException("Session store unavailable.") from exc
    click.echo(f"user={user_id} session={'active' if active else 'none'}")


@sessions_cli.command("revoke")
@click.argument("user")
@with_appcontext
def revoke_command(user: str) -> None:
    """Force-logout USER (id or email): its refresh token stops rotating.

    Access tokens already issued remain valid until they expire.
    """
    user_id = resolve_user_id(user)
    outcome = get_session_coordinator().revoke_session(user_id)
    if not outcome.ok:
        raise click.ClickException("Session store unavailable; nothing was revoked.")
    LOGGER.info("cli.sessions.revoke", extra={"identity": user_id})
    click.echo(f"Revoked session for user {user_id}.")
