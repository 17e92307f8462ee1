"""Flask CLI commands to inspect and sweep the token blacklist."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from staff_records.core.scheduler import sweep_blacklist
from staff_records.core.security import get_blacklist


@click.group("blacklist")
def blacklist_cli() -> None:
    """Token blacklist maintenance."""


@blacklist_cli.command("sweep")
@with_appcontext
def sweep_command() -> None:
    """Remove expired entries now instead of waiting for the scheduled job."""
    removed = sweep_blacklist(get_blacklist())
    click.echo(f"Removed {removed} expired token(s).")


@blacklist_cli.command("stats")
@with_appcontext
def stats_command() -> None:
    """Print how many tokens are blacklisted in this process/backend."""
    stats = get_blacklist().stats()
    click.echo(f"total_blacklisted={stats.total_blacklisted}")
    click.echo(f"with_expiration={stats.with_expiration}")
