"""``flask seed``: reference data and the bootstrap account.

Every command is idempotent except ``fresh``, which rebuilds the schema.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import click
from flask import current_app
from flask.cli import with_appcontext

from staff_records.core.extensions import db
from staff_records.seeds import seed_data

LOGGER = logging.getLogger(__name__)

Summary = dict[str, dict[str, int]]


def _report(summary: Summary) -> None:
    if not summary:
        click.echo("Nothing to seed.")
        return
    click.echo("Seed summary:")
    width = max(map(len, summary))
    for table in sorted(summary):
        counters = summary[table]
        click.echo(
            f"  {table:<{width}}  created={counters['created']:>2}"
            f"  existing={counters['existing']:>2}"
        )


def _execute(label: str, step: Callable[[], Summary]) -> None:
    """Run ``step`` and commit, or roll back and turn the failure into a CLI error."""
    try:
        summary = step()
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        raise click.ClickException(f"{label} failed: {exc}") from exc
    _report(summary)


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log each seeding step.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Seed reference data."""
    ctx.obj = {"verbose": verbose}
    if verbose:
        logging.getLogger(seed_data.__name__).setLevel(logging.DEBUG)


@seed_cli.command("run")
@click.pass_obj
@with_appcontext
def run_command(obj: dict) -> None:
    """Shifts plus the SEED_ADMIN_* super admin."""
    _execute(
        "Seeding",
        lambda: seed_data.run_all(db, current_app.config, verbose=obj["verbose"], commit=False),
    )


@seed_cli.command("shifts")
@click.pass_obj
@with_appcontext
def shifts_command(obj: dict) -> None:
    """Only the shift vocabulary (morning, afternoon, saturday, night)."""
    _execute("Shift seeding", lambda: seed_data.seed_shifts(db, verbose=obj["verbose"]))


@seed_cli.command("admin")
@click.option("--email", required=True, help="Login e-mail of the super admin.")
@click.option(
    "--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Initial password."
)
@click.option("--document", default="1000000000", show_default=True, help="Document number.")
@click.pass_obj
@with_appcontext
def admin_command(obj: dict, email: str, password: str, document: str) -> None:
    """Create a super admin; an existing account with that e-mail is left as is."""
    config = {
        "SEED_ADMIN_EMAIL": email,
        "SEED_ADMIN_PASSWORD": password,
        "SEED_ADMIN_DOCUMENT": document,
    }
    _execute("Admin seeding", lambda: seed_data.seed_admin(db, config, verbose=obj["verbose"]))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
@with_appcontext
def fresh_command(obj: dict, yes: bool) -> None:
    """Drop and recreate every table, then seed (never in production)."""
    if current_app.config.get("APP_ENV") == "production":
        raise click.UsageError("'flask seed fresh' is disabled in production.")
    if not yes:
        click.confirm("This DROPS every table. Continue?", abort=True)
    LOGGER.warning("Rebuilding schema", extra={"database": db.engine.url.database})
    db.session.remove()
    db.drop_all()
    db.create_all()
    _execute(
        "Fresh seed",
        lambda: seed_data.run_all(db, current_app.config, verbose=obj["verbose"], commit=False),
    )
