"""Idempotent reference data.

Two things are seeded: the fixed shift vocabulary that sites link to, and a
bootstrap super admin so a fresh deployment has someone who can log in.
Seeders only flush; :func:`run_all` commits unless told otherwise.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from staff_records.models import AccountStatus, Role, Shift, ShiftName, User

LOGGER = logging.getLogger(__name__)

Summary = dict[str, dict[str, int]]

ADMIN_FIRST_NAME = "System"
ADMIN_LAST_NAME = "Administrator"
DEFAULT_ADMIN_DOCUMENT = "1000000000"


def _count(summary: Summary, table: str, *, created: bool) -> None:
    counters = summary.setdefault(table, {"created": 0, "existing": 0})
    counters["created" if created else "existing"] += 1


def _merge(into: Summary, other: Summary) -> Summary:
    for table, counters in other.items():
        target = into.setdefault(table, {"created": 0, "existing": 0})
        for key in ("created", "existing"):
            target[key] += counters.get(key, 0)
    return into


def seed_shifts(database: SQLAlchemy, *, verbose: bool = False) -> Summary:
    """Insert any missing :class:`ShiftName` row."""
    session = cast(Session, database.session)
    present = set(session.scalars(select(Shift.name)))
    summary: Summary = {}
    for name in ShiftName:
        missing = name not in present
        if missing:
            session.add(Shift(name=name))
        if verbose:
            LOGGER.info("shift %s: %s", name.value, "created" if missing else "exists")
        _count(summary, "shifts", created=missing)
    session.flush()
    return summary


def seed_admin(
    database: SQLAlchemy, config: Mapping[str, Any], *, verbose: bool = False
) -> Summary:
    """Create the super admin named by ``SEED_ADMIN_EMAIL``/``SEED_ADMIN_PASSWORD``.

    Without both settings nothing happens (a warning is logged). An account
    that already uses the e-mail is never modified, password included.
    """
    email = str(config.get("SEED_ADMIN_EMAIL") or "").strip().lower()
    password = config.get("SEED_ADMIN_PASSWORD") or ""
    if not (email and password):
        LOGGER.warning("SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD not set; skipping admin seed")
        return {}

    session = cast(Session, database.session)
    summary: Summary = {}
    exists = session.scalar(select(User.id).filter_by(email=email)) is not None
    if not exists:
        admin = User(
            email=email,
            document_number=str(config.get("SEED_ADMIN_DOCUMENT") or DEFAULT_ADMIN_DOCUMENT),
            first_name=ADMIN_FIRST_NAME,
            last_name=ADMIN_LAST_NAME,
            role=Role.SUPER_ADMIN,
            status=AccountStatus.ACTIVE,
        )
        admin.password = password
        session.add(admin)
        session.flush()
    if verbose:
        LOGGER.info("super admin %s: %s", email, "exists" if exists else "created")
    _count(summary, "users", created=not exists)
    return summary


def run_all(
    database: SQLAlchemy,
    config: Mapping[str, Any],
    *,
    verbose: bool = False,
    commit: bool = True,
) -> Summary:
    """Run every seeder in order and return the combined counters."""
    summary: Summary = {}
    _merge(summary, seed_shifts(database, verbose=verbose))
    _merge(summary, seed_admin(database, config, verbose=verbose))
    if commit:
        database.session.commit()
    return summary


__all__ = ["run_all", "seed_admin", "seed_shifts"]
