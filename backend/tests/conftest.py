"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside an outer transaction on a shared in-memory SQLite
connection; the ORM session works in SAVEPOINTs on top of it, so service
``commit()``/``rollback()`` calls behave normally and nothing leaks between
cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from staff_records.core.config import TestingConfig
from staff_records.core.extensions import db as _db
from staff_records.core.security import get_blacklist
from staff_records.factory import create_app
from staff_records.models import Shift, ShiftName


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application built from :class:`TestingConfig` with logging noise
        reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("TEST_DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection reused by the per-test outer transaction.
    """
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session joined to a per-test outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; everything it commits
        is discarded when the outer transaction rolls back.

    Notes
    -----
    ``join_transaction_mode="create_savepoint"`` makes every session-level
    transaction a SAVEPOINT. The extra guard SAVEPOINT keeps SQLite from
    treating a released session savepoint as a real COMMIT.
    """
    # 1) Top-level transaction plus guard SAVEPOINT
    top_trans = connection.begin()
    connection.begin_nested()

    # 2) Scoped session whose commits/rollbacks only touch its own SAVEPOINT
    SessionFactory = sessionmaker(
        bind=connection, autoflush=False, join_transaction_mode="create_savepoint"
    )
    scoped = scoped_session(SessionFactory)

    # 3) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def shifts(session):
    """Seed the shift vocabulary and commit it into the outer transaction."""
    rows = {name: Shift(name=name) for name in ShiftName}
    session.add_all(rows.values())
    session.commit()
    return rows


@pytest.fixture()
def client(app, session):
    """Test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(autouse=True)
def _clean_blacklist(app):
    """Blacklisted tokens from one test must not affect the next."""
    yield
    get_blacklist(app).clear()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
