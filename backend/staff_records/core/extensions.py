"""Extension singletons (database, migrations, Redis) and their wiring."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

REDIS_KEY = "redis_client"

# Constraint names stay stable across backends so migrations and the
# IntegrityError matching in services agree on them.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    session_options={"autoflush": False},
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
)
# Batch mode lets Alembic alter SQLite tables by copy-and-move
migrate = Migrate(render_as_batch=True)


def init_app(app: Flask) -> None:
    """Bind the database and migrations; connect Redis when ``REDIS_URL`` is set.

    :raises RuntimeError: ``REDIS_URL`` is set but the server does not answer.
    """
    db.init_app(app)

    # Model modules must be imported before Alembic inspects the metadata
    from staff_records import models  # noqa: F401

    migrate.init_app(app, db)

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        return
    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Cannot reach Redis at {redis_url!r}") from exc
    app.extensions[REDIS_KEY] = client
    log.info("Redis connected", extra={"redis_url": redis_url})


def get_redis(app: Flask | None = None) -> redis.Redis:
    """Return the app's Redis client.

    :raises RuntimeError: No client was configured (``REDIS_URL`` unset).
    """
    client = (app or current_app).extensions.get(REDIS_KEY)
    if client is None:
        raise RuntimeError("Redis is not configured; set REDIS_URL.")
    return client
