"""Wiring of the per-process token blacklist and token provider."""

from __future__ import annotations

import logging

from flask import Flask, current_app

from staff_records.core.extensions import get_redis
from staff_records.infra.jwt.jwt_token_provider import JWTTokenProvider
from staff_records.infra.redis.redis_blacklist_store import RedisTokenBlacklistStore
from staff_records.services._shared.ports import (
    InMemoryTokenBlacklist,
    TokenBlacklistStore,
    TokenProvider,
)

log = logging.getLogger(__name__)

BLACKLIST_KEY = "token_blacklist"
TOKENS_KEY = "token_provider"


def build_blacklist(app: Flask) -> TokenBlacklistStore:
    """Select the blacklist backend from ``TOKEN_BLACKLIST_BACKEND``."""
    backend = str(app.config.get("TOKEN_BLACKLIST_BACKEND", "memory")).lower()
    if backend == "redis":
        return RedisTokenBlacklistStore(get_redis(app))
    if backend != "memory":
        log.warning("Unknown TOKEN_BLACKLIST_BACKEND %r; using memory", backend)
    return InMemoryTokenBlacklist()


def init_app(app: Flask) -> None:
    """Create the single blacklist and token provider instances for ``app``.

    Both are stored in ``app.extensions``; a bad token configuration raises
    :class:`~staff_records.core.config.ConfigurationError` here, at boot.
    """
    blacklist = build_blacklist(app)
    app.extensions[BLACKLIST_KEY] = blacklist
    app.extensions[TOKENS_KEY] = JWTTokenProvider.from_config(app.config, blacklist)


def get_blacklist(app: Flask | None = None) -> TokenBlacklistStore:
    return (app or current_app).extensions[BLACKLIST_KEY]


def get_token_provider(app: Flask | None = None) -> TokenProvider:
    return (app or current_app).extensions[TOKENS_KEY]
