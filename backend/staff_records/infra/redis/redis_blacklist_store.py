from __future__ import annotations

import hashlib
import logging
import math
import time
from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from staff_records.services._shared.ports import BlacklistStats, TokenBlacklistStore

log = logging.getLogger(__name__)

# Marker used for entries whose expiry is unknown (kept until removed)
_NO_EXPIRY = "-"


class RedisTokenBlacklistStore(TokenBlacklistStore):
    """
    Blacklist shared by every worker through Redis.

    Keys are ``blacklist:<sha256(token)>`` with a TTL equal to the token's
    remaining lifetime, so Redis expires entries on its own and :meth:`sweep`
    has nothing to do. Redis failures are logged: reads fail open and writes
    are dropped.
    """

    prefix = "blacklist:"

    def __init__(self, r: redis.Redis):
        self.r = r

    def _k(self, token: str) -> str:
        return self.prefix + hashlib.sha256(token.encode("utf-8")).hexdigest()

    def add(self, token: str, expires_at: float | None = None) -> None:
        if not token:
            return
        try:
            if expires_at is None:
                self.r.set(self._k(token), _NO_EXPIRY)
                return
            remaining = expires_at - time.time()
            if remaining <= 0:
                # Already expired: verification rejects it anyway
                return
            # Rounded up so the entry never lapses before the token does
            self.r.set(self._k(token), str(math.ceil(expires_at)), ex=math.ceil(remaining))
        except RedisError:
            log.warning("Failed to blacklist token in Redis", exc_info=True)

    def is_blacklisted(self, token: str) -> bool:
        try:
            return cast(int, self.r.exists(self._k(token))) == 1
        except RedisError:
            log.warning("Blacklist lookup failed; treating token as not blacklisted", exc_info=True)
            return False

    def remove(self, token: str) -> None:
        try:
            self.r.delete(self._k(token))
        except RedisError:
            log.warning("Failed to remove token from Redis blacklist", exc_info=True)

    def sweep(self, now: float | None = None) -> int:
        return 0

    def _keys(self) -> list[bytes]:
        return list(self.r.scan_iter(match=f"{self.prefix}*", count=500))

    def stats(self) -> BlacklistStats:
        try:
            keys = self._keys()
            with_expiration = sum(1 for k in keys if cast(int, self.r.ttl(k)) > 0)
        except RedisError:
            log.warning("Failed to read Redis blacklist stats", exc_info=True)
            return BlacklistStats(total_blacklisted=0, with_expiration=0)
        return BlacklistStats(total_blacklisted=len(keys), with_expiration=with_expiration)

    def clear(self) -> None:
        try:
            keys = self._keys()
            if keys:
                self.r.delete(*keys)
        except RedisError:
            log.warning("Failed to clear Redis blacklist", exc_info=True)
