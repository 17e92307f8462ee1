from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Protocol

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BlacklistStats:
    """
    Snapshot of the blacklist size.

    :param total_blacklisted: Tokens currently rejected.
    :type total_blacklisted: int
    :param with_expiration: How many of those have a known expiry.
    :type with_expiration: int
    """

    total_blacklisted: int
    with_expiration: int


class TokenBlacklistStore(Protocol):
    """
    Abstraction for the set of tokens rejected before their natural expiry.

    The blacklist is advisory: write failures are logged by implementations
    and never propagate to request handling. Methods are idempotent.
    """

    def add(self, token: str, expires_at: float | None = None) -> None: ...
    def is_blacklisted(self, token: str) -> bool: ...
    def remove(self, token: str) -> None: ...
    def sweep(self, now: float | None = None) -> int: ...
    def stats(self) -> BlacklistStats: ...
    def clear(self) -> None: ...


class InMemoryTokenBlacklist(TokenBlacklistStore):
    """
    Process-local blacklist keyed by the raw token string.

    A single lock guards both the membership set and the expiry index, so
    ``add``, ``is_blacklisted``, ``remove`` and ``sweep`` never interleave.

    Notes
    -----
    Entries live in process memory only: they are lost on restart and are not
    shared between worker processes. Run a single worker (or switch to the
    Redis store) when logout must hold across processes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tokens: set[str] = set()
        self._expires_at: dict[str, float] = {}

    def add(self, token: str, expires_at: float | None = None) -> None:
        """
        Blacklist ``token``.

        :param token: Raw compact token string.
        :type token: str
        :param expires_at: Natural expiry (epoch seconds) used by the sweep;
            entries without one are kept until removed explicitly.
        :type expires_at: float | None
        """
        if not token:
            return
        with self._lock:
            self._tokens.add(token)
            if expires_at is not None:
                self._expires_at[token] = float(expires_at)

    def is_blacklisted(self, token: str) -> bool:
        with self._lock:
            return token in self._tokens

    def remove(self, token: str) -> None:
        with self._lock:
            self._tokens.discard(token)
            self._expires_at.pop(token, None)

    def sweep(self, now: float | None = None) -> int:
        """
        Drop every entry whose recorded expiry is at or before ``now``.

        :param now: Reference epoch seconds; defaults to the current time.
        :type now: float | None
        :returns: Number of entries removed.
        :rtype: int
        """
        cutoff = time.time() if now is None else float(now)
        with self._lock:
            expired = [t for t, exp in self._expires_at.items() if exp <= cutoff]
            for token in expired:
                self._tokens.discard(token)
                del self._expires_at[token]
            remaining = len(self._tokens)
        if expired:
            log.info(
                "Blacklist sweep removed expired tokens",
                extra={"removed": len(expired), "remaining": remaining},
            )
        return len(expired)

    def stats(self) -> BlacklistStats:
        with self._lock:
            return BlacklistStats(
                total_blacklisted=len(self._tokens),
                with_expiration=len(self._expires_at),
            )

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()
            self._expires_at.clear()
