"""
staff_records.services._shared.ports
====================================

*Ports* (hexagonal interfaces) for token management.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider` plus the identity/settings value objects.

- :mod:`blacklist_store`:
    Defines :class:`~.TokenBlacklistStore` and the process-local
    :class:`~.InMemoryTokenBlacklist`.

Concrete adapters (PyJWT, Redis) live under ``staff_records.infra``.
"""

from __future__ import annotations

from .blacklist_store import BlacklistStats, InMemoryTokenBlacklist, TokenBlacklistStore
from .token_provider import RefreshIdentity, TokenIdentity, TokenProvider, TokenSettings

__all__ = [
    "BlacklistStats",
    "InMemoryTokenBlacklist",
    "RefreshIdentity",
    "TokenBlacklistStore",
    "TokenIdentity",
    "TokenProvider",
    "TokenSettings",
]
