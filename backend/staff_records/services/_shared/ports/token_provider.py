from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from staff_records.models.enums import Role


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Signing material and lifetimes for the token pair.

    :param access_secret: HMAC secret for access tokens.
    :param refresh_secret: HMAC secret for refresh tokens; must differ.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: JWS algorithm.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(hours=24)
    refresh_ttl: timedelta = timedelta(days=7)
    algorithm: str = "HS256"


@dataclass(frozen=True, slots=True)
class TokenIdentity:
    """Identity carried by a verified access token."""

    id: int
    email: str
    role: Role


@dataclass(frozen=True, slots=True)
class RefreshIdentity:
    """Identity carried by a verified refresh token (no role on purpose)."""

    id: int
    email: str


class TokenProvider(Protocol):
    """Port for issuing, verifying and invalidating access/refresh tokens."""

    def issue_access_token(self, identity: TokenIdentity) -> str: ...

    def issue_refresh_token(self, identity: RefreshIdentity | TokenIdentity) -> str: ...

    def verify_access_token(self, token: str) -> TokenIdentity: ...

    def verify_refresh_token(self, token: str) -> RefreshIdentity: ...

    def invalidate(self, token: str, *, token_type: str = "access") -> bool: ...

    @staticmethod
    def extract_bearer(header_value: str | None) -> str | None: ...
