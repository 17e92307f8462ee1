# staff_records/infra/jwt/jwt_token_provider.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from staff_records.core.config import ConfigurationError, parse_duration
from staff_records.models.enums import Role
from staff_records.services._shared.errors import (
    TokenBlacklisted,
    TokenExpired,
    TokenMalformed,
)
from staff_records.services._shared.ports import (
    RefreshIdentity,
    TokenBlacklistStore,
    TokenIdentity,
    TokenProvider,
    TokenSettings,
)

log = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class JWTTokenProvider(TokenProvider):
    """
    PyJWT adapter issuing and verifying the access/refresh pair.

    Access and refresh tokens are signed with different secrets, so one can
    never be replayed as the other even if the ``type`` claim were forged.
    Verification consults the blacklist before the signature, which is why an
    invalidated token reports ``TokenBlacklisted`` rather than ``TokenExpired``.

    One instance lives per process (see :func:`staff_records.core.security.init_app`);
    tests build their own.
    """

    def __init__(self, settings: TokenSettings, blacklist: TokenBlacklistStore) -> None:
        problems = []
        if not settings.access_secret:
            problems.append("access secret is missing")
        if not settings.refresh_secret:
            problems.append("refresh secret is missing")
        if settings.access_secret and settings.access_secret == settings.refresh_secret:
            problems.append("access and refresh secrets must differ")
        if settings.access_ttl <= timedelta(0) or settings.refresh_ttl <= timedelta(0):
            problems.append("token lifetimes must be positive")
        if problems:
            raise ConfigurationError("Invalid token settings: " + "; ".join(problems))
        self.settings = settings
        self.blacklist = blacklist

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any], blacklist: TokenBlacklistStore
    ) -> JWTTokenProvider:
        """Build the provider from Flask configuration keys (``JWT_*``)."""
        settings = TokenSettings(
            access_secret=config.get("JWT_SECRET") or "",
            refresh_secret=config.get("JWT_REFRESH_SECRET") or "",
            access_ttl=parse_duration(config.get("JWT_EXPIRES_IN", "24h")),
            refresh_ttl=parse_duration(config.get("JWT_REFRESH_EXPIRES_IN", "7d")),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )
        return cls(settings, blacklist)

    # ------------------------------ Issuing ---------------------------------

    def _encode(self, claims: dict[str, Any], *, token_type: str) -> str:
        now = datetime.now(UTC)
        secret, ttl = (
            (self.settings.access_secret, self.settings.access_ttl)
            if token_type == ACCESS
            else (self.settings.refresh_secret, self.settings.refresh_ttl)
        )
        payload = {
            **claims,
            "type": token_type,
            # Random jti keeps same-second tokens distinct strings
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm)

    def issue_access_token(self, identity: TokenIdentity) -> str:
        return self._encode(
            {"id": identity.id, "email": identity.email, "role": Role(identity.role).value},
            token_type=ACCESS,
        )

    def issue_refresh_token(self, identity: RefreshIdentity | TokenIdentity) -> str:
        # Role is left out; refresh re-reads it from the database.
        return self._encode({"id": identity.id, "email": identity.email}, token_type=REFRESH)

    # ----------------------------- Verifying --------------------------------

    def _decode(self, token: str, *, token_type: str) -> dict[str, Any]:
        """
        Verify blacklist, signature, expiry and token type.

        :raises TokenBlacklisted: Token was invalidated.
        :raises TokenExpired: Signature valid but past ``exp``.
        :raises TokenMalformed: Bad signature, unparsable, wrong type or missing claims.
        """
        if not token:
            raise TokenMalformed("Empty token")
        if self.blacklist.is_blacklisted(token):
            raise TokenBlacklisted("Token has been invalidated")

        secret = (
            self.settings.access_secret if token_type == ACCESS else self.settings.refresh_secret
        )
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenMalformed(f"Invalid token: {exc}") from exc

        if payload.get("type") != token_type:
            raise TokenMalformed(f"Expected a {token_type} token")
        if not isinstance(payload.get("id"), int) or not payload.get("email"):
            raise TokenMalformed("Token is missing identity claims")
        return payload

    def verify_access_token(self, token: str) -> TokenIdentity:
        payload = self._decode(token, token_type=ACCESS)
        try:
            role = Role(payload.get("role"))
        except ValueError as exc:
            raise TokenMalformed("Token carries an unknown role") from exc
        return TokenIdentity(id=payload["id"], email=str(payload["email"]), role=role)

    def verify_refresh_token(self, token: str) -> RefreshIdentity:
        payload = self._decode(token, token_type=REFRESH)
        return RefreshIdentity(id=payload["id"], email=str(payload["email"]))

    # ---------------------------- Invalidating ------------------------------

    def invalidate(self, token: str, *, token_type: str = ACCESS) -> bool:
        """
        Blacklist ``token`` until its ``exp``.

        The signature is checked against the secret of ``token_type`` but
        expiry is not, so an expired session can still log out. Anything we
        did not sign is ignored, which keeps every entry bounded by an ``exp``
        of our own.

        :returns: ``True`` if the token was blacklisted.
        """
        secret = (
            self.settings.access_secret if token_type == ACCESS else self.settings.refresh_secret
        )
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                options={"verify_exp": False, "require": ["exp"]},
            )
        except jwt.InvalidTokenError as exc:
            log.info("Refusing to blacklist an unverifiable token", extra={"error": str(exc)})
            return False
        if claims.get("type") != token_type:
            log.info("Refusing to blacklist a token of the wrong type", extra={"expected": token_type})
            return False
        self.blacklist.add(token, float(claims["exp"]))
        return True

    @staticmethod
    def extract_bearer(header_value: str | None) -> str | None:
        """
        Return the token from ``"Bearer <token>"``; ``None`` for any other shape.

        :param header_value: Raw ``Authorization`` header.
        :type header_value: str | None
        :returns: Token string or ``None``.
        :rtype: str | None
        """
        if not header_value or not isinstance(header_value, str):
            return None
        parts = header_value.strip().split()
        if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
            return None
        return parts[1]
