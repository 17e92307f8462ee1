# staff_records/services/auth/service.py
from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from staff_records.services._shared.base import BaseService
from staff_records.services._shared.errors import (
    BusinessRuleError,
    InvalidCredentials,
    InvalidCurrentPassword,
    MissingToken,
    NotFoundError,
)
from staff_records.services._shared.ports.token_provider import (
    RefreshIdentity,
    TokenIdentity,
    TokenProvider,
)
from staff_records.services.auth.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    LogoutIn,
    LogoutOut,
    RefreshIn,
    TokenPairOut,
    UserOut,
)

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

LOGOUT_OK = "Logged out successfully"
LOGOUT_PARTIAL = "Logged out; some tokens could not be invalidated and will expire naturally"

# Compared against when the email is unknown so both failure paths hash once
_DUMMY_HASH = generate_password_hash("not-a-real-password")


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout / password).

    Tokens are issued and verified through a :class:`TokenProvider`, which
    also owns invalidation through its blacklist.
    """

    def __init__(self, *, token_provider: TokenProvider) -> None:
        """
        :param token_provider: Adapter for issuing/verifying/invalidating JWTs.
        """
        super().__init__()
        self.tokens = token_provider

    def _issue_pair(self, identity: TokenIdentity) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.tokens.issue_access_token(identity),
            refresh_token=self.tokens.issue_refresh_token(identity),
        )

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown email, inactive account and wrong password all raise the same
        :class:`InvalidCredentials`, and each path performs one hash check.

        :param dto: Login input.
        :returns: Account projection and token pair.
        :raises InvalidCredentials: On any credential failure.
        """
        email = (dto.email or "").strip().lower()
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(email) if email else None
            if user is None:
                check_password_hash(_DUMMY_HASH, dto.password or "")
                log.info("Login failed", extra={"auth_error": "unknown_email"})
                raise InvalidCredentials()
            password_ok = user.verify_password(dto.password or "")
            if not password_ok or not user.is_active:
                log.info(
                    "Login failed",
                    extra={
                        "user_id": user.id,
                        "auth_error": "bad_password" if not password_ok else "inactive",
                    },
                )
                raise InvalidCredentials()
            out = UserOut.from_model(user)

        identity = TokenIdentity(id=out.id, email=out.email, role=out.role)
        log.info("Login succeeded", extra={"user_id": out.id, "role": out.role.value})
        return LoginOut(user=out, tokens=self._issue_pair(identity))

    # ------------------------------------------------------------------ #
    # Refresh (rotate-and-revoke)
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a brand-new pair.

        The role is re-read from the database, and the presented refresh token
        is blacklisted once the new pair exists, so it cannot be replayed.

        :raises TokenMalformed | TokenExpired | TokenBlacklisted: Bad refresh token.
        :raises InvalidCredentials: Account missing or no longer active.
        """
        claimed: RefreshIdentity = self.tokens.verify_refresh_token(dto.refresh_token)
        with self.ro_uow() as uow:
            user = uow.users.get(claimed.id)
            if user is None or not user.is_active:
                log.info(
                    "Refresh rejected",
                    extra={"user_id": claimed.id, "auth_error": "account_unavailable"},
                )
                raise InvalidCredentials()
            identity = TokenIdentity(id=user.id, email=user.email, role=user.role)

        pair = self._issue_pair(identity)
        self.tokens.invalidate(dto.refresh_token, token_type="refresh")
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> LogoutOut:
        """
        Blacklist the bearer token and, if given, the refresh token.

        Only tokens this service signed are blacklisted; anything else is
        skipped and reported through the softer message, as are store
        failures. Logout itself always succeeds once a token is present.

        :raises MissingToken: No bearer token was supplied.
        """
        if not dto.access_token:
            raise MissingToken()

        complete = True
        for token, token_type in ((dto.access_token, "access"), (dto.refresh_token, "refresh")):
            if not token:
                continue
            try:
                complete = self.tokens.invalidate(token, token_type=token_type) and complete
            except Exception:
                complete = False
                log.warning("Token invalidation failed during logout", exc_info=True)

        return LogoutOut(
            fully_invalidated=complete, message=LOGOUT_OK if complete else LOGOUT_PARTIAL
        )

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def me(self, user_id: int) -> UserOut:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserOut.from_model(user)

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Replace the caller's password after checking the current one.

        :raises InvalidCurrentPassword: ``current_password`` does not match.
        :raises BusinessRuleError: New password too short or unchanged.
        """
        if len(dto.new_password or "") < MIN_PASSWORD_LENGTH:
            raise BusinessRuleError(
                f"New password must have at least {MIN_PASSWORD_LENGTH} characters"
            )
        if dto.new_password == dto.current_password:
            raise BusinessRuleError("New password must differ from the current one")

        with self.rw_uow() as uow:
            user = uow.users.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)
            if not user.verify_password(dto.current_password):
                raise InvalidCurrentPassword()
            user.password = dto.new_password
            uow.users.flush()
        log.info("Password changed", extra={"user_id": dto.user_id})
