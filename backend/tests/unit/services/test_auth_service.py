# tests/unit/services/test_auth_service.py
from __future__ import annotations

from datetime import timedelta

import pytest

from staff_records.infra.jwt.jwt_token_provider import JWTTokenProvider
from staff_records.models import AccountStatus, Role
from staff_records.services._shared.errors import (
    BusinessRuleError,
    InvalidCredentials,
    InvalidCurrentPassword,
    MissingToken,
    TokenBlacklisted,
)
from staff_records.services._shared.ports import InMemoryTokenBlacklist, TokenSettings
from staff_records.services.auth.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    LogoutIn,
    RefreshIn,
)
from staff_records.services.auth.service import LOGOUT_OK, LOGOUT_PARTIAL, AuthService
from tests.factories.user import UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def blacklist() -> InMemoryTokenBlacklist:
    return InMemoryTokenBlacklist()


@pytest.fixture()
def service(blacklist) -> AuthService:
    """Build an AuthService wired to a real PyJWT provider and in-memory blacklist."""
    provider = JWTTokenProvider(
        TokenSettings(
            access_secret="unit-access",
            refresh_secret="unit-refresh",
            access_ttl=timedelta(minutes=15),
        ),
        blacklist,
    )
    return AuthService(token_provider=provider)


@pytest.fixture()
def user(session):
    account = UserFactory(email="rectoria@district.example.com", password="secret1", admin=True)
    session.commit()
    return account


class _FailingProvider(JWTTokenProvider):
    def invalidate(self, token: str, *, token_type: str = "access") -> bool:
        raise RuntimeError("blacklist unavailable")


# -------------------------------- Tests ----------------------------------- #
def test_login_returns_user_and_token_pair(service, user):
    out = service.login(LoginIn(email="  Rectoria@District.example.com ", password="secret1"))

    assert isinstance(out, LoginOut)
    assert out.user.id == user.id
    assert out.user.role is Role.ADMIN
    identity = service.tokens.verify_access_token(out.tokens.access_token)
    assert (identity.id, identity.role) == (user.id, Role.ADMIN)
    assert service.tokens.verify_refresh_token(out.tokens.refresh_token).id == user.id


@pytest.mark.parametrize(
    ("email", "password"),
    [
        ("rectoria@district.example.com", "wrong"),
        ("nobody@district.example.com", "secret1"),
        ("", "secret1"),
    ],
)
def test_login_failures_are_indistinguishable(service, user, email, password):
    with pytest.raises(InvalidCredentials) as excinfo:
        service.login(LoginIn(email=email, password=password))
    assert str(excinfo.value) == "Invalid credentials"


def test_login_rejects_inactive_account(service, session, user):
    user.status = AccountStatus.SUSPENDED
    session.commit()

    with pytest.raises(InvalidCredentials):
        service.login(LoginIn(email=user.email, password="secret1"))


def test_refresh_rotates_and_revokes_presented_token(service, user, blacklist):
    pair = service.login(LoginIn(email=user.email, password="secret1")).tokens

    rotated = service.refresh(RefreshIn(refresh_token=pair.refresh_token))

    assert rotated.refresh_token != pair.refresh_token
    assert rotated.access_token != pair.access_token
    assert blacklist.is_blacklisted(pair.refresh_token)
    with pytest.raises(TokenBlacklisted):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_refresh_reads_current_role(service, session, user):
    pair = service.login(LoginIn(email=user.email, password="secret1")).tokens
    user.role = Role.GESTOR
    session.commit()

    rotated = service.refresh(RefreshIn(refresh_token=pair.refresh_token))

    assert service.tokens.verify_access_token(rotated.access_token).role is Role.GESTOR


def test_refresh_rejects_deactivated_account(service, session, user):
    pair = service.login(LoginIn(email=user.email, password="secret1")).tokens
    user.status = AccountStatus.INACTIVE
    session.commit()

    with pytest.raises(InvalidCredentials):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_logout_blacklists_both_tokens(service, user):
    pair = service.login(LoginIn(email=user.email, password="secret1")).tokens

    out = service.logout(LogoutIn(access_token=pair.access_token, refresh_token=pair.refresh_token))

    assert out.fully_invalidated is True
    assert out.message == LOGOUT_OK
    with pytest.raises(TokenBlacklisted):
        service.tokens.verify_access_token(pair.access_token)
    with pytest.raises(TokenBlacklisted):
        service.tokens.verify_refresh_token(pair.refresh_token)


def test_logout_requires_a_token(service):
    with pytest.raises(MissingToken):
        service.logout(LogoutIn(access_token=None))


def test_logout_still_succeeds_when_blacklisting_fails(user, blacklist):
    provider = _FailingProvider(TokenSettings(access_secret="a", refresh_secret="b"), blacklist)
    service = AuthService(token_provider=provider)

    out = service.logout(LogoutIn(access_token="whatever"))

    assert out.fully_invalidated is False
    assert out.message == LOGOUT_PARTIAL


def test_logout_skips_tokens_it_did_not_sign(service, user, blacklist):
    pair = service.login(LoginIn(email=user.email, password="secret1")).tokens

    out = service.logout(LogoutIn(access_token=pair.access_token, refresh_token="forged"))

    assert out.fully_invalidated is False
    assert out.message == LOGOUT_PARTIAL
    assert blacklist.is_blacklisted(pair.access_token)
    assert not blacklist.is_blacklisted("forged")
    assert blacklist.stats().total_blacklisted == 1


def test_change_password(service, user):
    service.change_password(
        ChangePasswordIn(user_id=user.id, current_password="secret1", new_password="secret22")
    )

    assert service.login(LoginIn(email=user.email, password="secret22")).user.id == user.id
    with pytest.raises(InvalidCredentials):
        service.login(LoginIn(email=user.email, password="secret1"))


def test_change_password_checks_current(service, user):
    with pytest.raises(InvalidCurrentPassword):
        service.change_password(
            ChangePasswordIn(user_id=user.id, current_password="nope", new_password="secret22")
        )


@pytest.mark.parametrize("new_password", ["short", "secret1"])
def test_change_password_rules(service, user, new_password):
    with pytest.raises(BusinessRuleError):
        service.change_password(
            ChangePasswordIn(user_id=user.id, current_password="secret1", new_password=new_password)
        )
