"""Values exchanged with :class:`AuthService`."""

from __future__ import annotations

from dataclasses import dataclass

from staff_records.models.enums import AccountStatus, Role
from staff_records.models.user import User


@dataclass(frozen=True, slots=True)
class LoginIn:
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """Tokens to revoke: the bearer access token and, optionally, its refresh token."""

    access_token: str | None
    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    user_id: int
    current_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class UserOut:
    """Account as shown to clients; the password hash never leaves the model."""

    id: int
    email: str
    first_name: str
    last_name: str
    document_type: str
    document_number: str
    phone: str | None
    role: Role
    status: AccountStatus

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            **{name: getattr(user, name) for name in cls.__dataclass_fields__}
        )


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    user: UserOut
    tokens: TokenPairOut


@dataclass(frozen=True, slots=True)
class LogoutOut:
    """``fully_invalidated`` is ``False`` when the blacklist refused a token."""

    fully_invalidated: bool
    message: str
