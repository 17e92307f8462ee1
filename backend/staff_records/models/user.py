"""Accounts allowed to operate the API."""

from __future__ import annotations

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from staff_records.core.extensions import db

from .base import PersonMixin, PKMixin, ReprMixin, TimestampMixin, normalize_email
from .enums import AccountStatus, Role, enum_type


class User(PKMixin, ReprMixin, TimestampMixin, PersonMixin, db.Model):
    """
    Login account with a role.

    ``email`` is stored trimmed and lowercased. The password is write-only:
    assign ``user.password = "..."`` and the werkzeug hash lands in
    ``password_hash``. Only ``ACTIVE`` accounts may log in or refresh.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("document_number", name="uq_users_document_number"),
        Index("ix_users_role", "role"),
    )

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    role: Mapped[Role] = mapped_column(
        enum_type(Role, "enum_user_role"), default=Role.GESTOR, nullable=False
    )
    status: Mapped[AccountStatus] = mapped_column(
        enum_type(AccountStatus, "enum_account_status"),
        default=AccountStatus.ACTIVE,
        nullable=False,
    )

    @property
    def password(self) -> str:
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        if not raw or not isinstance(raw, str):
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, raw)

    @property
    def is_active(self) -> bool:
        return self.status is AccountStatus.ACTIVE

    @validates("email")
    def _clean_email(self, key: str, value: str) -> str:
        return normalize_email(value)  # type: ignore[return-value]
