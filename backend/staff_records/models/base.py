"""Column mixins and value normalizers shared by the models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, validates


class PKMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class ReprMixin:
    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"


class TimestampMixin:
    """``created_at`` set by the database; ``updated_at`` bumped on every ORM update."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class PersonMixin:
    """
    Identity of a person: document plus names.

    Accounts and staff members both carry it. The unique constraint on
    ``document_number`` belongs to each table, since the two registries are
    independent.
    """

    document_type: Mapped[str] = mapped_column(String(10), default="CC", nullable=False)
    document_number: Mapped[str] = mapped_column(String(30), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @validates("document_number", "first_name", "last_name")
    def _require_text(self, key: str, value: str) -> str:
        cleaned = value.strip() if isinstance(value, str) else ""
        if not cleaned:
            raise ValueError(f"{key} is required.")
        return cleaned


def normalize_email(value: str | None, *, required: bool = True) -> str | None:
    """Trim and lowercase ``value``.

    Blank input becomes ``None`` when the address is optional. Only the shape
    ``local@domain.tld`` is checked here; schemas do the strict validation.

    :raises ValueError: Missing while required, or no ``@``/dotted domain.
    """
    cleaned = value.strip().lower() if isinstance(value, str) else ""
    if not cleaned:
        if required:
            raise ValueError("Email is required.")
        return None
    _, at, domain = cleaned.rpartition("@")
    if not at or "." not in domain:
        raise ValueError("Email format looks invalid.")
    return cleaned
