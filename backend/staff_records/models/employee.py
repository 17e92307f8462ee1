"""Staff member models: employees, their academic records and comments."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from staff_records.core.extensions import db

from .base import PersonMixin, PKMixin, ReprMixin, TimestampMixin, normalize_email
from .enums import AcademicLevel, EmployeePosition, EmployeeStatus, enum_type

if TYPE_CHECKING:
    from .assignment import SiteAssignment
    from .user import User


class Employee(PKMixin, ReprMixin, TimestampMixin, PersonMixin, db.Model):
    """
    Teacher or principal on the district payroll.

    Notes
    -----
    - Soft deletion flips ``status`` to ``INACTIVE``; rows are never removed.
    - ``email`` is optional but unique when present (NULLs do not collide).
    """

    __tablename__ = "employees"

    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[EmployeePosition] = mapped_column(
        enum_type(EmployeePosition, "enum_employee_position"),
        nullable=False,
        default=EmployeePosition.TEACHER,
    )
    status: Mapped[EmployeeStatus] = mapped_column(
        enum_type(EmployeeStatus, "enum_employee_status"),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )

    __table_args__ = (
        UniqueConstraint("document_number", name="uq_employees_document_number"),
        UniqueConstraint("email", name="uq_employees_email"),
        Index("ix_employees_position_status", "position", "status"),
    )

    academic_records: Mapped[list[AcademicRecord]] = relationship(
        "AcademicRecord",
        back_populates="employee",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    comments: Mapped[list[EmployeeComment]] = relationship(
        "EmployeeComment",
        back_populates="employee",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    assignments: Mapped[list[SiteAssignment]] = relationship(
        "SiteAssignment", back_populates="employee", lazy="select"
    )

    @property
    def is_active(self) -> bool:
        return self.status is EmployeeStatus.ACTIVE

    @validates("email")
    def _normalize_email(self, key: str, value: str | None) -> str | None:
        return normalize_email(value, required=False)


class AcademicRecord(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Highest academic level and teaching experience of an employee."""

    __tablename__ = "academic_records"

    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    level: Mapped[AcademicLevel] = mapped_column(
        enum_type(AcademicLevel, "enum_academic_level"), nullable=False
    )
    years_experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    institution: Mapped[str | None] = mapped_column(String(200), nullable=True)
    degree_title: Mapped[str | None] = mapped_column(String(200), nullable=True)

    employee: Mapped[Employee] = relationship("Employee", back_populates="academic_records")

    @validates("years_experience")
    def _validate_years(self, key: str, value: int | None) -> int | None:
        if value is not None and int(value) < 0:
            raise ValueError("years_experience cannot be negative.")
        return value


class EmployeeComment(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Free-text note on an employee file, authored by a system user."""

    __tablename__ = "employee_comments"

    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    note: Mapped[str] = mapped_column(Text, nullable=False)

    employee: Mapped[Employee] = relationship("Employee", back_populates="comments")
    author: Mapped[User | None] = relationship("User", lazy="joined")
