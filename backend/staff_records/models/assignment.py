"""Placement of employees at sites over time."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staff_records.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin
from .enums import AssignmentKind, AssignmentStatus, enum_type

if TYPE_CHECKING:
    from .employee import Employee
    from .site import Site

# Partial unique indexes; both SQLite and PostgreSQL honour the WHERE clause.
ACTIVE_STAFF_INDEX = "uq_site_assignments_active_staff"
ACTIVE_PRINCIPAL_SITE_INDEX = "uq_site_assignments_active_principal_site"

_ACTIVE_STAFF = text("status = 'active' AND kind = 'staff'")
_ACTIVE_PRINCIPAL = text("status = 'active' AND kind = 'principal'")


class SiteAssignment(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One employee placed at one site for a period.

    Invariants
    ----------
    - At most one ``ACTIVE`` assignment of kind ``STAFF`` per employee.
    - At most one ``ACTIVE`` ``PRINCIPAL`` assignment per (employee, site).
    - ``end_date`` is set exactly when the assignment is ended.
    """

    __tablename__ = "site_assignments"

    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    site_id: Mapped[int] = mapped_column(
        ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[AssignmentStatus] = mapped_column(
        enum_type(AssignmentStatus, "enum_assignment_status"),
        nullable=False,
        default=AssignmentStatus.ACTIVE,
    )
    kind: Mapped[AssignmentKind] = mapped_column(
        enum_type(AssignmentKind, "enum_assignment_kind"),
        nullable=False,
        default=AssignmentKind.STAFF,
    )

    __table_args__ = (
        Index(
            ACTIVE_STAFF_INDEX,
            "employee_id",
            unique=True,
            sqlite_where=_ACTIVE_STAFF,
            postgresql_where=_ACTIVE_STAFF,
        ),
        Index(
            ACTIVE_PRINCIPAL_SITE_INDEX,
            "employee_id",
            "site_id",
            unique=True,
            sqlite_where=_ACTIVE_PRINCIPAL,
            postgresql_where=_ACTIVE_PRINCIPAL,
        ),
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date", name="end_after_start"
        ),
    )

    employee: Mapped[Employee] = relationship(
        "Employee", back_populates="assignments", lazy="joined"
    )
    site: Mapped[Site] = relationship("Site", lazy="joined")

    @property
    def is_active(self) -> bool:
        return self.status is AssignmentStatus.ACTIVE

    def end(self, on: date) -> None:
        """Close the assignment on ``on`` (clamped to ``start_date``)."""
        self.end_date = max(on, self.start_date)
        self.status = AssignmentStatus.ENDED
