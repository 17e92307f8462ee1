"""Site assignment repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from staff_records.models.assignment import SiteAssignment
from staff_records.models.enums import AssignmentKind, AssignmentStatus
from staff_records.repositories.base import BaseRepository


class SiteAssignmentRepository(BaseRepository[SiteAssignment]):
    """Persistence-only repository for :class:`SiteAssignment`.

    The single-active-placement rule is enforced by a partial unique index;
    callers should still check :meth:`get_active_staff` first so the common
    case fails with a clear message rather than an ``IntegrityError``.
    """

    model = SiteAssignment

    def _sortable_fields(self):
        return {"start_date": SiteAssignment.start_date, "id": SiteAssignment.id}

    def _filterable_fields(self):
        return {
            "employee_id": SiteAssignment.employee_id,
            "site_id": SiteAssignment.site_id,
            "status": SiteAssignment.status,
            "kind": SiteAssignment.kind,
        }

    def get_active_staff(self, employee_id: int, *, for_update: bool = False) -> SiteAssignment | None:
        """Return the employee's current working placement, if any.

        :param employee_id: Employee identifier.
        :type employee_id: int
        :param for_update: Lock the row (``SELECT ... FOR UPDATE``) when supported.
        :type for_update: bool
        :returns: Active ``STAFF`` assignment or ``None``.
        :rtype: SiteAssignment | None
        """
        stmt = select(SiteAssignment).where(
            SiteAssignment.employee_id == employee_id,
            SiteAssignment.status == AssignmentStatus.ACTIVE,
            SiteAssignment.kind == AssignmentKind.STAFF,
        )
        if for_update:
            stmt = stmt.with_for_update(of=SiteAssignment)
        return cast(SiteAssignment | None, self.session.execute(stmt).scalars().first())

    def list_active_for_employee(self, employee_id: int) -> list[SiteAssignment]:
        stmt = (
            select(SiteAssignment)
            .where(
                SiteAssignment.employee_id == employee_id,
                SiteAssignment.status == AssignmentStatus.ACTIVE,
            )
            .order_by(SiteAssignment.id.asc())
        )
        return list(self.session.execute(stmt).scalars().unique().all())

    def history(self, employee_id: int) -> list[SiteAssignment]:
        """All assignments of an employee, most recent ``start_date`` first."""
        stmt = (
            select(SiteAssignment)
            .where(SiteAssignment.employee_id == employee_id)
            .order_by(SiteAssignment.start_date.desc(), SiteAssignment.id.desc())
        )
        return list(self.session.execute(stmt).scalars().unique().all())

    def active_principal_site_ids(self, employee_id: int) -> set[int]:
        stmt = select(SiteAssignment.site_id).where(
            SiteAssignment.employee_id == employee_id,
            SiteAssignment.status == AssignmentStatus.ACTIVE,
            SiteAssignment.kind == AssignmentKind.PRINCIPAL,
        )
        return {int(v) for v in self.session.execute(stmt).scalars().all()}

    def has_active_for_site(self, site_id: int) -> bool:
        stmt = select(SiteAssignment.id).where(
            SiteAssignment.site_id == site_id,
            SiteAssignment.status == AssignmentStatus.ACTIVE,
        )
        return self.session.execute(stmt.limit(1)).first() is not None
