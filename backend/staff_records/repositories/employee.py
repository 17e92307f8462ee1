"""Employee, academic record and comment repositories."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select

from staff_records.models.assignment import SiteAssignment
from staff_records.models.employee import AcademicRecord, Employee, EmployeeComment
from staff_records.models.enums import (
    AssignmentKind,
    AssignmentStatus,
    EmployeePosition,
    EmployeeStatus,
)
from staff_records.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    """Persistence-only repository for :class:`Employee`."""

    model = Employee

    def _sortable_fields(self):
        return {
            "id": Employee.id,
            "last_name": Employee.last_name,
            "first_name": Employee.first_name,
            "document_number": Employee.document_number,
            "created_at": Employee.created_at,
        }

    def _filterable_fields(self):
        return {
            "position": Employee.position,
            "status": Employee.status,
            "document_number": Employee.document_number,
        }

    def _updatable_fields(self):
        return {"first_name", "last_name", "email", "phone", "address", "status", "position"}

    # ---------------------------- Lookup helpers ----------------------------

    def find_duplicate(
        self,
        *,
        document_number: str,
        email: str | None = None,
        only_active: bool = False,
    ) -> Employee | None:
        """Return an employee sharing the document number or (non-null) email.

        :param document_number: Document number of the candidate.
        :type document_number: str
        :param email: Optional email of the candidate; compared normalized.
        :type email: str | None
        :param only_active: Restrict the search to ``ACTIVE`` employees.
        :type only_active: bool
        :returns: The first clashing employee, or ``None``.
        :rtype: Employee | None
        """
        clauses = [Employee.document_number == document_number.strip()]
        if email:
            clauses.append(Employee.email == email.strip().lower())
        stmt = select(Employee).where(or_(*clauses))
        if only_active:
            stmt = stmt.where(Employee.status == EmployeeStatus.ACTIVE)
        return cast(Employee | None, self.session.execute(stmt.limit(1)).scalars().first())

    def list_by_site(
        self,
        site_id: int,
        *,
        position: EmployeePosition | None = None,
        status: EmployeeStatus | None = None,
        active_only: bool = True,
    ) -> list[tuple[Employee, SiteAssignment]]:
        """List employees placed at ``site_id`` with the matching assignment.

        :param site_id: Site identifier.
        :param position: Optional position filter.
        :param status: Optional employee status filter.
        :param active_only: Restrict to ``ACTIVE`` staff assignments.
        :returns: ``(employee, assignment)`` pairs ordered by last name.
        """
        stmt = (
            select(Employee, SiteAssignment)
            .join(SiteAssignment, SiteAssignment.employee_id == Employee.id)
            .where(
                SiteAssignment.site_id == site_id,
                SiteAssignment.kind == AssignmentKind.STAFF,
            )
            .order_by(Employee.last_name.asc(), Employee.id.asc())
        )
        if active_only:
            stmt = stmt.where(SiteAssignment.status == AssignmentStatus.ACTIVE)
        if position is not None:
            stmt = stmt.where(Employee.position == position)
        if status is not None:
            stmt = stmt.where(Employee.status == status)
        return [(row[0], row[1]) for row in self.session.execute(stmt).unique().all()]


class AcademicRecordRepository(BaseRepository[AcademicRecord]):
    model = AcademicRecord

    def _filterable_fields(self):
        return {"employee_id": AcademicRecord.employee_id}


class EmployeeCommentRepository(BaseRepository[EmployeeComment]):
    model = EmployeeComment

    def _sortable_fields(self):
        return {"created_at": EmployeeComment.created_at}

    def _filterable_fields(self):
        return {"employee_id": EmployeeComment.employee_id}
