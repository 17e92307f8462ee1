# staff_records/services/employees/service.py
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError

from staff_records.models.assignment import ACTIVE_STAFF_INDEX, SiteAssignment
from staff_records.models.employee import AcademicRecord, Employee, EmployeeComment
from staff_records.models.enums import AssignmentKind, AssignmentStatus, EmployeeStatus
from staff_records.models.site import Site
from staff_records.services._shared.base import BaseService
from staff_records.services._shared.errors import (
    ActiveAssignmentExistsError,
    BusinessRuleError,
    DuplicateEmployeeError,
    EmployeeInactiveError,
    InvalidTransferDateError,
    NoActiveAssignmentError,
    NotFoundError,
    SameSiteTransferError,
    SiteInactiveError,
    violates,
)
from staff_records.services.employees.dto import (
    AcademicRecordIn,
    AcademicRecordOut,
    AssignmentOut,
    AssignSiteIn,
    AvailableSitesIn,
    CommentOut,
    CreateEmployeeWithSiteIn,
    EmployeeDetailOut,
    EmployeeIn,
    EmployeeOut,
    EmployeesBySiteIn,
    EmployeeWithSiteOut,
    FinalizeIn,
    SiteEmployeeOut,
    TransferIn,
    TransferOut,
)
from staff_records.services.sites.dto import SiteOut
from staff_records.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)

# SQLite reports offending columns rather than the index/constraint name
_ACTIVE_STAFF_NAMES = (ACTIVE_STAFF_INDEX, "site_assignments.employee_id")
_DUPLICATE_EMPLOYEE_NAMES = (
    "uq_employees_document_number",
    "uq_employees_email",
    "employees.document_number",
    "employees.email",
)


def _violates_any(exc: IntegrityError, names: tuple[str, ...]) -> bool:
    return any(violates(exc, name) for name in names)


def insert_employee(uow: SQLAlchemyUnitOfWork, data: EmployeeIn, *, only_active: bool = False) -> Employee:
    """
    Check for duplicates and insert an active employee.

    Shared by every workflow that creates staff, so duplicates are reported
    the same way whether caught by the pre-check or by the unique constraints.

    :param uow: Open read-write unit of work.
    :param data: Personal data of the new employee.
    :param only_active: Only active employees count as duplicates.
    :raises DuplicateEmployeeError: Document number or email already taken.
    """
    clash = uow.employees.find_duplicate(
        document_number=data.document_number, email=data.email, only_active=only_active
    )
    if clash is not None:
        field = (
            "document number"
            if clash.document_number == data.document_number.strip()
            else "email"
        )
        raise DuplicateEmployeeError(f"{field} already registered")

    employee = Employee(
        document_type=data.document_type,
        document_number=data.document_number,
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone=data.phone,
        address=data.address,
        position=data.position,
        status=EmployeeStatus.ACTIVE,
    )
    try:
        return uow.employees.add(employee)
    except IntegrityError as exc:
        if _violates_any(exc, _DUPLICATE_EMPLOYEE_NAMES):
            raise DuplicateEmployeeError() from exc
        raise


def insert_academic_record(
    uow: SQLAlchemyUnitOfWork, employee_id: int, data: AcademicRecordIn
) -> AcademicRecord:
    if data.years_experience is not None and data.years_experience < 0:
        raise BusinessRuleError("years_experience must be zero or positive")
    record = AcademicRecord(
        employee_id=employee_id,
        level=data.level,
        years_experience=data.years_experience,
        institution=data.institution,
        degree_title=data.degree_title,
    )
    return uow.academic_records.add(record)


class EmployeeWorkflowService(BaseService):
    """
    Staff placement workflows.

    Every public method runs in a single unit of work: a failure at any step
    leaves no trace of the earlier ones. Pre-checks give precise errors; the
    partial unique index on active staff assignments settles races.
    """

    # ------------------------------------------------------------------ #
    # Helpers (run inside an open UoW)
    # ------------------------------------------------------------------ #

    @staticmethod
    def _active_site(uow: SQLAlchemyUnitOfWork, site_id: int) -> Site:
        site = uow.sites.get(site_id)
        if site is None:
            raise NotFoundError("Site", site_id)
        if not site.is_active:
            raise SiteInactiveError(site_id)
        return site

    @staticmethod
    def _active_employee(uow: SQLAlchemyUnitOfWork, employee_id: int) -> Employee:
        employee = uow.employees.get(employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        if not employee.is_active:
            raise EmployeeInactiveError(employee_id)
        return employee

    @staticmethod
    def _open_staff_assignment(
        uow: SQLAlchemyUnitOfWork, employee_id: int, site: Site, start: date
    ) -> SiteAssignment:
        assignment = SiteAssignment(
            employee_id=employee_id,
            site=site,
            start_date=start,
            status=AssignmentStatus.ACTIVE,
            kind=AssignmentKind.STAFF,
        )
        try:
            return uow.assignments.add(assignment)
        except IntegrityError as exc:
            if _violates_any(exc, _ACTIVE_STAFF_NAMES):
                raise ActiveAssignmentExistsError(employee_id) from exc
            raise

    # ------------------------------------------------------------------ #
    # Composite creation
    # ------------------------------------------------------------------ #

    def create_with_site(
        self, dto: CreateEmployeeWithSiteIn, *, author_id: int | None = None
    ) -> EmployeeWithSiteOut:
        """
        Create an employee and place them at a site in one transaction.

        :param dto: Employee data, target site and optional extras.
        :param author_id: User recorded as author of the optional comment.
        :raises NotFoundError: Site does not exist.
        :raises SiteInactiveError: Site is inactive.
        :raises DuplicateEmployeeError: Document number or email taken.
        :raises ActiveAssignmentExistsError: Lost a race on the placement.
        """
        start = dto.start_date or date.today()
        with self.rw_uow() as uow:
            site = self._active_site(uow, dto.site_id)
            employee = insert_employee(uow, dto.employee)

            record = None
            if dto.academic is not None:
                record = insert_academic_record(uow, employee.id, dto.academic)

            comment = None
            if dto.comment and dto.comment.strip():
                comment = uow.comments.add(
                    EmployeeComment(
                        employee_id=employee.id, author_id=author_id, note=dto.comment.strip()
                    )
                )

            assignment = self._open_staff_assignment(uow, employee.id, site, start)

            out = EmployeeWithSiteOut(
                employee=EmployeeOut.from_model(employee),
                assignment=AssignmentOut.from_model(assignment),
                site=SiteOut.from_model(site),
                academic_record=AcademicRecordOut.from_model(record) if record else None,
                comment=CommentOut.from_model(comment) if comment else None,
            )

        log.info(
            "Employee created with site",
            extra={
                "workflow": "employee_with_site",
                "employee_id": out.employee.id,
                "site_id": out.site.id,
            },
        )
        return out

    # ------------------------------------------------------------------ #
    # Placement changes
    # ------------------------------------------------------------------ #

    def assign_to_site(self, dto: AssignSiteIn) -> AssignmentOut:
        """
        Place an existing employee at a site.

        With ``replace_current`` the current placement is ended today first;
        otherwise an existing placement is a conflict.

        :raises ActiveAssignmentExistsError: Already placed and not replacing.
        """
        today = date.today()
        start = dto.start_date or today
        with self.rw_uow() as uow:
            employee = self._active_employee(uow, dto.employee_id)
            site = self._active_site(uow, dto.site_id)

            current = uow.assignments.get_active_staff(employee.id, for_update=True)
            if current is not None:
                if not dto.replace_current:
                    raise ActiveAssignmentExistsError(employee.id)
                current.end(today)
                uow.assignments.flush()

            out = AssignmentOut.from_model(
                self._open_staff_assignment(uow, employee.id, site, start)
            )

        log.info(
            "Employee assigned to site",
            extra={"workflow": "assign_site", "employee_id": out.employee_id, "site_id": out.site_id},
        )
        return out

    def transfer(self, dto: TransferIn) -> TransferOut:
        """
        Move an employee from their current site to another one.

        :raises NoActiveAssignmentError: Nothing to transfer from.
        :raises SameSiteTransferError: Destination is the current site.
        :raises InvalidTransferDateError: ``transfer_date`` precedes the current
            placement, which would leave two overlapping placements.
        """
        on = dto.transfer_date or date.today()
        with self.rw_uow() as uow:
            current = uow.assignments.get_active_staff(dto.employee_id, for_update=True)
            if current is None:
                if uow.employees.get(dto.employee_id) is None:
                    raise NotFoundError("Employee", dto.employee_id)
                raise NoActiveAssignmentError(dto.employee_id)

            if on < current.start_date:
                raise InvalidTransferDateError(on, current.start_date)

            site = self._active_site(uow, dto.site_id)
            if site.id == current.site_id:
                raise SameSiteTransferError(site.id)

            current.end(on)
            uow.assignments.flush()
            new = self._open_staff_assignment(uow, dto.employee_id, site, on)

            out = TransferOut(
                previous=AssignmentOut.from_model(current),
                current=AssignmentOut.from_model(new),
            )

        log.info(
            "Employee transferred",
            extra={"workflow": "transfer", "employee_id": dto.employee_id, "site_id": dto.site_id},
        )
        return out

    def finalize_assignment(self, dto: FinalizeIn) -> AssignmentOut:
        """:raises NoActiveAssignmentError: The employee is not placed anywhere."""
        on = dto.end_date or date.today()
        with self.rw_uow() as uow:
            current = uow.assignments.get_active_staff(dto.employee_id, for_update=True)
            if current is None:
                raise NoActiveAssignmentError(dto.employee_id)
            current.end(on)
            uow.assignments.flush()
            out = AssignmentOut.from_model(current)

        log.info(
            "Assignment finalized",
            extra={"workflow": "finalize", "employee_id": dto.employee_id, "site_id": out.site_id},
        )
        return out

    # ------------------------------------------------------------------ #
    # Status
    # ------------------------------------------------------------------ #

    def deactivate(self, employee_id: int) -> EmployeeOut:
        """Soft-delete an employee and end every active assignment they hold."""
        today = date.today()
        with self.rw_uow() as uow:
            employee = uow.employees.get(employee_id)
            if employee is None:
                raise NotFoundError("Employee", employee_id)
            ended = 0
            for assignment in uow.assignments.list_active_for_employee(employee_id):
                assignment.end(today)
                ended += 1
            employee.status = EmployeeStatus.INACTIVE
            uow.employees.flush()
            out = EmployeeOut.from_model(employee)

        log.info(
            "Employee deactivated (%d assignments ended)",
            ended,
            extra={"workflow": "deactivate", "employee_id": employee_id},
        )
        return out

    def reactivate(self, employee_id: int) -> EmployeeOut:
        with self.rw_uow() as uow:
            employee = uow.employees.get(employee_id)
            if employee is None:
                raise NotFoundError("Employee", employee_id)
            if employee.status is EmployeeStatus.ACTIVE:
                raise BusinessRuleError(f"Employee {employee_id} is already active")
            employee.status = EmployeeStatus.ACTIVE
            uow.employees.flush()
            out = EmployeeOut.from_model(employee)

        log.info("Employee reactivated", extra={"workflow": "reactivate", "employee_id": employee_id})
        return out

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get(self, employee_id: int) -> EmployeeDetailOut:
        with self.ro_uow() as uow:
            employee = uow.employees.get(employee_id)
            if employee is None:
                raise NotFoundError("Employee", employee_id)
            current = uow.assignments.get_active_staff(employee_id)
            return EmployeeDetailOut(
                employee=EmployeeOut.from_model(employee),
                academic_records=tuple(
                    AcademicRecordOut.from_model(r) for r in employee.academic_records
                ),
                comments=tuple(CommentOut.from_model(c) for c in employee.comments),
                current_assignment=AssignmentOut.from_model(current) if current else None,
            )

    def history(self, employee_id: int) -> list[AssignmentOut]:
        """Assignment history, most recent ``start_date`` first."""
        with self.ro_uow() as uow:
            if uow.employees.get(employee_id) is None:
                raise NotFoundError("Employee", employee_id)
            return [AssignmentOut.from_model(a) for a in uow.assignments.history(employee_id)]

    def employees_by_site(self, dto: EmployeesBySiteIn) -> list[SiteEmployeeOut]:
        with self.ro_uow() as uow:
            if uow.sites.get(dto.site_id) is None:
                raise NotFoundError("Site", dto.site_id)
            rows = uow.employees.list_by_site(
                dto.site_id,
                position=dto.position,
                status=dto.status,
                active_only=dto.active_only,
            )
            return [
                SiteEmployeeOut(
                    employee=EmployeeOut.from_model(e), assignment=AssignmentOut.from_model(a)
                )
                for e, a in rows
            ]

    def available_sites(self, dto: AvailableSitesIn) -> list[SiteOut]:
        """Active sites, optionally by zone and with active staff counts."""
        with self.ro_uow() as uow:
            sites = uow.sites.list_active(zone=dto.zone)
            counts = uow.sites.count_active_staff(s.id for s in sites) if dto.with_counts else {}
            return [
                SiteOut.from_model(s, active_staff=counts.get(s.id) if dto.with_counts else None)
                for s in sites
            ]
