# staff_records/services/principals/service.py
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError

from staff_records.models.assignment import ACTIVE_PRINCIPAL_SITE_INDEX, SiteAssignment
from staff_records.models.enums import (
    AssignmentKind,
    AssignmentStatus,
    EmployeePosition,
    ShiftName,
    SiteStatus,
)
from staff_records.models.institution import Institution
from staff_records.models.site import Shift, Site
from staff_records.services._shared.base import BaseService
from staff_records.services._shared.errors import (
    ConflictError,
    EmployeeInactiveError,
    InvalidPositionError,
    NotFoundError,
    UnknownShiftError,
    violates,
)
from staff_records.services.employees.dto import AcademicRecordOut, AssignmentOut, EmployeeOut
from staff_records.services.employees.service import insert_academic_record, insert_employee
from staff_records.services.principals.dto import (
    AssignInstitutionIn,
    AssignInstitutionOut,
    AvailableInstitutionsIn,
    CompleteSummary,
    CreatePrincipalCompleteIn,
    PrincipalCompleteOut,
    PrincipalSummaryOut,
    PrincipalTotals,
)
from staff_records.services.sites.dto import InstitutionOut, SiteOut
from staff_records.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)

_VALID_SHIFTS = [s.value for s in ShiftName]


def _resolve_shift(uow: SQLAlchemyUnitOfWork, raw: str) -> Shift:
    """Map a shift name to its seeded row.

    :raises UnknownShiftError: Not in the vocabulary, or not seeded.
    """
    name = (raw or "").strip().lower()
    try:
        shift_name = ShiftName(name)
    except ValueError:
        raise UnknownShiftError(raw, _VALID_SHIFTS) from None
    shift = uow.shifts.get_by_name(shift_name)
    if shift is None:
        raise UnknownShiftError(raw, _VALID_SHIFTS)
    return shift


def _open_principal_assignment(
    uow: SQLAlchemyUnitOfWork, employee_id: int, site: Site, start: date
) -> SiteAssignment:
    assignment = SiteAssignment(
        employee_id=employee_id,
        site=site,
        start_date=start,
        status=AssignmentStatus.ACTIVE,
        kind=AssignmentKind.PRINCIPAL,
    )
    try:
        return uow.assignments.add(assignment)
    except IntegrityError as exc:
        if violates(exc, ACTIVE_PRINCIPAL_SITE_INDEX) or violates(
            exc, "site_assignments.employee_id, site_assignments.site_id"
        ):
            raise ConflictError(
                "SiteAssignment", f"employee {employee_id} already oversees site {site.id}"
            ) from exc
        raise


class PrincipalWorkflowService(BaseService):
    """
    Principal ("rector") workflows.

    ``create_complete`` builds the principal, their institution and its sites
    in one transaction; if any step fails nothing from that call persists.
    """

    def create_complete(self, dto: CreatePrincipalCompleteIn) -> PrincipalCompleteOut:
        """
        Create principal, institution, sites, shift links and assignments.

        :raises InvalidPositionError: ``employee.position`` is not principal.
        :raises DuplicateEmployeeError: Document number or email taken.
        :raises ConflictError: Institution name already registered.
        :raises UnknownShiftError: A requested shift is not in the vocabulary.
        :raises NotFoundError: An existing site id does not exist.
        """
        if dto.employee.position is not EmployeePosition.PRINCIPAL:
            raise InvalidPositionError(
                f"Position must be '{EmployeePosition.PRINCIPAL.value}' to create a principal"
            )
        start = dto.start_date or date.today()

        with self.rw_uow() as uow:
            employee = insert_employee(uow, dto.employee, only_active=True)

            record = None
            if dto.academic is not None:
                record = insert_academic_record(uow, employee.id, dto.academic)

            if uow.institutions.get_by_name(dto.institution_name) is not None:
                raise ConflictError("Institution", "name already registered")
            try:
                institution = uow.institutions.add(
                    Institution(name=dto.institution_name, principal_id=employee.id)
                )
            except IntegrityError as exc:
                if violates(exc, "uq_institutions_name") or violates(exc, "institutions.name"):
                    raise ConflictError("Institution", "name already registered") from exc
                raise

            site_outs: list[SiteOut] = []
            assignments: list[SiteAssignment] = []
            shifts_linked = 0

            for new_site in dto.new_sites:
                site = uow.sites.add(
                    Site(
                        name=new_site.name,
                        zone=new_site.zone,
                        address=new_site.address,
                        dane_code=new_site.dane_code,
                        status=SiteStatus.ACTIVE,
                    )
                )
                uow.institution_sites.link_if_missing(institution.id, site.id)
                linked: set[str] = set()
                for raw in new_site.shifts:
                    shift = _resolve_shift(uow, raw)
                    if uow.site_shifts.link_if_missing(site.id, shift.id):
                        shifts_linked += 1
                    linked.add(shift.name.value)
                assignments.append(_open_principal_assignment(uow, employee.id, site, start))
                site_outs.append(SiteOut.from_model(site, shifts=sorted(linked)))

            attached = 0
            for site_id in dict.fromkeys(dto.existing_site_ids):
                site = uow.sites.get(site_id)
                if site is None:
                    raise NotFoundError("Site", site_id)
                uow.institution_sites.link_if_missing(institution.id, site.id)
                assignments.append(_open_principal_assignment(uow, employee.id, site, start))
                site_outs.append(SiteOut.from_model(site))
                attached += 1

            summary = CompleteSummary(
                sites_created=len(dto.new_sites),
                sites_attached=attached,
                assignments_made=len(assignments),
                shifts_linked=shifts_linked,
            )
            out = PrincipalCompleteOut(
                employee=EmployeeOut.from_model(employee),
                institution=InstitutionOut(
                    id=institution.id,
                    name=institution.name,
                    principal_id=employee.id,
                    site_count=len(site_outs),
                    sites=tuple(site_outs),
                ),
                sites=tuple(site_outs),
                assignments=tuple(AssignmentOut.from_model(a) for a in assignments),
                summary=summary,
                academic_record=AcademicRecordOut.from_model(record) if record else None,
            )

        log.info(
            "Principal created with institution",
            extra={
                "workflow": "principal_complete",
                "employee_id": out.employee.id,
                "institution_id": out.institution.id,
            },
        )
        return out

    def assign_to_institution(self, dto: AssignInstitutionIn) -> AssignInstitutionOut:
        """
        Make an employee the principal of an institution.

        Sites the principal already oversees are skipped, and requested ids
        not linked to the institution are ignored.

        :raises InvalidPositionError: The employee is not a principal.
        """
        start = dto.start_date or date.today()
        with self.rw_uow() as uow:
            employee = uow.employees.get(dto.employee_id)
            if employee is None:
                raise NotFoundError("Employee", dto.employee_id)
            if employee.position is not EmployeePosition.PRINCIPAL:
                raise InvalidPositionError(f"Employee {employee.id} is not a principal")
            if not employee.is_active:
                raise EmployeeInactiveError(employee.id)

            institution = uow.institutions.get(dto.institution_id)
            if institution is None:
                raise NotFoundError("Institution", dto.institution_id)
            institution.principal_id = employee.id
            uow.institutions.flush()

            linked = uow.institution_sites.site_ids(institution.id)
            if dto.all_sites:
                targets = linked
            else:
                targets = [sid for sid in dict.fromkeys(dto.site_ids) if sid in linked]
            covered = uow.assignments.active_principal_site_ids(employee.id)

            made: list[SiteAssignment] = []
            skipped: list[int] = []
            for site_id in targets:
                if site_id in covered:
                    skipped.append(site_id)
                    continue
                site = uow.sites.get(site_id)
                made.append(_open_principal_assignment(uow, employee.id, site, start))

            out = AssignInstitutionOut(
                institution=InstitutionOut.from_model(institution, site_count=len(linked)),
                assignments=tuple(AssignmentOut.from_model(a) for a in made),
                skipped_site_ids=tuple(skipped),
            )

        log.info(
            "Principal assigned to institution (%d assignments)",
            out.assignments_made,
            extra={
                "workflow": "assign_institution",
                "employee_id": dto.employee_id,
                "institution_id": dto.institution_id,
            },
        )
        return out

    def summary(self, employee_id: int) -> PrincipalSummaryOut:
        """Institutions run by a principal, with sites and active assignments."""
        with self.ro_uow() as uow:
            employee = uow.employees.get(employee_id)
            if employee is None:
                raise NotFoundError("Employee", employee_id)
            if employee.position is not EmployeePosition.PRINCIPAL:
                raise InvalidPositionError(f"Employee {employee_id} is not a principal")

            institutions = [
                InstitutionOut.from_model(i, with_sites=True)
                for i in uow.institutions.list_by_principal(employee_id)
            ]
            active = [
                AssignmentOut.from_model(a)
                for a in uow.assignments.list_active_for_employee(employee_id)
            ]
            return PrincipalSummaryOut(
                employee=EmployeeOut.from_model(employee),
                institutions=tuple(institutions),
                active_assignments=tuple(active),
                totals=PrincipalTotals(
                    institutions=len(institutions),
                    sites=sum(i.site_count for i in institutions),
                    active_assignments=len(active),
                ),
            )

    def available_institutions(self, dto: AvailableInstitutionsIn) -> list[InstitutionOut]:
        with self.ro_uow() as uow:
            rows = uow.institutions.list_with_site_counts(
                without_principal=dto.without_principal, with_sites=dto.with_sites
            )
            return [InstitutionOut.from_model(i, site_count=n) for i, n in rows]
