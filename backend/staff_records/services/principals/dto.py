# staff_records/services/principals/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from staff_records.models.enums import SiteZone
from staff_records.services.employees.dto import (
    AcademicRecordIn,
    AcademicRecordOut,
    AssignmentOut,
    EmployeeIn,
    EmployeeOut,
)
from staff_records.services.sites.dto import InstitutionOut, SiteOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class NewSiteIn:
    """
    A site created as part of the principal workflow.

    :param shifts: Shift names (``morning``, ``afternoon``, ...) to link.
    :type shifts: tuple[str, ...]
    """

    name: str
    zone: SiteZone = SiteZone.URBAN
    address: str | None = None
    dane_code: str | None = None
    shifts: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CreatePrincipalCompleteIn:
    """
    Input DTO for the principal + institution + sites workflow.

    :param employee: Personal data; ``position`` must be ``principal``.
    :type employee: EmployeeIn
    :param institution_name: Name of the institution to create.
    :type institution_name: str
    :param new_sites: Sites created and linked to the institution.
    :type new_sites: tuple[NewSiteIn, ...]
    :param existing_site_ids: Already registered sites to attach.
    :type existing_site_ids: tuple[int, ...]
    """

    employee: EmployeeIn
    institution_name: str
    academic: AcademicRecordIn | None = None
    new_sites: tuple[NewSiteIn, ...] = ()
    existing_site_ids: tuple[int, ...] = ()
    start_date: date | None = None


@dataclass(frozen=True, slots=True)
class AssignInstitutionIn:
    employee_id: int
    institution_id: int
    all_sites: bool = True
    site_ids: tuple[int, ...] = ()
    start_date: date | None = None


@dataclass(frozen=True, slots=True)
class AvailableInstitutionsIn:
    without_principal: bool = False
    with_sites: bool = False


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class CompleteSummary:
    sites_created: int = 0
    sites_attached: int = 0
    assignments_made: int = 0
    shifts_linked: int = 0


@dataclass(frozen=True, slots=True)
class PrincipalCompleteOut:
    employee: EmployeeOut
    institution: InstitutionOut
    sites: tuple[SiteOut, ...]
    assignments: tuple[AssignmentOut, ...]
    summary: CompleteSummary
    academic_record: AcademicRecordOut | None = None


@dataclass(frozen=True, slots=True)
class AssignInstitutionOut:
    institution: InstitutionOut
    assignments: tuple[AssignmentOut, ...]
    skipped_site_ids: tuple[int, ...] = ()

    @property
    def assignments_made(self) -> int:
        return len(self.assignments)


@dataclass(frozen=True, slots=True)
class PrincipalTotals:
    institutions: int = 0
    sites: int = 0
    active_assignments: int = 0


@dataclass(frozen=True, slots=True)
class PrincipalSummaryOut:
    employee: EmployeeOut
    institutions: tuple[InstitutionOut, ...]
    active_assignments: tuple[AssignmentOut, ...]
    totals: PrincipalTotals = field(default_factory=PrincipalTotals)
