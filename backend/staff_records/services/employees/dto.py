# staff_records/services/employees/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from staff_records.models.assignment import SiteAssignment
from staff_records.models.employee import AcademicRecord, Employee, EmployeeComment
from staff_records.models.enums import (
    AcademicLevel,
    AssignmentKind,
    AssignmentStatus,
    EmployeePosition,
    EmployeeStatus,
    SiteZone,
)
from staff_records.services.sites.dto import SiteOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class EmployeeIn:
    """
    Personal data of a new employee.

    :param document_number: Unique national document number.
    :type document_number: str
    :param email: Optional; unique when present.
    :type email: str | None
    """

    document_number: str
    first_name: str
    last_name: str
    document_type: str = "CC"
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    position: EmployeePosition = EmployeePosition.TEACHER


@dataclass(frozen=True, slots=True)
class AcademicRecordIn:
    level: AcademicLevel
    years_experience: int | None = None
    institution: str | None = None
    degree_title: str | None = None


@dataclass(frozen=True, slots=True)
class CreateEmployeeWithSiteIn:
    """
    Input DTO for the employee-with-site workflow.

    :param site_id: Site the employee starts working at.
    :type site_id: int
    :param start_date: Assignment start; today when omitted.
    :type start_date: datetime.date | None
    :param academic: Optional academic record created alongside.
    :type academic: AcademicRecordIn | None
    :param comment: Optional note authored by the caller.
    :type comment: str | None
    """

    employee: EmployeeIn
    site_id: int
    start_date: date | None = None
    academic: AcademicRecordIn | None = None
    comment: str | None = None


@dataclass(frozen=True, slots=True)
class AssignSiteIn:
    employee_id: int
    site_id: int
    start_date: date | None = None
    replace_current: bool = False


@dataclass(frozen=True, slots=True)
class TransferIn:
    """
    Input DTO for a transfer.

    :param transfer_date: Ends the current placement and starts the new one;
        today when omitted.
    :type transfer_date: datetime.date | None
    """

    employee_id: int
    site_id: int
    transfer_date: date | None = None


@dataclass(frozen=True, slots=True)
class FinalizeIn:
    employee_id: int
    end_date: date | None = None


@dataclass(frozen=True, slots=True)
class EmployeesBySiteIn:
    site_id: int
    position: EmployeePosition | None = None
    status: EmployeeStatus | None = None
    active_only: bool = True


@dataclass(frozen=True, slots=True)
class AvailableSitesIn:
    zone: SiteZone | None = None
    with_counts: bool = False


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class EmployeeOut:
    id: int
    document_type: str
    document_number: str
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    address: str | None
    position: EmployeePosition
    status: EmployeeStatus

    @classmethod
    def from_model(cls, e: Employee) -> EmployeeOut:
        return cls(
            id=e.id,
            document_type=e.document_type,
            document_number=e.document_number,
            first_name=e.first_name,
            last_name=e.last_name,
            email=e.email,
            phone=e.phone,
            address=e.address,
            position=e.position,
            status=e.status,
        )


@dataclass(frozen=True, slots=True)
class AcademicRecordOut:
    id: int
    level: AcademicLevel
    years_experience: int | None
    institution: str | None
    degree_title: str | None

    @classmethod
    def from_model(cls, r: AcademicRecord) -> AcademicRecordOut:
        return cls(
            id=r.id,
            level=r.level,
            years_experience=r.years_experience,
            institution=r.institution,
            degree_title=r.degree_title,
        )


@dataclass(frozen=True, slots=True)
class CommentOut:
    id: int
    note: str
    author_id: int | None

    @classmethod
    def from_model(cls, c: EmployeeComment) -> CommentOut:
        return cls(id=c.id, note=c.note, author_id=c.author_id)


@dataclass(frozen=True, slots=True)
class AssignmentOut:
    id: int
    employee_id: int
    site_id: int
    site_name: str
    start_date: date
    end_date: date | None
    status: AssignmentStatus
    kind: AssignmentKind

    @classmethod
    def from_model(cls, a: SiteAssignment) -> AssignmentOut:
        return cls(
            id=a.id,
            employee_id=a.employee_id,
            site_id=a.site_id,
            site_name=a.site.name,
            start_date=a.start_date,
            end_date=a.end_date,
            status=a.status,
            kind=a.kind,
        )


@dataclass(frozen=True, slots=True)
class EmployeeWithSiteOut:
    """Aggregate returned by the employee-with-site workflow."""

    employee: EmployeeOut
    assignment: AssignmentOut
    site: SiteOut
    academic_record: AcademicRecordOut | None = None
    comment: CommentOut | None = None


@dataclass(frozen=True, slots=True)
class TransferOut:
    previous: AssignmentOut
    current: AssignmentOut


@dataclass(frozen=True, slots=True)
class EmployeeDetailOut:
    employee: EmployeeOut
    academic_records: tuple[AcademicRecordOut, ...]
    comments: tuple[CommentOut, ...]
    current_assignment: AssignmentOut | None


@dataclass(frozen=True, slots=True)
class SiteEmployeeOut:
    employee: EmployeeOut
    assignment: AssignmentOut
