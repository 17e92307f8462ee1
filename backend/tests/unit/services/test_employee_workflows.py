"""Transactional staff placement workflows."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy import func, select

from staff_records.models import (
    AcademicLevel,
    AssignmentKind,
    AssignmentStatus,
    Employee,
    EmployeeComment,
    EmployeePosition,
    EmployeeStatus,
    SiteAssignment,
)
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
)
from staff_records.services.employees.dto import (
    AcademicRecordIn,
    AssignSiteIn,
    AvailableSitesIn,
    CreateEmployeeWithSiteIn,
    EmployeeIn,
    EmployeesBySiteIn,
    FinalizeIn,
    TransferIn,
)
from staff_records.services.employees.service import EmployeeWorkflowService
from tests.factories.assignment import SiteAssignmentFactory
from tests.factories.employee import EmployeeFactory
from tests.factories.site import SiteFactory
from tests.factories.user import UserFactory

TODAY = date.today()


@pytest.fixture()
def service() -> EmployeeWorkflowService:
    return EmployeeWorkflowService()


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


def _employee_in(faker, **overrides) -> EmployeeIn:
    data = {
        "document_number": faker.numerify("43######"),
        "first_name": faker.first_name(),
        "last_name": faker.last_name(),
        "email": faker.unique.email(),
    }
    data.update(overrides)
    return EmployeeIn(**data)


# ------------------------------------------------------------------ #
# create_with_site
# ------------------------------------------------------------------ #


def test_create_with_site_persists_everything(service, session, faker):
    site = SiteFactory(name="Sede Central")
    author = UserFactory()
    session.commit()

    out = service.create_with_site(
        CreateEmployeeWithSiteIn(
            employee=_employee_in(faker, document_number="43111222"),
            site_id=site.id,
            academic=AcademicRecordIn(level=AcademicLevel.MASTERS, years_experience=8),
            comment="  Ingresa por concurso  ",
        ),
        author_id=author.id,
    )

    assert out.employee.status is EmployeeStatus.ACTIVE
    assert out.assignment.site_id == site.id
    assert out.assignment.status is AssignmentStatus.ACTIVE
    assert out.assignment.kind is AssignmentKind.STAFF
    assert out.assignment.start_date == TODAY
    assert out.site.name == "Sede Central"
    assert out.academic_record.level is AcademicLevel.MASTERS
    assert out.comment.note == "Ingresa por concurso"
    assert out.comment.author_id == author.id

    stored = session.get(Employee, out.employee.id)
    assert stored.document_number == "43111222"
    assert len(stored.academic_records) == 1


def test_create_with_inactive_site_creates_nothing(service, session, faker):
    site = SiteFactory(inactive=True)
    session.commit()
    employees_before = _count(session, Employee)

    with pytest.raises(SiteInactiveError):
        service.create_with_site(
            CreateEmployeeWithSiteIn(employee=_employee_in(faker), site_id=site.id)
        )

    assert _count(session, Employee) == employees_before
    assert _count(session, SiteAssignment) == 0


def test_create_with_unknown_site(service, faker):
    with pytest.raises(NotFoundError):
        service.create_with_site(CreateEmployeeWithSiteIn(employee=_employee_in(faker), site_id=999))


def test_create_with_duplicate_document_rolls_back(service, session, faker):
    EmployeeFactory(document_number="43999000")
    site = SiteFactory()
    session.commit()
    employees_before = _count(session, Employee)

    with pytest.raises(DuplicateEmployeeError, match="document number"):
        service.create_with_site(
            CreateEmployeeWithSiteIn(
                employee=_employee_in(faker, document_number="43999000"), site_id=site.id
            )
        )

    assert _count(session, Employee) == employees_before


def test_failure_after_employee_insert_leaves_no_trace(service, session, faker):
    site = SiteFactory()
    session.commit()

    with pytest.raises(BusinessRuleError):
        service.create_with_site(
            CreateEmployeeWithSiteIn(
                employee=_employee_in(faker, document_number="43000111"),
                site_id=site.id,
                academic=AcademicRecordIn(level=AcademicLevel.PROFESSIONAL, years_experience=-1),
            )
        )

    assert session.scalar(select(Employee).filter_by(document_number="43000111")) is None
    assert _count(session, EmployeeComment) == 0


# ------------------------------------------------------------------ #
# assign / transfer / finalize
# ------------------------------------------------------------------ #


def test_assign_to_site_conflicts_with_current_placement(service, session):
    current = SiteAssignmentFactory()
    other = SiteFactory()
    session.commit()

    with pytest.raises(ActiveAssignmentExistsError):
        service.assign_to_site(AssignSiteIn(employee_id=current.employee_id, site_id=other.id))


def test_assign_to_site_can_replace_current(service, session):
    current = SiteAssignmentFactory()
    other = SiteFactory()
    session.commit()

    out = service.assign_to_site(
        AssignSiteIn(employee_id=current.employee_id, site_id=other.id, replace_current=True)
    )

    assert out.site_id == other.id
    session.refresh(current)
    assert current.status is AssignmentStatus.ENDED
    assert current.end_date == TODAY


def test_assign_inactive_employee(service, session):
    employee = EmployeeFactory(inactive=True)
    site = SiteFactory()
    session.commit()

    with pytest.raises(EmployeeInactiveError):
        service.assign_to_site(AssignSiteIn(employee_id=employee.id, site_id=site.id))


def test_transfer_closes_previous_and_opens_new(service, session):
    current = SiteAssignmentFactory()
    target = SiteFactory()
    session.commit()
    on = TODAY - timedelta(days=2)

    out = service.transfer(
        TransferIn(employee_id=current.employee_id, site_id=target.id, transfer_date=on)
    )

    assert out.previous.status is AssignmentStatus.ENDED
    assert out.previous.end_date == on
    assert out.current.site_id == target.id
    assert out.current.start_date == on
    active = session.scalars(
        select(SiteAssignment).filter_by(
            employee_id=current.employee_id, status=AssignmentStatus.ACTIVE
        )
    ).all()
    assert [a.site_id for a in active] == [target.id]


def test_transfer_without_active_assignment_changes_nothing(service, session):
    employee = EmployeeFactory()
    SiteAssignmentFactory(employee=employee, ended=True)
    target = SiteFactory()
    session.commit()
    before = _count(session, SiteAssignment)

    with pytest.raises(NoActiveAssignmentError):
        service.transfer(TransferIn(employee_id=employee.id, site_id=target.id))

    assert _count(session, SiteAssignment) == before


def test_transfer_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.transfer(TransferIn(employee_id=12345, site_id=1))


def test_transfer_to_same_site(service, session):
    current = SiteAssignmentFactory()
    session.commit()

    with pytest.raises(SameSiteTransferError):
        service.transfer(TransferIn(employee_id=current.employee_id, site_id=current.site_id))


def test_transfer_to_inactive_site_keeps_current(service, session):
    current = SiteAssignmentFactory()
    target = SiteFactory(inactive=True)
    session.commit()

    with pytest.raises(SiteInactiveError):
        service.transfer(TransferIn(employee_id=current.employee_id, site_id=target.id))

    session.refresh(current)
    assert current.status is AssignmentStatus.ACTIVE
    assert current.end_date is None


def test_transfer_dated_before_current_placement_is_rejected(service, session):
    current = SiteAssignmentFactory(start_date=TODAY)
    target = SiteFactory()
    session.commit()
    before = _count(session, SiteAssignment)

    with pytest.raises(InvalidTransferDateError) as excinfo:
        service.transfer(
            TransferIn(
                employee_id=current.employee_id,
                site_id=target.id,
                transfer_date=TODAY - timedelta(days=10),
            )
        )

    assert excinfo.value.code == "invalid_transfer_date"
    assert _count(session, SiteAssignment) == before
    session.refresh(current)
    assert current.status is AssignmentStatus.ACTIVE
    assert current.end_date is None


def test_transfer_on_the_start_day_of_current_placement(service, session):
    current = SiteAssignmentFactory(start_date=TODAY)
    target = SiteFactory()
    session.commit()

    out = service.transfer(
        TransferIn(employee_id=current.employee_id, site_id=target.id, transfer_date=TODAY)
    )

    assert out.previous.end_date == TODAY
    assert out.current.start_date == TODAY


def test_finalize_assignment(service, session):
    current = SiteAssignmentFactory()
    session.commit()

    out = service.finalize_assignment(FinalizeIn(employee_id=current.employee_id))

    assert out.status is AssignmentStatus.ENDED
    assert out.end_date == TODAY
    with pytest.raises(NoActiveAssignmentError):
        service.finalize_assignment(FinalizeIn(employee_id=current.employee_id))


def test_end_date_never_precedes_start(service, session):
    current = SiteAssignmentFactory(start_date=TODAY)
    session.commit()

    out = service.finalize_assignment(
        FinalizeIn(employee_id=current.employee_id, end_date=TODAY - timedelta(days=10))
    )

    assert out.end_date == TODAY


def test_second_active_staff_row_is_rejected_by_the_database(session):
    """The partial unique index backs the service pre-checks."""
    from sqlalchemy.exc import IntegrityError

    current = SiteAssignmentFactory()
    session.commit()

    with pytest.raises(IntegrityError):
        SiteAssignmentFactory(employee=current.employee)
    session.rollback()


# ------------------------------------------------------------------ #
# status changes
# ------------------------------------------------------------------ #


def test_deactivate_ends_assignments_and_keeps_row(service, session):
    current = SiteAssignmentFactory()
    session.commit()

    out = service.deactivate(current.employee_id)

    assert out.status is EmployeeStatus.INACTIVE
    session.refresh(current)
    assert current.status is AssignmentStatus.ENDED
    assert session.get(Employee, current.employee_id) is not None


def test_reactivate(service, session):
    employee = EmployeeFactory(inactive=True)
    session.commit()

    assert service.reactivate(employee.id).status is EmployeeStatus.ACTIVE
    with pytest.raises(BusinessRuleError, match="already active"):
        service.reactivate(employee.id)


# ------------------------------------------------------------------ #
# queries
# ------------------------------------------------------------------ #


def test_get_includes_current_assignment(service, session):
    current = SiteAssignmentFactory()
    session.commit()

    detail = service.get(current.employee_id)

    assert detail.employee.id == current.employee_id
    assert detail.current_assignment.site_id == current.site_id


def test_history_is_most_recent_first(service, session):
    employee = EmployeeFactory()
    SiteAssignmentFactory(employee=employee, start_date=TODAY - timedelta(days=300), ended=True)
    SiteAssignmentFactory(employee=employee, start_date=TODAY - timedelta(days=10))
    session.commit()

    history = service.history(employee.id)

    assert [h.start_date for h in history] == [
        TODAY - timedelta(days=10),
        TODAY - timedelta(days=300),
    ]


def test_employees_by_site_filters(service, session):
    site = SiteFactory()
    teacher = SiteAssignmentFactory(site=site)
    SiteAssignmentFactory(site=site, employee=EmployeeFactory(principal=True))
    SiteAssignmentFactory(site=site, ended=True)
    session.commit()

    everyone = service.employees_by_site(EmployeesBySiteIn(site_id=site.id))
    teachers = service.employees_by_site(
        EmployeesBySiteIn(site_id=site.id, position=EmployeePosition.TEACHER)
    )
    with_history = service.employees_by_site(EmployeesBySiteIn(site_id=site.id, active_only=False))

    assert len(everyone) == 2
    assert [row.employee.id for row in teachers] == [teacher.employee_id]
    assert len(with_history) == 3


def test_available_sites_with_counts(service, session):
    busy = SiteFactory(rural=True)
    idle = SiteFactory()
    SiteFactory(inactive=True)
    SiteAssignmentFactory(site=busy)
    SiteAssignmentFactory(site=busy)
    session.commit()

    sites = {s.id: s for s in service.available_sites(AvailableSitesIn(with_counts=True))}
    rural = service.available_sites(AvailableSitesIn(zone=busy.zone))

    assert set(sites) == {busy.id, idle.id}
    assert sites[busy.id].active_staff == 2
    assert sites[idle.id].active_staff == 0
    assert [s.id for s in rural] == [busy.id]
