"""Principal ("rector") workflows."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from staff_records.models import (
    AssignmentKind,
    Employee,
    EmployeePosition,
    Institution,
    InstitutionSite,
    Site,
    SiteAssignment,
    SiteShift,
    SiteZone,
)
from staff_records.services._shared.errors import (
    ConflictError,
    DuplicateEmployeeError,
    EmployeeInactiveError,
    InvalidPositionError,
    NotFoundError,
    UnknownShiftError,
)
from staff_records.services.employees.dto import EmployeeIn
from staff_records.services.principals.dto import (
    AssignInstitutionIn,
    AvailableInstitutionsIn,
    CreatePrincipalCompleteIn,
    NewSiteIn,
)
from staff_records.services.principals.service import PrincipalWorkflowService
from tests.factories.assignment import SiteAssignmentFactory
from tests.factories.employee import EmployeeFactory
from tests.factories.site import InstitutionFactory, InstitutionSiteFactory, SiteFactory


@pytest.fixture()
def service() -> PrincipalWorkflowService:
    return PrincipalWorkflowService()


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


def _principal(document: str = "71222333", **overrides) -> EmployeeIn:
    data = {
        "document_number": document,
        "first_name": "Marta",
        "last_name": "Restrepo",
        "email": f"rector{document}@school.example.com",
        "position": EmployeePosition.PRINCIPAL,
    }
    data.update(overrides)
    return EmployeeIn(**data)


def test_create_complete_builds_the_whole_graph(service, session, shifts):
    existing = SiteFactory(name="Sede Vieja")
    session.commit()

    out = service.create_complete(
        CreatePrincipalCompleteIn(
            employee=_principal(),
            institution_name="I.E. San Jose",
            new_sites=(
                NewSiteIn(name="Sede Norte", shifts=("morning", "Afternoon")),
                NewSiteIn(name="Sede Rural", zone=SiteZone.RURAL, shifts=("saturday",)),
            ),
            existing_site_ids=(existing.id, existing.id),
        )
    )

    assert out.employee.position is EmployeePosition.PRINCIPAL
    assert out.institution.name == "I.E. San Jose"
    assert out.institution.principal_id == out.employee.id
    assert out.summary.sites_created == 2
    assert out.summary.sites_attached == 1
    assert out.summary.assignments_made == 3
    assert out.summary.shifts_linked == 3
    assert {a.kind for a in out.assignments} == {AssignmentKind.PRINCIPAL}
    norte = next(s for s in out.sites if s.name == "Sede Norte")
    assert set(norte.shifts) == {"morning", "afternoon"}

    links = session.scalars(
        select(InstitutionSite.site_id).filter_by(institution_id=out.institution.id)
    ).all()
    assert len(links) == 3
    assert existing.id in links


def test_create_complete_with_unknown_shift_persists_nothing(service, session, shifts):
    before = {
        model: _count(session, model)
        for model in (Employee, Institution, Site, SiteShift, SiteAssignment)
    }

    with pytest.raises(UnknownShiftError) as excinfo:
        service.create_complete(
            CreatePrincipalCompleteIn(
                employee=_principal(),
                institution_name="I.E. Atomica",
                new_sites=(
                    NewSiteIn(name="Sede A", shifts=("morning",)),
                    NewSiteIn(name="Sede B", shifts=("midnight",)),
                ),
            )
        )

    assert "midnight" in str(excinfo.value)
    after = {model: _count(session, model) for model in before}
    assert after == before


def test_create_complete_requires_principal_position(service, shifts):
    with pytest.raises(InvalidPositionError):
        service.create_complete(
            CreatePrincipalCompleteIn(
                employee=_principal(position=EmployeePosition.TEACHER),
                institution_name="I.E. Docente",
            )
        )


def test_create_complete_rejects_taken_institution_name(service, session, shifts):
    InstitutionFactory(name="I.E. Repetida")
    session.commit()

    with pytest.raises(ConflictError, match="Institution"):
        service.create_complete(
            CreatePrincipalCompleteIn(employee=_principal(), institution_name="I.E. Repetida")
        )

    assert session.scalar(select(Employee).filter_by(document_number="71222333")) is None


def test_create_complete_duplicate_check_ignores_inactive_employees(service, session, shifts):
    EmployeeFactory(document_number="71999888", inactive=True)
    EmployeeFactory(document_number="71555444")
    session.commit()

    with pytest.raises(DuplicateEmployeeError):
        service.create_complete(
            CreatePrincipalCompleteIn(
                employee=_principal("71555444"), institution_name="I.E. Activa"
            )
        )
    # Only the inactive holder exists, but the unique constraint still applies
    with pytest.raises(DuplicateEmployeeError):
        service.create_complete(
            CreatePrincipalCompleteIn(
                employee=_principal("71999888"), institution_name="I.E. Inactiva"
            )
        )


def test_create_complete_unknown_existing_site(service, shifts):
    with pytest.raises(NotFoundError):
        service.create_complete(
            CreatePrincipalCompleteIn(
                employee=_principal(), institution_name="I.E. Fantasma", existing_site_ids=(404,)
            )
        )


def test_assign_to_institution_skips_covered_sites(service, session):
    principal = EmployeeFactory(principal=True)
    institution = InstitutionFactory()
    covered = InstitutionSiteFactory(institution=institution).site
    fresh = InstitutionSiteFactory(institution=institution).site
    SiteAssignmentFactory(employee=principal, site=covered, principal_kind=True)
    session.commit()

    out = service.assign_to_institution(
        AssignInstitutionIn(employee_id=principal.id, institution_id=institution.id)
    )

    assert out.institution.principal_id == principal.id
    assert out.skipped_site_ids == (covered.id,)
    assert [a.site_id for a in out.assignments] == [fresh.id]
    assert out.assignments_made == 1


def test_assign_to_institution_ignores_unlinked_ids(service, session):
    principal = EmployeeFactory(principal=True)
    institution = InstitutionFactory()
    linked = InstitutionSiteFactory(institution=institution).site
    stranger = SiteFactory()
    session.commit()

    out = service.assign_to_institution(
        AssignInstitutionIn(
            employee_id=principal.id,
            institution_id=institution.id,
            all_sites=False,
            site_ids=(linked.id, stranger.id),
        )
    )

    assert [a.site_id for a in out.assignments] == [linked.id]


def test_assign_to_institution_guards(service, session):
    teacher = EmployeeFactory()
    retired = EmployeeFactory(principal=True, inactive=True)
    institution = InstitutionFactory()
    session.commit()

    with pytest.raises(InvalidPositionError):
        service.assign_to_institution(
            AssignInstitutionIn(employee_id=teacher.id, institution_id=institution.id)
        )
    with pytest.raises(EmployeeInactiveError):
        service.assign_to_institution(
            AssignInstitutionIn(employee_id=retired.id, institution_id=institution.id)
        )


def test_summary_totals(service, session, shifts):
    created = service.create_complete(
        CreatePrincipalCompleteIn(
            employee=_principal(),
            institution_name="I.E. Resumen",
            new_sites=(NewSiteIn(name="S1"), NewSiteIn(name="S2")),
        )
    )

    summary = service.summary(created.employee.id)

    assert summary.totals.institutions == 1
    assert summary.totals.sites == 2
    assert summary.totals.active_assignments == 2
    assert {s.name for s in summary.institutions[0].sites} == {"S1", "S2"}


def test_available_institutions_filters(service, session):
    InstitutionFactory(name="Sin Rector")
    with_principal = InstitutionFactory(principal=EmployeeFactory(principal=True))
    InstitutionSiteFactory(institution=with_principal)
    session.commit()

    unassigned = service.available_institutions(AvailableInstitutionsIn(without_principal=True))
    with_sites = service.available_institutions(AvailableInstitutionsIn(with_sites=True))

    assert [i.name for i in unassigned] == ["Sin Rector"]
    assert [(i.id, i.site_count) for i in with_sites] == [(with_principal.id, 1)]
