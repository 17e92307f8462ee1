"""Physical deletion of sites and institutions."""

from __future__ import annotations

import pytest

from staff_records.models import Institution, InstitutionSite, Site, SiteShift
from staff_records.services._shared.errors import (
    InstitutionHasSitesError,
    NotFoundError,
    SiteInUseError,
)
from staff_records.services.sites.service import SiteService
from tests.factories.assignment import SiteAssignmentFactory
from tests.factories.site import (
    InstitutionFactory,
    InstitutionSiteFactory,
    SiteFactory,
    SiteShiftFactory,
)


@pytest.fixture()
def service() -> SiteService:
    return SiteService()


def test_delete_site_takes_links_with_it(service, session, shifts):
    link = InstitutionSiteFactory()
    site_id = link.site_id
    SiteShiftFactory(site=link.site, shift=shifts[next(iter(shifts))])
    SiteAssignmentFactory(site=link.site, ended=True)
    session.commit()

    service.delete_site(site_id)

    assert session.get(Site, site_id) is None
    assert session.query(InstitutionSite).filter_by(site_id=site_id).count() == 0
    assert session.query(SiteShift).filter_by(site_id=site_id).count() == 0


def test_delete_site_with_active_assignment_is_refused(service, session):
    assignment = SiteAssignmentFactory()
    session.commit()

    with pytest.raises(SiteInUseError) as excinfo:
        service.delete_site(assignment.site_id)

    assert excinfo.value.code == "site_in_use"
    assert session.get(Site, assignment.site_id) is not None


def test_delete_unknown_site(service):
    with pytest.raises(NotFoundError):
        service.delete_site(4040)


def test_delete_institution_requires_no_sites(service, session):
    link = InstitutionSiteFactory()
    empty = InstitutionFactory()
    session.commit()

    with pytest.raises(InstitutionHasSitesError):
        service.delete_institution(link.institution_id)

    service.delete_institution(empty.id)
    assert session.get(Institution, empty.id) is None
