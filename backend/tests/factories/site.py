"""Factories for sites, institutions and their links."""

from __future__ import annotations

import factory

from staff_records.models import (
    Institution,
    InstitutionSite,
    Site,
    SiteShift,
    SiteStatus,
    SiteZone,
)
from tests.factories import BaseFactory


class SiteFactory(BaseFactory):
    """Build persisted active urban sites."""

    class Meta:
        model = Site

    class Params:
        inactive = factory.Trait(status=SiteStatus.INACTIVE)
        rural = factory.Trait(zone=SiteZone.RURAL)

    id = None
    name = factory.Sequence(lambda n: f"Sede {n}")
    status = SiteStatus.ACTIVE
    zone = SiteZone.URBAN
    address = factory.Faker("street_address")
    dane_code = factory.Sequence(lambda n: f"105001{n:06d}")


class InstitutionFactory(BaseFactory):
    class Meta:
        model = Institution

    id = None
    name = factory.Sequence(lambda n: f"Institucion {n}")
    principal = None


class InstitutionSiteFactory(BaseFactory):
    class Meta:
        model = InstitutionSite

    id = None
    institution = factory.SubFactory(InstitutionFactory)
    site = factory.SubFactory(SiteFactory)


class SiteShiftFactory(BaseFactory):
    """Link a site to a shift row; pass ``shift=`` from the ``shifts`` fixture."""

    class Meta:
        model = SiteShift

    id = None
    site = factory.SubFactory(SiteFactory)
