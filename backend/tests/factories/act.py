"""Factory Boy definition for :class:`staff_records.models.AdministrativeAct`."""

from __future__ import annotations

import factory

from staff_records.models import AdministrativeAct
from staff_records.services.acts.service import act_prefix, format_act_name
from tests.factories import BaseFactory
from tests.factories.site import InstitutionFactory


class AdministrativeActFactory(BaseFactory):
    """Build an act numbered like the service would name it."""

    class Meta:
        model = AdministrativeAct

    id = None
    institution = factory.SubFactory(InstitutionFactory)
    sequence = factory.Sequence(lambda n: n + 1)
    name = factory.LazyAttribute(lambda o: format_act_name(act_prefix(o.institution.name), o.sequence))
    description = None
