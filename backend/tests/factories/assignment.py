"""Factory Boy definition for :class:`staff_records.models.SiteAssignment`."""

from __future__ import annotations

import datetime

import factory

from staff_records.models import AssignmentKind, AssignmentStatus, SiteAssignment
from tests.factories import BaseFactory
from tests.factories.employee import EmployeeFactory
from tests.factories.site import SiteFactory


class SiteAssignmentFactory(BaseFactory):
    """Build an active staff placement starting a month ago."""

    class Meta:
        model = SiteAssignment

    class Params:
        ended = factory.Trait(
            status=AssignmentStatus.ENDED,
            end_date=factory.LazyFunction(datetime.date.today),
        )
        principal_kind = factory.Trait(kind=AssignmentKind.PRINCIPAL)

    id = None
    employee = factory.SubFactory(EmployeeFactory)
    site = factory.SubFactory(SiteFactory)
    start_date = factory.LazyFunction(lambda: datetime.date.today() - datetime.timedelta(days=30))
    end_date = None
    status = AssignmentStatus.ACTIVE
    kind = AssignmentKind.STAFF
