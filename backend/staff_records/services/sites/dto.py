# staff_records/services/sites/dto.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from staff_records.models.enums import SiteStatus, SiteZone
from staff_records.models.institution import Institution
from staff_records.models.site import Site


@dataclass(frozen=True, slots=True)
class SiteOut:
    """
    Public projection of a site.

    :param active_staff: Count of active staff assignments, when requested.
    :type active_staff: int | None
    """

    id: int
    name: str
    status: SiteStatus
    zone: SiteZone
    address: str | None
    dane_code: str | None
    shifts: tuple[str, ...] = ()
    active_staff: int | None = None

    @classmethod
    def from_model(
        cls,
        site: Site,
        *,
        active_staff: int | None = None,
        shifts: Iterable[str] | None = None,
    ) -> SiteOut:
        return cls(
            id=site.id,
            name=site.name,
            status=site.status,
            zone=site.zone,
            address=site.address,
            dane_code=site.dane_code,
            shifts=tuple(site.shift_names if shifts is None else shifts),
            active_staff=active_staff,
        )


@dataclass(frozen=True, slots=True)
class InstitutionOut:
    id: int
    name: str
    principal_id: int | None
    site_count: int = 0
    sites: tuple[SiteOut, ...] = field(default_factory=tuple)

    @classmethod
    def from_model(
        cls, institution: Institution, *, site_count: int | None = None, with_sites: bool = False
    ) -> InstitutionOut:
        sites = tuple(SiteOut.from_model(s) for s in institution.sites) if with_sites else ()
        return cls(
            id=institution.id,
            name=institution.name,
            principal_id=institution.principal_id,
            site_count=len(institution.site_links) if site_count is None else site_count,
            sites=sites,
        )
