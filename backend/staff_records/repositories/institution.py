"""Institution repositories."""

from __future__ import annotations

from typing import cast

from sqlalchemy import func, select

from staff_records.models.institution import Institution, InstitutionSite
from staff_records.repositories.base import BaseRepository


class InstitutionRepository(BaseRepository[Institution]):
    """Persistence-only repository for :class:`Institution`."""

    model = Institution

    def _sortable_fields(self):
        return {"id": Institution.id, "name": Institution.name}

    def _filterable_fields(self):
        return {"principal_id": Institution.principal_id}

    def _updatable_fields(self):
        return {"name", "principal_id"}

    def get_by_name(self, name: str) -> Institution | None:
        stmt = select(Institution).where(Institution.name == name.strip())
        return cast(Institution | None, self.session.execute(stmt).scalars().first())

    def list_with_site_counts(
        self, *, without_principal: bool = False, with_sites: bool = False
    ) -> list[tuple[Institution, int]]:
        """List institutions with their linked-site count.

        :param without_principal: Only institutions with no principal assigned.
        :param with_sites: Only institutions owning at least one site.
        :returns: ``(institution, site_count)`` pairs ordered by name.
        """
        counts = (
            select(InstitutionSite.institution_id, func.count(InstitutionSite.id).label("n"))
            .group_by(InstitutionSite.institution_id)
            .subquery()
        )
        site_count = func.coalesce(counts.c.n, 0)
        stmt = (
            select(Institution, site_count)
            .outerjoin(counts, counts.c.institution_id == Institution.id)
            .order_by(Institution.name.asc())
        )
        if without_principal:
            stmt = stmt.where(Institution.principal_id.is_(None))
        if with_sites:
            stmt = stmt.where(site_count > 0)
        return [(row[0], int(row[1])) for row in self.session.execute(stmt).unique().all()]

    def list_by_principal(self, employee_id: int) -> list[Institution]:
        stmt = (
            select(Institution)
            .where(Institution.principal_id == employee_id)
            .order_by(Institution.name.asc())
        )
        return list(self.session.execute(stmt).scalars().unique().all())


class InstitutionSiteRepository(BaseRepository[InstitutionSite]):
    model = InstitutionSite

    def site_ids(self, institution_id: int) -> list[int]:
        stmt = (
            select(InstitutionSite.site_id)
            .where(InstitutionSite.institution_id == institution_id)
            .order_by(InstitutionSite.site_id.asc())
        )
        return [int(v) for v in self.session.execute(stmt).scalars().all()]

    def is_linked(self, institution_id: int, site_id: int) -> bool:
        stmt = select(InstitutionSite.id).where(
            InstitutionSite.institution_id == institution_id,
            InstitutionSite.site_id == site_id,
        )
        return self.session.execute(stmt).first() is not None

    def link_if_missing(self, institution_id: int, site_id: int) -> bool:
        """Link a site to an institution unless present; return ``True`` if created."""
        if self.is_linked(institution_id, site_id):
            return False
        self.add(InstitutionSite(institution_id=institution_id, site_id=site_id))
        return True
