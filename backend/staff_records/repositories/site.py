"""Site and shift repositories."""

from __future__ import annotations

from collections.abc import Iterable
from typing import cast

from sqlalchemy import func, select

from staff_records.models.assignment import SiteAssignment
from staff_records.models.enums import (
    AssignmentKind,
    AssignmentStatus,
    ShiftName,
    SiteStatus,
    SiteZone,
)
from staff_records.models.site import Shift, Site, SiteShift
from staff_records.repositories.base import BaseRepository


class SiteRepository(BaseRepository[Site]):
    """Persistence-only repository for :class:`Site`."""

    model = Site

    def _sortable_fields(self):
        return {"id": Site.id, "name": Site.name, "created_at": Site.created_at}

    def _filterable_fields(self):
        return {"status": Site.status, "zone": Site.zone}

    def _updatable_fields(self):
        return {"name", "status", "zone", "address", "dane_code"}

    def list_active(self, *, zone: SiteZone | None = None) -> list[Site]:
        stmt = select(Site).where(Site.status == SiteStatus.ACTIVE)
        if zone is not None:
            stmt = stmt.where(Site.zone == zone)
        stmt = stmt.order_by(Site.name.asc(), Site.id.asc())
        return list(self.session.execute(stmt).scalars().unique().all())

    def count_active_staff(self, site_ids: Iterable[int]) -> dict[int, int]:
        """Return ``{site_id: active staff assignments}`` (missing ids → 0)."""
        ids = list(site_ids)
        if not ids:
            return {}
        stmt = (
            select(SiteAssignment.site_id, func.count(SiteAssignment.id))
            .where(
                SiteAssignment.site_id.in_(ids),
                SiteAssignment.status == AssignmentStatus.ACTIVE,
                SiteAssignment.kind == AssignmentKind.STAFF,
            )
            .group_by(SiteAssignment.site_id)
        )
        counts = {site_id: 0 for site_id in ids}
        counts.update({int(sid): int(n) for sid, n in self.session.execute(stmt).all()})
        return counts


class ShiftRepository(BaseRepository[Shift]):
    """Lookup of the fixed shift vocabulary."""

    model = Shift

    def get_by_name(self, name: ShiftName) -> Shift | None:
        stmt = select(Shift).where(Shift.name == name)
        return cast(Shift | None, self.session.execute(stmt).scalars().first())


class SiteShiftRepository(BaseRepository[SiteShift]):
    model = SiteShift

    def link_if_missing(self, site_id: int, shift_id: int) -> bool:
        """Create the site-shift link unless present; return ``True`` if created."""
        stmt = select(SiteShift.id).where(
            SiteShift.site_id == site_id, SiteShift.shift_id == shift_id
        )
        if self.session.execute(stmt).first():
            return False
        self.add(SiteShift(site_id=site_id, shift_id=shift_id))
        return True
