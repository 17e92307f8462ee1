"""Administrative act repository."""

from __future__ import annotations

from sqlalchemy import func, select

from staff_records.models.act import AdministrativeAct
from staff_records.repositories.base import BaseRepository


class AdministrativeActRepository(BaseRepository[AdministrativeAct]):
    """Persistence-only repository for :class:`AdministrativeAct`."""

    model = AdministrativeAct

    def _sortable_fields(self):
        return {
            "id": AdministrativeAct.id,
            "name": AdministrativeAct.name,
            "created_at": AdministrativeAct.created_at,
        }

    def _filterable_fields(self):
        return {"institution_id": AdministrativeAct.institution_id}

    def _updatable_fields(self):
        return {"description"}

    def max_sequence(self, institution_id: int) -> int:
        """Highest act number issued to ``institution_id`` (0 when none)."""
        stmt = select(func.coalesce(func.max(AdministrativeAct.sequence), 0)).where(
            AdministrativeAct.institution_id == institution_id
        )
        return int(self.session.scalar(stmt) or 0)

    def list_by_institution(self, institution_id: int) -> list[AdministrativeAct]:
        stmt = (
            select(AdministrativeAct)
            .where(AdministrativeAct.institution_id == institution_id)
            .order_by(AdministrativeAct.sequence.asc(), AdministrativeAct.id.asc())
        )
        return list(self.session.execute(stmt).scalars().unique().all())
