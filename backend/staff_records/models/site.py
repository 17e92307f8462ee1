"""School sites and the shifts (jornadas) they operate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from staff_records.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin
from .enums import ShiftName, SiteStatus, SiteZone, enum_type

if TYPE_CHECKING:
    from .institution import InstitutionSite


class Site(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Physical school building where employees are placed.

    Notes
    -----
    Physically deletable only while no active assignment points to it.
    """

    __tablename__ = "sites"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[SiteStatus] = mapped_column(
        enum_type(SiteStatus, "enum_site_status"), nullable=False, default=SiteStatus.ACTIVE
    )
    zone: Mapped[SiteZone] = mapped_column(
        enum_type(SiteZone, "enum_site_zone"), nullable=False, default=SiteZone.URBAN
    )
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    dane_code: Mapped[str | None] = mapped_column(String(30), nullable=True)

    __table_args__ = (Index("ix_sites_status_zone", "status", "zone"),)

    site_shifts: Mapped[list[SiteShift]] = relationship(
        "SiteShift", back_populates="site", cascade="all, delete-orphan", lazy="selectin"
    )
    institution_links: Mapped[list[InstitutionSite]] = relationship(
        "InstitutionSite", back_populates="site", cascade="all, delete-orphan"
    )

    @property
    def is_active(self) -> bool:
        return self.status is SiteStatus.ACTIVE

    @property
    def shift_names(self) -> list[str]:
        return sorted(link.shift.name.value for link in self.site_shifts)

    @validates("name")
    def _strip_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Site name is required.")
        return value.strip()


class Shift(PKMixin, ReprMixin, db.Model):
    """Fixed shift vocabulary seeded by ``flask seed run``."""

    __tablename__ = "shifts"

    name: Mapped[ShiftName] = mapped_column(enum_type(ShiftName, "enum_shift_name"), nullable=False)

    __table_args__ = (UniqueConstraint("name", name="uq_shifts_name"),)


class SiteShift(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Association object linking sites <-> shifts."""

    __tablename__ = "site_shifts"

    site_id: Mapped[int] = mapped_column(
        ForeignKey("sites.id", ondelete="CASCADE"), nullable=False
    )
    shift_id: Mapped[int] = mapped_column(
        ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (UniqueConstraint("site_id", "shift_id", name="uq_site_shifts_site_shift"),)

    site: Mapped[Site] = relationship("Site", back_populates="site_shifts")
    shift: Mapped[Shift] = relationship("Shift", lazy="joined")
