"""Educational institutions and the sites they group."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from staff_records.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .employee import Employee
    from .site import Site


class Institution(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Educational institution (I.E.) run by an optional principal.

    Its ``name`` feeds administrative-act numbering, so it is unique.
    """

    __tablename__ = "institutions"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    principal_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True
    )

    __table_args__ = (UniqueConstraint("name", name="uq_institutions_name"),)

    principal: Mapped[Employee | None] = relationship("Employee", lazy="joined")
    site_links: Mapped[list[InstitutionSite]] = relationship(
        "InstitutionSite",
        back_populates="institution",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def sites(self) -> list[Site]:
        return [link.site for link in self.site_links]

    @validates("name")
    def _strip_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Institution name is required.")
        return value.strip()


class InstitutionSite(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Association object linking institutions <-> sites."""

    __tablename__ = "institution_sites"

    institution_id: Mapped[int] = mapped_column(
        ForeignKey("institutions.id", ondelete="CASCADE"), nullable=False
    )
    site_id: Mapped[int] = mapped_column(
        ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("institution_id", "site_id", name="uq_institution_sites_institution_site"),
    )

    institution: Mapped[Institution] = relationship("Institution", back_populates="site_links")
    site: Mapped[Site] = relationship("Site", back_populates="institution_links", lazy="joined")
