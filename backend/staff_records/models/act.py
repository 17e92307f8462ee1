"""Administrative acts (resolutions) issued per institution."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staff_records.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .institution import Institution

ACT_NAME_CONSTRAINT = "uq_administrative_acts_name"


class AdministrativeAct(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Numbered resolution, e.g. ``"Resolution I.E. San Jose-0003"``.

    ``name`` is generated by the service and guarded by a unique constraint;
    ``sequence`` stores the parsed trailing number for ordering.
    """

    __tablename__ = "administrative_acts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    institution_id: Mapped[int] = mapped_column(
        ForeignKey("institutions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("name", name=ACT_NAME_CONSTRAINT),)

    institution: Mapped[Institution] = relationship("Institution", lazy="joined")
