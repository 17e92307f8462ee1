# staff_records/services/acts/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from staff_records.models.act import AdministrativeAct
from staff_records.services._shared.dto import PageMeta, PaginationIn


@dataclass(frozen=True, slots=True)
class ActCreateIn:
    """
    Input DTO for a new administrative act.

    The name is never supplied by the caller; it is generated from the
    institution name and the next free sequence number.

    :param institution_id: Issuing institution.
    :type institution_id: int
    :param description: Optional free text.
    :type description: str | None
    """

    institution_id: int
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ActListIn:
    pagination: PaginationIn = field(default_factory=PaginationIn)
    institution_id: int | None = None


@dataclass(frozen=True, slots=True)
class ActUpdateIn:
    id: int
    description: str | None


@dataclass(frozen=True, slots=True)
class ActOut:
    id: int
    name: str
    sequence: int
    institution_id: int
    institution_name: str
    description: str | None
    created_at: datetime | None

    @classmethod
    def from_model(cls, act: AdministrativeAct) -> ActOut:
        return cls(
            id=act.id,
            name=act.name,
            sequence=act.sequence,
            institution_id=act.institution_id,
            institution_name=act.institution.name,
            description=act.description,
            created_at=act.created_at,
        )


@dataclass(frozen=True, slots=True)
class ActListOut:
    items: list[ActOut]
    meta: PageMeta
