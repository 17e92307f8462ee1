# staff_records/services/acts/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from staff_records.models.act import ACT_NAME_CONSTRAINT, AdministrativeAct
from staff_records.services._shared.base import BaseService
from staff_records.services._shared.dto import PageMeta
from staff_records.services._shared.errors import ConflictError, NotFoundError, violates
from staff_records.services.acts.dto import (
    ActCreateIn,
    ActListIn,
    ActListOut,
    ActOut,
    ActUpdateIn,
)
from staff_records.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)

ACT_NAME_TEMPLATE = "Resolution I.E. {name}-"
SEQUENCE_WIDTH = 4
DEFAULT_MAX_RETRIES = 5


def act_prefix(institution_name: str) -> str:
    return ACT_NAME_TEMPLATE.format(name=institution_name)


def format_act_name(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:0{SEQUENCE_WIDTH}d}"


class AdministrativeActService(BaseService):
    """
    Administrative acts with per-institution sequential names.

    The next number is one past the institution's highest ``sequence``; the
    name only renders it. The insert runs inside a SAVEPOINT. A concurrent
    writer that took the same number makes it violate
    ``uq_administrative_acts_name``; the savepoint is rolled back and the
    next attempt starts above the number that collided.
    """

    def __init__(self, *, max_retries: int = DEFAULT_MAX_RETRIES, **kwargs) -> None:
        super().__init__(**kwargs)
        self.max_retries = max(1, int(max_retries))

    def _insert_next(
        self, uow: SQLAlchemyUnitOfWork, *, institution_id: int, prefix: str, description: str | None
    ) -> AdministrativeAct:
        taken = 0
        for attempt in range(1, self.max_retries + 1):
            sequence = max(uow.acts.max_sequence(institution_id), taken) + 1
            name = format_act_name(prefix, sequence)
            try:
                with uow.savepoint():
                    return uow.acts.add(
                        AdministrativeAct(
                            name=name,
                            sequence=sequence,
                            institution_id=institution_id,
                            description=description,
                        )
                    )
            except IntegrityError as exc:
                if not (
                    violates(exc, ACT_NAME_CONSTRAINT) or violates(exc, "administrative_acts.name")
                ):
                    raise
                taken = sequence
                log.warning(
                    "Act name taken, recomputing",
                    extra={"act_name": name, "attempt": attempt, "institution_id": institution_id},
                )
        raise ConflictError(
            "AdministrativeAct",
            f"could not allocate a unique name after {self.max_retries} attempts",
        )

    def create(self, dto: ActCreateIn) -> ActOut:
        """
        Create an act named ``"Resolution I.E. {institution}-NNNN"``.

        :raises NotFoundError: Institution does not exist.
        :raises ConflictError: Every retry collided with a concurrent writer.
        """
        with self.rw_uow() as uow:
            institution = uow.institutions.get(dto.institution_id)
            if institution is None:
                raise NotFoundError("Institution", dto.institution_id)
            act = self._insert_next(
                uow,
                institution_id=institution.id,
                prefix=act_prefix(institution.name),
                description=dto.description,
            )
            out = ActOut.from_model(act)

        log.info(
            "Administrative act created",
            extra={"act_name": out.name, "institution_id": out.institution_id},
        )
        return out

    def get(self, act_id: int) -> ActOut:
        with self.ro_uow() as uow:
            act = uow.acts.get(act_id)
            if act is None:
                raise NotFoundError("AdministrativeAct", act_id)
            return ActOut.from_model(act)

    def list(self, dto: ActListIn) -> ActListOut:
        """List acts, newest first unless a sort is given."""
        with self.ro_uow() as uow:
            pagination = self.ensure_pagination(
                page=dto.pagination.page,
                limit=dto.pagination.limit,
                sort=dto.pagination.sort or ("-created_at",),
            )
            page = uow.acts.paginate(pagination, filters={"institution_id": dto.institution_id})
            return ActListOut(
                items=[ActOut.from_model(a) for a in page.items],
                meta=PageMeta(page=page.page, limit=page.limit, total=page.total),
            )

    def list_by_institution(self, institution_id: int) -> list[ActOut]:
        with self.ro_uow() as uow:
            if uow.institutions.get(institution_id) is None:
                raise NotFoundError("Institution", institution_id)
            return [ActOut.from_model(a) for a in uow.acts.list_by_institution(institution_id)]

    def update(self, dto: ActUpdateIn) -> ActOut:
        """Only the description is editable; the name is immutable."""
        with self.rw_uow() as uow:
            act = uow.acts.get(dto.id)
            if act is None:
                raise NotFoundError("AdministrativeAct", dto.id)
            uow.acts.update(act, description=dto.description)
            return ActOut.from_model(act)

    def delete(self, act_id: int) -> None:
        with self.rw_uow() as uow:
            act = uow.acts.get(act_id)
            if act is None:
                raise NotFoundError("AdministrativeAct", act_id)
            name = act.name
            uow.acts.delete(act)
        log.info("Administrative act deleted", extra={"act_name": name})
