"""Persistence primitives shared by every repository.

Repositories here only read and stage rows. They flush so generated keys and
constraint violations show up inside the caller's transaction, but they never
commit or roll back: the Unit of Work that owns the session does that.

Listing is whitelist driven. A repository names the columns clients may sort
or filter on (``_sortable_fields`` / ``_filterable_fields``) and the columns
an update may touch (``_updatable_fields``); anything else is ignored or
rejected.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from staff_records.core.extensions import db

E = TypeVar("E")


@dataclass(slots=True)
class Pagination:
    """Requested page window; ``sort`` holds ``-``-prefixed tokens for DESC."""

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    items: Sequence[E]
    total: int
    page: int
    limit: int


def order_clauses(
    columns: Mapping[str, InstrumentedAttribute[Any]], tokens: Iterable[str]
) -> list[Any]:
    """Translate sort tokens into ``ORDER BY`` clauses.

    :param columns: Public name to column mapping; tokens naming anything
        else are dropped.
    :type columns: Mapping[str, InstrumentedAttribute]
    :param tokens: Tokens such as ``["-created_at", "name"]``.
    :type tokens: Iterable[str]
    :returns: Clauses in token order.
    :rtype: list
    """
    clauses: list[Any] = []
    for token in tokens:
        token = token.strip()
        descending = token.startswith("-")
        column = columns.get(token.lstrip("-"))
        if column is not None:
            clauses.append(column.desc() if descending else column.asc())
    return clauses


class BaseRepository(Generic[E]):
    """Single-model repository bound to the Unit of Work session.

    Subclasses set ``model`` and override the whitelist hooks they need.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        # Repositories built outside a UoW fall back to the request session
        return self._session if self._session is not None else cast(Session, db.session)

    # ------------------------------ Whitelists -------------------------------

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any] | None) -> Select[Any]:
        """AND together equality filters on whitelisted keys; ``None`` means "any"."""
        columns = self._filterable_fields()
        for key, value in (filters or {}).items():
            if key in columns and value is not None:
                stmt = stmt.where(columns[key] == value)
        return stmt

    # -------------------------------- Writes ---------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush; an ``IntegrityError`` surfaces here."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def update(self, instance: E, **fields: Any) -> E:
        """Set whitelisted attributes through ``setattr`` so model validators run.

        :raises ValueError: A key is not in ``_updatable_fields``.
        """
        rejected = sorted(set(fields) - self._updatable_fields())
        if rejected:
            raise ValueError(f"Fields not updatable on {self.model.__name__}: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.session.flush()
        return instance

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.session.flush()

    def flush(self) -> None:
        self.session.flush()

    # -------------------------------- Reads ----------------------------------

    def get(self, entity_id: Any) -> E | None:
        return self.session.get(self.model, entity_id)

    def paginate(
        self, pagination: Pagination, *, filters: Mapping[str, Any] | None = None
    ) -> Page[E]:
        """Return one page plus the unpaged total.

        The primary key always ends the ``ORDER BY`` so pages never overlap
        when the requested sort has ties.
        """
        page = max(int(pagination.page), 1)
        limit = max(int(pagination.limit), 1)

        stmt = self._where(select(self.model), filters)
        total = self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        ordered = stmt.order_by(
            *order_clauses(self._sortable_fields(), pagination.sort),
            self.model.id.asc(),  # type: ignore[attr-defined]
        )
        rows = self.session.execute(ordered.limit(limit).offset((page - 1) * limit))
        return Page(items=list(rows.scalars().unique().all()), total=int(total), page=page, limit=limit)
