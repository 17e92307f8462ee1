"""
Units of Work over the Flask-SQLAlchemy scoped session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from staff_records.core.extensions import db
from staff_records.repositories import (
    AcademicRecordRepository,
    AdministrativeActRepository,
    EmployeeCommentRepository,
    EmployeeRepository,
    InstitutionRepository,
    InstitutionSiteRepository,
    ShiftRepository,
    SiteAssignmentRepository,
    SiteRepository,
    SiteShiftRepository,
    UserRepository,
)
from staff_records.uow.base import UnitOfWork

log = logging.getLogger(__name__)

# First SQL keyword of statements a read-only scope refuses to send
WRITE_KEYWORDS = frozenset(
    {
        "insert",
        "update",
        "delete",
        "merge",
        "upsert",
        "replace",
        "alter",
        "create",
        "drop",
        "truncate",
        "grant",
        "revoke",
    }
)
ISOLATION_LEVELS = frozenset(
    {"READ UNCOMMITTED", "READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"}
)


class _Repositories:
    """Every repository the services use, sharing ``session``."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.employees = EmployeeRepository(session)
        self.academic_records = AcademicRecordRepository(session)
        self.comments = EmployeeCommentRepository(session)
        self.sites = SiteRepository(session)
        self.shifts = ShiftRepository(session)
        self.site_shifts = SiteShiftRepository(session)
        self.institutions = InstitutionRepository(session)
        self.institution_sites = InstitutionSiteRepository(session)
        self.assignments = SiteAssignmentRepository(session)
        self.acts = AdministrativeActRepository(session)


class SQLAlchemyUnitOfWork(_Repositories, UnitOfWork):
    """
    Read-write scope: commit on clean exit, roll back on any exception.

    The transaction starts lazily with the first statement, so entering the
    block costs nothing.
    """

    def __init__(self) -> None:
        super().__init__(db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def savepoint(self) -> SessionTransaction:
        """``SAVEPOINT`` scope; an exception inside it keeps the earlier steps."""
        return self.session.begin_nested()


class SQLAlchemyReadOnlyUnitOfWork(_Repositories, UnitOfWork):
    """
    Read scope that can never write.

    Parameters
    ----------
    isolation_level:
        Isolation for the transaction this scope opens (PostgreSQL/MySQL only).
    enforce_db_readonly:
        Also send ``SET TRANSACTION READ ONLY`` where the backend supports it.

    Notes
    -----
    Writes are refused twice: a ``before_flush`` hook rejects pending ORM
    changes and a ``before_cursor_execute`` hook rejects DML/DDL text. Both
    raise ``RuntimeError``. On SQLite only the hooks apply. When the session
    is already inside a transaction the scope joins it, and the ``SET
    TRANSACTION`` directives are skipped because they must come first.
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._own_txn: SessionTransaction | None = None
        self._hooks: list[tuple[Any, str, Callable[..., Any]]] = []

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._own_txn = self.session.begin()
        except InvalidRequestError:
            self._own_txn = None

        connection = self.session.connection()
        self._hook(self.session, "before_flush", self._refuse_flush)
        self._hook(connection, "before_cursor_execute", self._refuse_write_sql)

        if self._own_txn is not None and connection.dialect.name in ("postgresql", "mysql", "mariadb"):
            self._apply_directives()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._own_txn is not None:
                self.session.rollback()
        finally:
            self._own_txn = None
            for target, name, fn in reversed(self._hooks):
                with suppress(InvalidRequestError):
                    event.remove(target, name, fn)
            self._hooks.clear()

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    def savepoint(self) -> SessionTransaction:
        raise RuntimeError("Read-only UnitOfWork does not support savepoints.")

    # --------------------------------- Guards ---------------------------------

    def _hook(self, target: Any, name: str, fn: Callable[..., Any]) -> None:
        event.listen(target, name, fn)
        self._hooks.append((target, name, fn))

    @staticmethod
    def _refuse_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked (pending changes).")

    @staticmethod
    def _refuse_write_sql(conn, cursor, statement, parameters, context, executemany) -> None:
        keyword = statement.lstrip().split(None, 1)[0].lower() if statement.strip() else ""
        if keyword in WRITE_KEYWORDS:
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

    def _apply_directives(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.strip().upper()
                if level not in ISOLATION_LEVELS:
                    raise ValueError(f"Unknown isolation level {self.isolation_level!r}")
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION failed; relying on guards only", extra={"error": str(exc)})
