"""
Unit tests for SQLAlchemyReadOnlyUnitOfWork guards.
"""

from __future__ import annotations

import pytest
from sqlalchemy import text

from staff_records.models import Site
from staff_records.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from staff_records.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.site import SiteFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(SiteFactory.build())
            uow.session.flush()
        session.rollback()

    def test_blocks_core_dml(self, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(text("DELETE FROM sites"))

    def test_allows_reads(self, db, session):
        with RWuow() as uow:
            uow.sites.add(SiteFactory.build())

        with ROuow() as uow:
            assert uow.session.query(Site).count() >= 1

    def test_disallows_commit_and_savepoints(self, db, session):
        with ROuow() as uow:
            with pytest.raises(RuntimeError, match="does not allow commit"):
                uow.commit()
            with pytest.raises(RuntimeError, match="does not support savepoints"):
                uow.savepoint()

    def test_guards_are_removed_on_exit(self, db, session):
        with ROuow():
            pass

        with RWuow() as uow:
            uow.sites.add(SiteFactory.build(name="After RO"))

        assert db.session.query(Site).filter_by(name="After RO").count() == 1
