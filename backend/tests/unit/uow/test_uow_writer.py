"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from staff_records.models import Site
from staff_records.uow import SQLAlchemyUnitOfWork
from tests.factories.site import SiteFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a site is added inside the context and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = db.session.query(Site).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.sites.add(SiteFactory.build())

        assert db.session.query(Site).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN nothing from the block is persisted.
        """
        initial = db.session.query(Site).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.sites.add(SiteFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(Site).count() == initial

    def test_savepoint_rolls_back_only_the_inner_step(self, db, session):
        """
        GIVEN a writer UoW with an earlier successful step
        WHEN a step inside ``savepoint()`` violates a constraint
        THEN only that step is undone and the outer work still commits.
        """
        from tests.factories.site import InstitutionFactory

        with SQLAlchemyUnitOfWork() as uow:
            uow.sites.add(SiteFactory.build(name="Kept"))
            uow.institutions.add(InstitutionFactory.build(name="Unique"))
            with pytest.raises(IntegrityError), uow.savepoint():
                uow.institutions.add(InstitutionFactory.build(name="Unique"))

        assert db.session.query(Site).filter_by(name="Kept").count() == 1
