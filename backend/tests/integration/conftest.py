"""Accounts and headers shared by the HTTP-level tests."""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from tests.helpers.auth import auth_headers


@pytest.fixture()
def super_admin(session):
    user = UserFactory(super_admin=True)
    session.commit()
    return user


@pytest.fixture()
def admin(session):
    user = UserFactory(admin=True)
    session.commit()
    return user


@pytest.fixture()
def gestor(session):
    user = UserFactory()
    session.commit()
    return user


@pytest.fixture()
def as_super_admin(app, super_admin):
    return auth_headers(app, super_admin)


@pytest.fixture()
def as_admin(app, admin):
    return auth_headers(app, admin)


@pytest.fixture()
def as_gestor(app, gestor):
    return auth_headers(app, gestor)
