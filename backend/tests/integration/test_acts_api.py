"""Administrative act endpoints under /api/v1/administrative-acts."""

from __future__ import annotations

import pytest

from tests.factories.act import AdministrativeActFactory
from tests.factories.site import InstitutionFactory
from tests.helpers.assertions import assert_ok, assert_problem
from tests.helpers.http import API, build_url


@pytest.fixture()
def institution(session):
    inst = InstitutionFactory(name="Normal Superior")
    session.commit()
    return inst


def _create(client, headers, institution_id, **extra):
    return client.post(
        f"{API}/administrative-acts",
        json={"institution_id": institution_id, **extra},
        headers=headers,
    )


def test_acts_are_numbered_sequentially(client, institution, as_admin):
    first = assert_ok(_create(client, as_admin, institution.id), status=201)
    second = assert_ok(
        _create(client, as_admin, institution.id, description="Asignacion academica"), status=201
    )

    assert first["name"] == "Resolution I.E. Normal Superior-0001"
    assert second["name"] == "Resolution I.E. Normal Superior-0002"
    assert second["description"] == "Asignacion academica"
    assert second["institution_name"] == "Normal Superior"


def test_client_cannot_choose_the_name(client, institution, as_admin):
    data = assert_ok(
        _create(client, as_admin, institution.id, name="Resolution I.E. Normal Superior-0500"),
        status=201,
    )

    assert data["name"].endswith("-0001")


def test_unknown_institution(client, as_admin):
    assert_problem(_create(client, as_admin, 4040), 404, code="not_found")


def test_gestor_reads_but_does_not_create(client, session, institution, as_gestor):
    AdministrativeActFactory(institution=institution, sequence=1)
    session.commit()

    assert_problem(_create(client, as_gestor, institution.id), 403)
    listed = assert_ok(
        client.get(f"{API}/administrative-acts/by-institution/{institution.id}", headers=as_gestor)
    )
    assert len(listed) == 1


def test_list_carries_pagination_meta(client, session, institution, as_admin):
    for n in range(1, 6):
        AdministrativeActFactory(institution=institution, sequence=n)
    session.commit()

    resp = client.get(
        build_url("administrative-acts", page=2, limit=2, institution_id=institution.id),
        headers=as_admin,
    )

    data = assert_ok(resp)
    assert len(data) == 2
    assert resp.get_json()["meta"] == {"total": 5, "page": 2, "limit": 2}


def test_update_and_delete(client, session, institution, as_admin, as_super_admin):
    act = AdministrativeActFactory(institution=institution, sequence=1)
    session.commit()
    url = f"{API}/administrative-acts/{act.id}"

    updated = assert_ok(client.patch(url, json={"description": "Corregida"}, headers=as_admin))
    assert updated["description"] == "Corregida"

    assert_problem(client.delete(url, headers=as_admin), 403)
    assert assert_ok(client.delete(url, headers=as_super_admin))["deleted"] is True
    assert_problem(client.get(url, headers=as_admin), 404)
